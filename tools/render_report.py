#!/usr/bin/env python3
"""Render a scorecard report to a file without starting the web server."""

import argparse
import datetime as dt
import json
import sys
from pathlib import Path
from typing import Optional

from scorecard.config import get_config
from scorecard.services.report import ReportService
from scorecard.services.scoring import ScorecardData
from scorecard.utils.exceptions import InvalidScorecardData, ReportGenerationFailed
from scorecard.utils.logging import configure_logging


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    config = get_config()
    parser = argparse.ArgumentParser(description="Render a scorecard report PDF from JSON data")
    parser.add_argument("data", type=Path, help="JSON file with business_name, city, total_score, pillar_scores")
    parser.add_argument("output", type=Path, help="Destination PDF path")
    parser.add_argument("--template", type=Path, default=config.TEMPLATE_PATH, help="Template PDF")
    parser.add_argument("--fonts", type=Path, default=config.FONTS_DIR, help="Directory holding the .ttf files")
    parser.add_argument("--cta-url", default=config.CTA_URL, help="Link target for the call-to-action button")
    parser.add_argument("--date", type=dt.date.fromisoformat, help="Report date as YYYY-MM-DD (default today)")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        payload = json.loads(args.data.read_text(encoding="utf-8"))
        data = ScorecardData.from_payload(payload)
    except (OSError, json.JSONDecodeError, InvalidScorecardData) as exc:
        print(f"Invalid scorecard data: {exc}", file=sys.stderr)
        return 2

    service = ReportService(args.template, args.fonts, link_url=args.cta_url)
    try:
        pdf_bytes = service.render(data, report_date=args.date)
    except ReportGenerationFailed as exc:
        print(str(exc), file=sys.stderr)
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(pdf_bytes)
    print(f"Wrote {len(pdf_bytes)} bytes to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
