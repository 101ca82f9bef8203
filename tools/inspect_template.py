#!/usr/bin/env python3
"""List the placeholder positions a template exposes, grouped by page."""

import argparse
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from scorecard.config import get_config
from scorecard.services.report import ReportDocumentAssembler
from scorecard.services.report.document_assembler import positions_by_page
from scorecard.services.report.drawing import FontLibrary
from scorecard.utils.exceptions import ReportError
from scorecard.utils.json import dumps


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dry-scan a template for placeholder tokens")
    parser.add_argument("template", type=Path, nargs="?", default=get_config().TEMPLATE_PATH)
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        positions = ReportDocumentAssembler(FontLibrary({})).locate(args.template.read_bytes())
    except (OSError, ReportError) as exc:
        print(f"Cannot scan template: {exc}", file=sys.stderr)
        return 1

    report = [
        {"page": page_index, "placeholders": [asdict(position) for position in page_positions]}
        for page_index, page_positions in positions_by_page(positions)
    ]
    sys.stdout.write(dumps(report, indent=True).decode())
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
