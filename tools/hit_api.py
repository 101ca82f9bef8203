#!/usr/bin/env python3
"""Call a running scorecard backend from the host shell and save any PDF it returns."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import requests

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hit the running scorecard API")
    parser.add_argument("path", help="API path, e.g. /api/health or /api/reports/render")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Hostname (default 127.0.0.1)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port (default 8000)")
    parser.add_argument("--method", default="GET", help="HTTP method (GET, POST, etc.)")
    parser.add_argument("--json", dest="json_payload", help="JSON payload for POST requests")
    parser.add_argument("--json-file", type=Path, help="Read the JSON payload from a file")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("report.pdf"),
        help="Where to write a PDF response (default report.pdf)",
    )
    return parser.parse_args(argv)


def _load_payload(args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    if args.json_file:
        return json.loads(args.json_file.read_text(encoding="utf-8"))
    if args.json_payload:
        return json.loads(args.json_payload)
    return None


def main() -> int:
    args = parse_args()
    url = f"http://{args.host}:{args.port}{args.path}"

    try:
        data = _load_payload(args)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Invalid JSON payload: {exc}", file=sys.stderr)
        return 2

    try:
        response = requests.request(args.method.upper(), url, json=data)
    except requests.RequestException as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1

    print(f"{response.status_code} {response.reason}")
    content_type = response.headers.get("content-type", "")
    if "application/pdf" in content_type:
        args.output.write_bytes(response.content)
        print(f"Wrote {len(response.content)} bytes to {args.output}")
        return 0
    if "application/json" in content_type:
        try:
            print(json.dumps(response.json(), indent=2, sort_keys=True))
            return 0 if response.ok else 1
        except json.JSONDecodeError:
            pass
    print(response.text)
    return 0 if response.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
