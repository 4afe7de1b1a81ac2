from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from mcp_diag_ingest_server.core.formats import StructuralError
from mcp_diag_ingest_server.core.models import DetectedType
from mcp_diag_ingest_server.core.report_service import detect_capture, generate_report

_REPORT_KEYS = (
    "snapshot_count",
    "unique_threads",
    "peak_threads",
    "unique_devices",
    "peak_cpu_usage",
    "peak_device_queue_size",
    "system_info",
)


def _parse_type(s: str) -> DetectedType:
    try:
        return DetectedType(s.strip().lower())
    except ValueError as e:
        allowed = ", ".join(t.value for t in DetectedType)
        raise argparse.ArgumentTypeError(f"Invalid type. Allowed: {allowed}") from e


def _print_report(report: dict) -> None:
    print(f"{report['file_name']}: {report['type']} ({report['file_size']} bytes)")
    print(report["summary"])
    for key in _REPORT_KEYS:
        if key in report:
            print(f"  {key}: {report[key]}")
    print(report["analysis"])


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Detect and summarize ttop / iostat diagnostic captures."
    )
    p.add_argument("path")
    p.add_argument("--type", dest="file_type", type=_parse_type, default=None,
                   help="Skip detection and parse as this type (ttop, iostat, ...)")
    p.add_argument("--detect-only", action="store_true", help="Only print the detected type")
    p.add_argument("--json", dest="as_json", action="store_true", help="Print the report as JSON")
    p.add_argument("--max-bytes", type=int, default=None,
                   help="Refuse files larger than this (default: DIAG_INGEST_MAX_BYTES or 256 MiB)")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    path = Path(args.path)

    try:
        if args.detect_only:
            detected = asyncio.run(detect_capture(path, max_bytes=args.max_bytes))
            print(detected.value)
            return
        report = asyncio.run(
            generate_report(path, file_type=args.file_type, max_bytes=args.max_bytes)
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except StructuralError as e:
        print(f"Could not generate report: {e}", file=sys.stderr)
        raise SystemExit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.as_json:
        print(json.dumps(report, indent=2))
    else:
        _print_report(report)


if __name__ == "__main__":
    main()
