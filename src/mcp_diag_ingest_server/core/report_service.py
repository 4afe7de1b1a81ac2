"""Capture loading, detection, parsing and report generation.

This module is the main integration point that reads capture files and returns
structured data or JSON-ready reports.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiofiles

from .detector import detect_file_type
from .formats import parse_iostat, parse_ttop
from .models import DetectedType, IOStatReportData, TTopReportData
from .summary import summarize_iostat, summarize_ttop

logger = logging.getLogger(__name__)

MAX_BYTES_ENV = "DIAG_INGEST_MAX_BYTES"
DEFAULT_MAX_BYTES = 256 * 1024 * 1024

ReportData = TTopReportData | IOStatReportData

PARSEABLE_TYPES = (DetectedType.TTOP, DetectedType.IOSTAT)


def resolve_max_bytes(max_bytes: int | None) -> int:
    """Return the input size bound (explicit value, env override, or default)."""
    if max_bytes is not None:
        if max_bytes < 1:
            raise ValueError("max_bytes must be >= 1")
        return max_bytes

    env = os.getenv(MAX_BYTES_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_BYTES_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_BYTES_ENV} must be >= 1")
        return value

    return DEFAULT_MAX_BYTES


def coerce_file_type(value: str | DetectedType | None) -> DetectedType | None:
    """Parse a user-supplied type tag (case-insensitive)."""
    if value is None or isinstance(value, DetectedType):
        return value
    try:
        return DetectedType(value.strip().lower())
    except ValueError as e:
        valid = ", ".join(t.value for t in DetectedType)
        raise ValueError(f"Unknown file type '{value}'. Valid values: {valid}.") from e


async def read_capture(path: str | Path, *, max_bytes: int | None = None) -> bytes:
    """Read a whole capture file into memory, bounded by max_bytes."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Capture file not found: {p}")

    limit = resolve_max_bytes(max_bytes)
    size = p.stat().st_size
    if size > limit:
        raise ValueError(f"Capture file is {size} bytes; limit is {limit} bytes")

    async with aiofiles.open(p, mode="rb") as f:
        content = await f.read(limit + 1)
    # The file may have grown since stat().
    if len(content) > limit:
        raise ValueError(f"Capture file grew while reading; limit is {limit} bytes")
    return content


def parse_content(file_type: DetectedType, content: bytes) -> ReportData:
    """Run the parser matching file_type over content."""
    if file_type == DetectedType.TTOP:
        return parse_ttop(content)
    if file_type == DetectedType.IOSTAT:
        return parse_iostat(content)
    raise ValueError(f"No parser for file type '{file_type.value}'")


async def detect_capture(path: str | Path, *, max_bytes: int | None = None) -> DetectedType:
    """Read a file and classify it."""
    p = Path(path)
    content = await read_capture(p, max_bytes=max_bytes)
    return detect_file_type(p.name, content)


async def parse_capture(
    path: str | Path,
    *,
    file_type: str | DetectedType | None = None,
    max_bytes: int | None = None,
) -> tuple[DetectedType, ReportData]:
    """Read, detect (unless forced) and parse a capture file."""
    p = Path(path)
    forced = coerce_file_type(file_type)
    content = await read_capture(p, max_bytes=max_bytes)
    detected = forced or detect_file_type(p.name, content)
    if detected not in PARSEABLE_TYPES:
        raise ValueError(f"File type '{detected.value}' cannot be parsed")

    data = await asyncio.to_thread(parse_content, detected, content)
    return detected, data


async def generate_report(
    path: str | Path,
    *,
    file_type: str | DetectedType | None = None,
    max_bytes: int | None = None,
) -> dict[str, Any]:
    """Build a JSON-serializable summary report for a capture file.

    JFR, archive and unknown captures get a basic report without a parse step.
    IOStat structure errors propagate as StructuralError.
    """
    p = Path(path)
    forced = coerce_file_type(file_type)
    content = await read_capture(p, max_bytes=max_bytes)
    detected = forced or detect_file_type(p.name, content)

    report: dict[str, Any] = {
        "type": detected.value,
        "file_name": p.name,
        "file_size": len(content),
        "generated_at": datetime.now(UTC).isoformat(),
    }

    if detected == DetectedType.TTOP:
        data = await asyncio.to_thread(parse_ttop, content)
        report.update(summarize_ttop(data).model_dump())
    elif detected == DetectedType.IOSTAT:
        data = await asyncio.to_thread(parse_iostat, content)
        report.update(summarize_iostat(data).model_dump())
    else:
        report["summary"] = f"{detected.value.upper()} file ({len(content)} bytes)"
        report["analysis"] = "No structured parser is available for this file type."

    logger.info("Generated %s report for %s", detected.value, p.name)
    return report
