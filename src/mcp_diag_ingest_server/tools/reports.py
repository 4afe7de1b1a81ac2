"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any

from mcp_diag_ingest_server.core.models import (
    IOStatReportData,
    IOStatSnapshot,
    TTopReportData,
    TTopSnapshot,
)
from mcp_diag_ingest_server.core.paths import safe_resolve
from mcp_diag_ingest_server.core.report_service import (
    detect_capture,
    generate_report,
    parse_capture,
)

DEFAULT_MAX_SNAPSHOTS = 500
HARD_MAX_SNAPSHOTS = 10000


def _jsonable(value: Any) -> Any:
    """Convert datetimes (recursively) into ISO-8601 strings."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def snapshot_to_dict(snapshot: TTopSnapshot | IOStatSnapshot) -> dict[str, Any]:
    """Convert a parsed snapshot into a JSON-serializable dict."""
    return _jsonable(asdict(snapshot))


def report_data_to_dict(
    data: TTopReportData | IOStatReportData, *, max_snapshots: int
) -> dict[str, Any]:
    """Serialize parsed report data, keeping at most max_snapshots snapshots."""
    out: dict[str, Any] = {
        "snapshot_count": len(data.snapshots),
        "snapshots": [snapshot_to_dict(s) for s in data.snapshots[:max_snapshots]],
        "truncated": len(data.snapshots) > max_snapshots,
    }
    if isinstance(data, IOStatReportData):
        out["system_info"] = data.system_info
    return out


async def detect_file_type_impl(*, path: str) -> dict[str, Any]:
    """Implementation for the `detect_file_type` MCP tool."""
    resolved = safe_resolve(path)
    detected = await detect_capture(resolved)
    return {"path": str(resolved), "type": detected.value}


async def generate_report_impl(*, path: str, file_type: str | None = None) -> dict[str, Any]:
    """Implementation for the `generate_report` MCP tool."""
    resolved = safe_resolve(path)
    return await generate_report(resolved, file_type=file_type)


async def parse_capture_impl(
    *,
    path: str,
    file_type: str | None = None,
    max_snapshots: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `parse_capture` MCP tool.

    Notes
    -----
    - max_snapshots defaults to DEFAULT_MAX_SNAPSHOTS and is capped at HARD_MAX_SNAPSHOTS.
    - snapshot_count always reflects the full capture, even when truncated.
    """
    if max_snapshots is None:
        max_snapshots = DEFAULT_MAX_SNAPSHOTS
    if max_snapshots <= 0:
        raise ValueError("max_snapshots must be > 0")
    if max_snapshots > HARD_MAX_SNAPSHOTS:
        max_snapshots = HARD_MAX_SNAPSHOTS

    resolved = safe_resolve(path)
    detected, data = await parse_capture(resolved, file_type=file_type)
    out = {"type": detected.value}
    out.update(report_data_to_dict(data, max_snapshots=max_snapshots))
    return out
