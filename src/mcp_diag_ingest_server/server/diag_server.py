"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (detect, report, parse a capture file)
- Resources: addressable data blobs (sample captures, schemas, capture text)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mcp_diag_ingest_server.server.diag_server
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_diag_ingest_server.prompts.registry import register_prompts
from mcp_diag_ingest_server.resources.registry import register_resources
from mcp_diag_ingest_server.tools.reports import (
    detect_file_type_impl,
    generate_report_impl,
    parse_capture_impl,
)

LOGGER = logging.getLogger(__name__)

LOG_LEVEL_ENV = "DIAG_INGEST_LOG_LEVEL"


def configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; stdout carries the protocol.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


mcp = FastMCP("diag-ingest", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def detect_file_type(path: str) -> dict[str, Any]:
    """Classify a capture file as jfr, ttop, iostat, archive or unknown.

    Parameters
    ----------
    path:
        Path to the file, relative to DIAG_INGEST_BASE_DIR (or absolute inside it).
        Archives (.zip, .tar, .tar.gz, .tgz, .gz) are classified by member names.

    Returns
    -------
    dict:
        {"path": str, "type": str}
    """
    return await detect_file_type_impl(path=path)


@mcp.tool()
async def generate_report(path: str, file_type: str | None = None) -> dict[str, Any]:
    """Return summary statistics for a capture file.

    Parameters
    ----------
    path:
        Path to the file, relative to DIAG_INGEST_BASE_DIR.
    file_type:
        Optional override ("ttop" or "iostat") to skip detection.

    Returns
    -------
    dict:
        {"type", "file_name", "file_size", "generated_at", "summary", "analysis", ...}
        plus per-type statistics (snapshot_count, unique_threads, peak_cpu_usage, ...).
    """
    return await generate_report_impl(path=path, file_type=file_type)


@mcp.tool()
async def parse_capture(
    path: str,
    file_type: str | None = None,
    max_snapshots: int | None = None,
) -> dict[str, Any]:
    """Return the parsed snapshots of a ttop or iostat capture.

    Parameters
    ----------
    path:
        Path to the file, relative to DIAG_INGEST_BASE_DIR.
    file_type:
        Optional override ("ttop" or "iostat") to skip detection.
    max_snapshots:
        Maximum number of snapshots returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"type": str, "snapshot_count": int, "snapshots": list[dict], "truncated": bool}
    """
    return await parse_capture_impl(path=path, file_type=file_type, max_snapshots=max_snapshots)


def main() -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
