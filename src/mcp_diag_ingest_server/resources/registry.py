"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_diag_ingest_server.core.detector import ARCHIVE_EXTENSIONS
from mcp_diag_ingest_server.core.formats.fields import DECODE_ERRORS, TEXT_ENCODING
from mcp_diag_ingest_server.core.paths import BASE_DIR_ENV, base_dir, safe_resolve
from mcp_diag_ingest_server.core.summary import IOStatSummary, TTopSummary

SAMPLE_TTOP = (
    "top - 12:02:03 up  3:07,  0 users,  load average: 3.18, 1.16, 0.41\n"
    "Threads: 262 total,   6 running, 256 sleeping,   0 stopped,   0 zombie\n"
    "%Cpu(s): 41.4 us,  2.4 sy,  0.0 ni, 55.9 id,  0.0 wa,  0.0 hi,  0.2 si,  0.0 st\n"
    "MiB Mem :  16008.2 total,  10953.7 free,   3713.5 used,   1341.1 buff/cache\n"
    "MiB Swap:      0.0 total,      0.0 free,      0.0 used.  12032.0 avail Mem\n"
    "\n"
    "    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND\n"
    "   1234 dremio    20   0   12.3g   4.1g  35512 R  99.9  26.0   1:02.33 C2 CompilerThre\n"
    "   1250 dremio    20   0   12.3g   4.1g  35512 S   5.0  26.0   0:10.01 qtp1-47\n"
)

SAMPLE_IOSTAT = (
    "Linux 5.10.0-32-cloud-amd64 (coordinator-0) \t09/04/24 \t_x86_64_\t(4 CPU)\n"
    "\n"
    "09/04/24 12:07:20\n"
    "avg-cpu:  %user   %nice %system %iowait  %steal   %idle\n"
    "           2.36    0.00    0.40    0.04    0.01   97.20\n"
    "\n"
    "Device            r/s     rkB/s   rrqm/s  %rrqm r_await rareq-sz     w/s     wkB/s"
    "   wrqm/s  %wrqm w_await wareq-sz     d/s     dkB/s   drqm/s  %drqm d_await dareq-sz"
    "     f/s f_await  aqu-sz  %util\n"
    "sda              2.08     94.38     0.31  13.07    0.89    45.47    9.58    210.39"
    "     5.55  36.68    2.74    21.96    0.09    377.20     0.00   0.00    0.95  4151.86"
    "    3.94    0.06    0.03   1.39\n"
)


def _read_text(path: Path) -> str:
    return path.read_text(encoding=TEXT_ENCODING, errors=DECODE_ERRORS)


def _resolve_text_capture(path: str) -> Path:
    """Resolve a capture path and refuse binary/archive files."""
    resolved = safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    suffix = resolved.suffix.lower()
    if suffix in ARCHIVE_EXTENSIONS or suffix == ".jfr":
        raise ValueError(f"Refusing to read binary capture as text: {resolved.name}")
    return resolved


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://diag-ingest/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        return (
            "Resources:\n"
            "- app://diag-ingest/help\n"
            "- app://diag-ingest/examples/ttop\n"
            "- app://diag-ingest/examples/iostat\n"
            "- app://diag-ingest/schemas/ttop-summary\n"
            "- app://diag-ingest/schemas/iostat-summary\n"
            f"- capture://{{path}} (restricted to {BASE_DIR_ENV}; text captures only)\n"
            f"\nBase directory: {base_dir()}\n"
        )

    @mcp.resource("app://diag-ingest/examples/ttop")
    def sample_ttop() -> str:
        """Return a tiny ttop capture for demos and tests."""
        return SAMPLE_TTOP

    @mcp.resource("app://diag-ingest/examples/iostat")
    def sample_iostat() -> str:
        """Return a tiny iostat capture for demos and tests."""
        return SAMPLE_IOSTAT

    @mcp.resource("app://diag-ingest/schemas/ttop-summary")
    def ttop_summary_schema() -> dict[str, Any]:
        """Return the JSON schema for ttop report summaries."""
        return TTopSummary.model_json_schema()

    @mcp.resource("app://diag-ingest/schemas/iostat-summary")
    def iostat_summary_schema() -> dict[str, Any]:
        """Return the JSON schema for iostat report summaries."""
        return IOStatSummary.model_json_schema()

    @mcp.resource("capture://{path}")
    async def read_capture_text(path: str) -> str:
        """Read a text capture from within DIAG_INGEST_BASE_DIR."""
        p = _resolve_text_capture(path)
        return await asyncio.to_thread(_read_text, p)
