"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def analyze_capture(path: str, focus: str = "") -> list[dict[str, Any]]:
        """Build a prompt that analyzes a ttop or iostat capture."""
        focus_line = f"Focus area from the operator: {focus}\n\n" if focus else ""
        return [
            {
                "role": "system",
                "content": (
                    "You are a performance engineer reviewing system diagnostic captures. "
                    "Base every statement on tool output; do not invent figures. "
                    "If the data is insufficient, say so."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Analyze the capture using the tools in this order:\n"
                    f"1) detect_file_type with path={path}\n"
                    "2) generate_report with the same path\n"
                    "3) parse_capture only if per-snapshot detail is needed "
                    "(keep max_snapshots small)\n\n"
                    f"{focus_line}"
                    "Return this structure:\n"
                    "1) What the capture covers (type, time span, snapshot count)\n"
                    "2) Hot spots (busiest threads, or saturated devices / high iowait)\n"
                    "3) Likely bottleneck (1-2 sentences; say 'Unknown' if unclear)\n"
                    "4) Next actions (2-4 bullets)\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": "Optional: if you need raw context, you can read the capture via:",
                    },
                    {"type": "resource", "uri": f"capture://{path}"},
                ],
            },
        ]

    @mcp.prompt()
    def explain_parse_error(path: str, error: str) -> list[dict[str, Any]]:
        """Build a prompt that explains an iostat structure error to an operator."""
        return [
            {
                "role": "system",
                "content": (
                    "Explain capture parsing failures plainly. iostat captures must repeat: "
                    "a MM/DD/YY HH:MM:SS line, an avg-cpu header with one line of 6 values, "
                    "then a Device header followed by rows of 23 columns."
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Parsing {path} failed with:\n{error}\n\n"
                    "Read the lines around the reported line number and explain what is "
                    "malformed and how the capture should be re-collected "
                    "(e.g. `iostat -x -t 1`)."
                ),
            },
            {
                "role": "user",
                "content": [{"type": "resource", "uri": f"capture://{path}"}],
            },
        ]
