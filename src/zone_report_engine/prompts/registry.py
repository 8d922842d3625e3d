"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from zone_report_engine.core.models import SEVERITY_DESCENDING


def _format_levels(levels: Sequence[str] | str) -> str:
    """Return known level names, highest first, as a JSON array literal."""
    raw = levels.split(",") if isinstance(levels, str) else levels
    wanted = {str(s).strip().lower() for s in raw}
    return json.dumps([s.value for s in SEVERITY_DESCENDING if s.value in wanted])


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def summarize_result(test_id: str) -> list[dict[str, Any]]:
        """Build a prompt that summarizes a stored test result."""
        return [
            {
                "role": "system",
                "content": (
                    "You are a precise DNS operations assistant. Summarize zone test results "
                    "clearly and concisely. Group findings by module and mention the highest "
                    "severity first."
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Summarize this zone test result:"},
                    {"type": "resource", "uri": f"result://{test_id}"},
                ],
            },
        ]

    @mcp.prompt()
    def triage_zone_result(
        test_id: str,
        levels: Sequence[str] | str = ("critical", "error", "warning"),
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        """Build a prompt for structured triage of a zone test result."""
        call_lines = [f"- test_id: {test_id}", f"- levels: {_format_levels(levels)}"]
        if search:
            call_lines.append(f"- search: {search}")
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a DNS operations assistant triaging zone test results. "
                    "Provide concise, evidence-based summaries. "
                    "Do not invent details; if the evidence is insufficient, say so."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Triage the zone using view_result. Follow this workflow:\n"
                    "- Always call view_result first with the parameters below.\n"
                    "- Levels must be a list of strings, e.g., [\"error\", \"warning\"].\n"
                    "- If found is false, report the alert message and stop.\n"
                    "- Quote only messages returned by the tool; do not fabricate findings.\n\n"
                    "Call view_result with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Overall state (counts per level)\n"
                    "2) Problems by module (test case id, level, message)\n"
                    "3) Suggested fixes (2-4 bullets)\n"
                ),
            },
        ]
