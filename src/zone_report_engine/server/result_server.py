"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (view, filter and export a stored test result)
- Resources: addressable data blobs (e.g., a stored result via URI)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m zone_report_engine.server.result_server
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from zone_report_engine.core.settings import resolve_settings
from zone_report_engine.prompts.registry import register_prompts
from zone_report_engine.resources.registry import register_resources
from zone_report_engine.tools.results import (
    check_test_form_impl,
    export_result_impl,
    result_history_impl,
    view_result_impl,
)

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = resolve_settings().log_level
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("zone-report", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def view_result(
    test_id: str,
    levels: Sequence[str] | None = None,
    search: str | None = None,
    expand_all: bool = False,
    language: str | None = None,
) -> dict[str, Any]:
    """Return a stored test result grouped by module and test case.

    Parameters
    ----------
    test_id:
        Identifier of the stored test (the backend hash id).
    levels:
        Only show these severities (e.g., ["error", "critical"]). Case-insensitive.
        Empty means all levels.
    search:
        Case-insensitive substring filter applied to messages.
    expand_all:
        Mark every module as expanded in the returned tree.
    language:
        Label language (da, en, fi, fr, nb, sv).

    Returns
    -------
    dict:
        {"counts": {...}, "modules": [...], "filter": {...}, ...}
    """
    return await view_result_impl(
        test_id=test_id,
        levels=levels,
        search=search,
        expand_all=expand_all,
        language=language,
    )


@mcp.tool()
async def export_result(
    test_id: str,
    format: str = "json",
    levels: Sequence[str] | None = None,
    search: str | None = None,
    filtered: bool = False,
    output_dir: str | None = None,
    language: str | None = None,
) -> dict[str, Any]:
    """Export a stored test result as json, html, csv or txt.

    The file name follows zonemaster_result_<domain>_<test id>.<ext>. When
    output_dir is given the file is written there, otherwise the content is
    returned inline.
    """
    return await export_result_impl(
        test_id=test_id,
        format=format,
        levels=levels,
        search=search,
        filtered=filtered,
        output_dir=output_dir,
        language=language,
    )


@mcp.tool()
async def result_history(test_id: str) -> dict[str, Any]:
    """List earlier stored tests of the same domain, newest first."""
    return await result_history_impl(test_id=test_id)


@mcp.tool()
def check_test_form(
    domain: str,
    nameservers: list[dict[str, str]] | None = None,
    ds_info: list[dict[str, str]] | None = None,
    disable_ipv4: bool = False,
    disable_ipv6: bool = False,
    profile: str | None = None,
) -> dict[str, Any]:
    """Validate run-test input and return the request parameters or field errors.

    nameservers rows use {"ns", "ip"}; ds_info rows use
    {"keytag", "algorithm", "digtype", "digest"}.
    """
    return check_test_form_impl(
        domain=domain,
        nameservers=nameservers,
        ds_info=ds_info,
        disable_ipv4=disable_ipv4,
        disable_ipv6=disable_ipv6,
        profile=profile,
    )


def main() -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting zone-report server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
