"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from zone_report_engine.core.labels import SUPPORTED_LANGUAGES, catalog_for
from zone_report_engine.core.models import SEVERITY_DESCENDING
from zone_report_engine.core.result_source import FileResultStore, ResultPayload
from zone_report_engine.core.settings import BASE_DIR_ENV, resolve_language, resolve_settings

SAMPLE_RESULT: dict[str, Any] = {
    "hash_id": "3f2b1c0d9e8a7b6c",
    "created_at": "2024-03-01T12:30:00+00:00",
    "params": {"domain": "example.se", "ipv4": True, "ipv6": True, "profile": "default"},
    "testcase_descriptions": {"DNSSEC01": "Legal values for the DS hash digest algorithm"},
    "results": [
        {"module": "SYSTEM", "testcase": "UNSPECIFIED", "level": "INFO", "message": "Using version v4.7.3"},
        {"module": "DNSSEC", "testcase": "DNSSEC01", "level": "ERROR", "message": "DS digest type 1 is deprecated"},
        {"module": "DNSSEC", "testcase": "DNSSEC01", "level": "NOTICE", "message": "DS record found"},
        {"module": "BASIC", "testcase": "BASIC01", "level": "INFO", "message": "Parent zone is se"},
    ],
}


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://zone-report/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        base = resolve_settings().base_dir
        return (
            "Resources:\n"
            "- app://zone-report/help\n"
            "- app://zone-report/severity-levels\n"
            "- app://zone-report/labels/{language}\n"
            "- app://zone-report/examples/sample-result\n"
            f"- result://{{test_id}} (stored results under {BASE_DIR_ENV})\n"
            f"\nBase directory: {base}\n"
        )

    @mcp.resource("app://zone-report/severity-levels")
    def severity_levels() -> list[dict[str, Any]]:
        """Severity levels, highest first, with their rank."""
        return [{"name": s.value, "rank": s.rank} for s in SEVERITY_DESCENDING]

    @mcp.resource("app://zone-report/labels/{language}")
    def labels(language: str) -> dict[str, Any]:
        """Module, level and heading labels for a language."""
        code = resolve_language(language)
        catalog = catalog_for(code)
        return {
            "language": code,
            "language_name": SUPPORTED_LANGUAGES[code],
            "catalog": catalog.language,
            "modules": dict(catalog.module_names),
            "levels": dict(catalog.severity_names),
            "headings": dict(catalog.headings),
        }

    @mcp.resource("app://zone-report/examples/sample-result")
    def sample_result() -> dict[str, Any]:
        """Return a tiny stored-result payload for demos and tests."""
        return ResultPayload.model_validate(SAMPLE_RESULT).model_dump(mode="json")

    @mcp.resource("result://{test_id}")
    async def stored_result(test_id: str) -> dict[str, Any]:
        """Read a stored result from ZONE_REPORT_BASE_DIR."""
        store = FileResultStore(resolve_settings().base_dir)
        payload = await store.get_test_results(test_id)
        return payload.model_dump(mode="json")
