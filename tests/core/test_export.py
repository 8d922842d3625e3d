from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from zone_report_engine.core.export import (
    ExportError,
    ExportFormat,
    ReportContext,
    export_entries,
    format_created,
    save_payload,
)
from zone_report_engine.core.models import Entry, Severity


def _context(domain: str = "example.se", language: str = "en") -> ReportContext:
    return ReportContext(
        test_id="abc123",
        domain=domain,
        created_at=datetime(2024, 3, 1, 12, 30, tzinfo=UTC),
        language=language,
    )


def _entries(raw_results) -> list[Entry]:
    return [Entry.from_dict(r) for r in raw_results]


def test_json_export_round_trips(raw_results) -> None:
    entries = _entries(raw_results)
    payload = export_entries(entries, ExportFormat.JSON, _context())

    assert payload.mime_type == "application/javascript"
    assert payload.filename == "zonemaster_result_example.se_abc123.json"
    decoded = [Entry.from_dict(d) for d in json.loads(payload.text)]
    assert decoded == entries


def test_json_export_keeps_non_ascii() -> None:
    entries = [Entry.from_dict({"module": "BASIC", "level": "info", "message": "Zon räksmörgås.se"})]
    payload = export_entries(entries, "json", _context())
    assert "räksmörgås" in payload.text


def test_csv_export_rows_and_line_endings(raw_results) -> None:
    raw_results[0]["message"] = "  padded message  "
    payload = export_entries(_entries(raw_results), "csv", _context())

    assert payload.mime_type == "text/csv;charset=utf-8"
    assert payload.filename.endswith(".csv")
    lines = payload.text.split("\r\n")
    assert lines[0] == "Module;Level;Message"
    assert lines[1] == "SYSTEM;info;padded message"
    assert lines[2] == "DNSSEC;notice;DS record found"
    assert len(lines) == len(raw_results) + 2
    assert lines[-1] == ""


def test_csv_export_legacy_skip_first_row(raw_results) -> None:
    payload = export_entries(_entries(raw_results), "csv", _context(), skip_first_row=True)
    lines = payload.text.split("\r\n")
    assert lines[1] == "DNSSEC;notice;DS record found"
    assert len(lines) == len(raw_results) + 1


def test_text_export_uses_space_tab_delimiter(raw_results) -> None:
    payload = export_entries(_entries(raw_results), "text", _context())

    assert payload.mime_type == "text/plain;charset=utf-8"
    assert payload.filename == "zonemaster_result_example.se_abc123.txt"
    lines = payload.text.split("\r\n")
    assert lines[0] == "Module \tLevel \tMessage"
    assert lines[1] == "SYSTEM \tinfo \tUsing version v4.7.3"


def test_empty_exports() -> None:
    assert export_entries([], "json", _context()).text == "[]"
    assert export_entries([], "csv", _context()).text == "Module;Level;Message\r\n"


def test_filename_uses_punycode_domain() -> None:
    payload = export_entries([], "csv", _context(domain="räksmörgås.se"))
    assert payload.filename == "zonemaster_result_xn--rksmrgs-5wao1o.se_abc123.csv"


def test_filename_and_html_keep_sharp_s_domain() -> None:
    context = _context(domain="straße.de")
    assert export_entries([], "csv", context).filename == "zonemaster_result_xn--strae-oqa.de_abc123.csv"
    html = export_entries([], "html", context).text
    assert "<title>xn--strae-oqa.de • Zonemaster Test Result</title>" in html
    assert "<h2>xn--strae-oqa.de</h2>" in html


def test_html_export_document(raw_results) -> None:
    payload = export_entries(_entries(raw_results), "html", _context())
    html = payload.text

    assert payload.mime_type == "text/html;charset=utf-8"
    assert '<html lang="en">' in html
    assert "<title>example.se • Zonemaster Test Result</title>" in html
    assert "<i>2024-03-01 12:30 GMT+00:00</i>" in html
    assert "<th scope=\"col\">Module</th>" in html
    assert "<td>DNSSEC</td>" in html
    assert "<td>Error</td>" in html
    assert html.count("<tr>") == len(raw_results) + 1


def test_html_export_localized_labels(raw_results) -> None:
    html = export_entries(_entries(raw_results), "html", _context(language="sv")).text

    assert '<html lang="sv">' in html
    assert "Nivå" in html
    assert "<td>Grundläggande</td>" in html
    assert "<td>Fel</td>" in html


def test_html_export_unknown_module_passes_through() -> None:
    entries = [Entry.from_dict({"module": "CUSTOM", "level": "notice", "message": "x"})]
    html = export_entries(entries, "html", _context()).text
    assert "<td>CUSTOM</td>" in html


def test_html_export_escapes_messages() -> None:
    entries = [Entry.from_dict({"module": "BASIC", "level": "error", "message": "<script>alert(1)</script> & co"})]
    html = export_entries(entries, "html", _context()).text
    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt; &amp; co" in html


def test_format_created_with_offset() -> None:
    ts = datetime(2024, 12, 24, 18, 5, tzinfo=timezone(timedelta(hours=1)))
    assert format_created(ts) == "2024-12-24 18:05 GMT+01:00"
    ts = datetime(2024, 12, 24, 18, 5, tzinfo=timezone(-timedelta(hours=3, minutes=30)))
    assert format_created(ts) == "2024-12-24 18:05 GMT-03:30"


def test_export_format_parse() -> None:
    assert ExportFormat.parse("TXT") is ExportFormat.TEXT
    assert ExportFormat.parse("text") is ExportFormat.TEXT
    with pytest.raises(ValueError, match="Unknown export format"):
        ExportFormat.parse("pdf")


def test_unserializable_args_raise_export_error() -> None:
    entries = [Entry(module="M", testcase="T", level=Severity.INFO, message="x", args={"when": object()})]
    with pytest.raises(ExportError):
        export_entries(entries, "json", _context())


@pytest.mark.asyncio
async def test_save_payload_writes_file(tmp_path: Path, raw_results) -> None:
    payload = export_entries(_entries(raw_results), "csv", _context())

    path = await save_payload(payload, tmp_path)

    assert path == tmp_path / "zonemaster_result_example.se_abc123.csv"
    assert path.read_bytes() == payload.content


@pytest.mark.asyncio
async def test_save_payload_missing_directory(tmp_path: Path) -> None:
    payload = export_entries([], "json", _context())
    with pytest.raises(FileNotFoundError):
        await save_payload(payload, tmp_path / "missing")
