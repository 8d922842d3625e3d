"""Result exports (JSON, HTML, CSV, text)."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..labels import LabelCatalog, catalog_for
from ..models import Entry
from .base import (
    EntryWriter,
    ExportError,
    ExportFormat,
    ExportPayload,
    ReportContext,
    exported_name,
)
from .delimited import DelimitedWriter, csv_writer, text_writer
from .html_report import HtmlWriter, format_created
from .json_report import JsonWriter
from .sink import save_payload

logger = logging.getLogger(__name__)


def writer_for(fmt: ExportFormat, *, skip_first_row: bool = False) -> EntryWriter:
    """Pick the serializer for a format."""
    if fmt is ExportFormat.JSON:
        return JsonWriter()
    if fmt is ExportFormat.HTML:
        return HtmlWriter()
    if fmt is ExportFormat.CSV:
        return csv_writer(skip_first_row=skip_first_row)
    if fmt is ExportFormat.TEXT:
        return text_writer(skip_first_row=skip_first_row)
    raise ValueError(f"Unsupported export format: {fmt!r}")


def export_entries(
    entries: Iterable[Entry],
    fmt: ExportFormat | str,
    context: ReportContext,
    *,
    labels: LabelCatalog | None = None,
    skip_first_row: bool = False,
) -> ExportPayload:
    """Serialize entries (in the given order) into a downloadable payload."""
    if isinstance(fmt, str):
        fmt = ExportFormat.parse(fmt)
    labels = labels or catalog_for(context.language)
    items = list(entries)

    try:
        text = writer_for(fmt, skip_first_row=skip_first_row).render(items, context, labels)
        content = text.encode("utf-8")
    except ExportError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ExportError(f"{fmt.value} export of test {context.test_id} failed: {e}") from e

    filename = exported_name(context, fmt)
    logger.info("Exported %d entries as %s (%s)", len(items), fmt.value, filename)
    return ExportPayload(content=content, mime_type=fmt.mime_type, filename=filename)


__all__ = [
    "DelimitedWriter",
    "EntryWriter",
    "ExportError",
    "ExportFormat",
    "ExportPayload",
    "HtmlWriter",
    "JsonWriter",
    "ReportContext",
    "csv_writer",
    "export_entries",
    "exported_name",
    "format_created",
    "save_payload",
    "text_writer",
    "writer_for",
]
