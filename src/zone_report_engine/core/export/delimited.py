"""Delimited text exports (semicolon CSV and tab-separated text)."""

from __future__ import annotations

from dataclasses import dataclass

from ..labels import LabelCatalog
from ..models import Entry
from .base import ReportContext

HEADER: tuple[str, ...] = ("Module", "Level", "Message")
LINE_END = "\r\n"


def _columns(entry: Entry) -> tuple[str, str, str]:
    return entry.module, entry.level.value, entry.message


@dataclass(frozen=True, slots=True)
class DelimitedWriter:
    """Header row plus one stripped row per entry.

    skip_first_row reproduces the legacy exporter, which started its data
    loop at the second entry.
    """

    delimiter: str
    skip_first_row: bool = False

    def render(self, entries: list[Entry], context: ReportContext, labels: LabelCatalog) -> str:
        lines = [self.delimiter.join(HEADER)]
        start = 1 if self.skip_first_row else 0
        for entry in entries[start:]:
            lines.append(self.delimiter.join(col.strip() for col in _columns(entry)))
        return LINE_END.join(lines) + LINE_END


def csv_writer(*, skip_first_row: bool = False) -> DelimitedWriter:
    return DelimitedWriter(delimiter=";", skip_first_row=skip_first_row)


def text_writer(*, skip_first_row: bool = False) -> DelimitedWriter:
    return DelimitedWriter(delimiter=" \t", skip_first_row=skip_first_row)
