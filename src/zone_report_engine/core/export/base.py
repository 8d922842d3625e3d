"""Export formats, payloads and report context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from ..domain import to_ascii, to_unicode
from ..labels import DEFAULT_LANGUAGE, LabelCatalog
from ..models import Entry


class ExportError(RuntimeError):
    """Raised when an entry set cannot be serialized."""


class ExportFormat(str, Enum):
    JSON = "json"
    HTML = "html"
    CSV = "csv"
    TEXT = "txt"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> ExportFormat:
        name = value.strip().lower()
        if name == "text":
            return cls.TEXT
        try:
            return cls(name)
        except ValueError as e:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown export format '{value}'. Valid values: {valid}.") from e


_MIME_TYPES: dict[ExportFormat, str] = {
    ExportFormat.JSON: "application/javascript",
    ExportFormat.HTML: "text/html;charset=utf-8",
    ExportFormat.CSV: "text/csv;charset=utf-8",
    ExportFormat.TEXT: "text/plain;charset=utf-8",
}


@dataclass(frozen=True, slots=True)
class ReportContext:
    """What the exported report is about."""

    test_id: str
    domain: str
    created_at: datetime
    language: str = DEFAULT_LANGUAGE

    @property
    def ascii_domain(self) -> str:
        return to_ascii(self.domain)

    @property
    def unicode_domain(self) -> str:
        return to_unicode(self.domain)

    @property
    def created_at_utc(self) -> datetime:
        if self.created_at.tzinfo is None:
            return self.created_at.replace(tzinfo=UTC)
        return self.created_at


@dataclass(frozen=True, slots=True)
class ExportPayload:
    content: bytes
    mime_type: str
    filename: str

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


class EntryWriter(Protocol):
    """Serializer interface: render entries to text for one format."""

    def render(self, entries: list[Entry], context: ReportContext, labels: LabelCatalog) -> str:
        ...


def exported_name(context: ReportContext, fmt: ExportFormat) -> str:
    """Suggested file name for an export."""
    return f"zonemaster_result_{context.ascii_domain}_{context.test_id}.{fmt.extension}"
