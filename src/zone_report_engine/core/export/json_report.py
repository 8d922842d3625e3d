"""JSON export: the entry list as an array of objects."""

from __future__ import annotations

import json
from dataclasses import dataclass

from ..labels import LabelCatalog
from ..models import Entry
from .base import ExportError, ReportContext


@dataclass(frozen=True, slots=True)
class JsonWriter:
    def render(self, entries: list[Entry], context: ReportContext, labels: LabelCatalog) -> str:
        try:
            return json.dumps(
                [e.to_dict() for e in entries],
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as e:
            raise ExportError(f"Cannot serialize results of test {context.test_id}: {e}") from e
