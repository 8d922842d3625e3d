"""Result view state: entries, active filter, collapse flags and exports.

A view is bound to one test result. It holds no reference to any "current"
test; callers that fetch concurrently decide which view to keep.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .aggregator import AggregatedResult, CollapseState, aggregate
from .export import ExportFormat, ExportPayload, ReportContext, export_entries
from .filters import FilterSpec, filter_entries
from .labels import DEFAULT_LANGUAGE, LabelCatalog, catalog_for
from .models import Entry
from .result_source import FileResultStore, ResultPayload

logger = logging.getLogger(__name__)


class ResultView:
    def __init__(
        self,
        entries: Sequence[Entry],
        context: ReportContext,
        *,
        params: dict[str, Any] | None = None,
        testcase_descriptions: dict[str, str] | None = None,
        skip_first_row: bool = False,
    ) -> None:
        self.entries: list[Entry] = list(entries)
        self.context = context
        self.params = params or {}
        self.testcase_descriptions = testcase_descriptions or {}
        self.skip_first_row = skip_first_row
        self.labels: LabelCatalog = catalog_for(context.language)
        self.filter = FilterSpec()
        self.collapse_state = CollapseState()
        self.result: AggregatedResult = aggregate(
            self.entries, reset_collapse=True, collapse_state=self.collapse_state
        )

    @classmethod
    def from_payload(
        cls,
        payload: ResultPayload,
        *,
        language: str = DEFAULT_LANGUAGE,
        strict: bool = False,
        skip_first_row: bool = False,
    ) -> ResultView:
        entries = [Entry.from_dict(raw, strict=strict) for raw in payload.results]
        context = ReportContext(
            test_id=payload.hash_id,
            domain=payload.params.domain,
            created_at=payload.created_at,
            language=language,
        )
        return cls(
            entries,
            context,
            params=payload.params.model_dump(),
            testcase_descriptions=payload.testcase_descriptions,
            skip_first_row=skip_first_row,
        )

    @property
    def title(self) -> str:
        return f"{self.context.unicode_domain} · Zonemaster"

    @property
    def filtered_entries(self) -> list[Entry]:
        return list(filter_entries(self.entries, self.filter))

    def module_label(self, name: str) -> str:
        return self.labels.module_label(name)

    def reload(self, entries: Sequence[Entry], *, reset_collapse: bool = True) -> AggregatedResult:
        """Replace the entries (e.g. after a refetch) and regroup them."""
        self.entries = list(entries)
        return self.apply_filter(reset_collapse=reset_collapse)

    def apply_filter(self, *, reset_collapse: bool = False) -> AggregatedResult:
        self.result = aggregate(
            filter_entries(self.entries, self.filter),
            reset_collapse=reset_collapse,
            collapse_state=self.collapse_state,
        )
        return self.result

    def toggle_filter(self, name: str) -> AggregatedResult:
        self.filter.toggle(name)
        return self.apply_filter()

    def set_search(self, query: str) -> AggregatedResult:
        self.filter.search = query or ""
        return self.apply_filter()

    def expand_all(self) -> None:
        self.collapse_state.expand_all(self.result.modules)

    def collapse_all(self) -> None:
        self.collapse_state.collapse_all(self.result.modules)

    def export(self, fmt: ExportFormat | str, *, filtered: bool = False) -> ExportPayload:
        entries = self.filtered_entries if filtered else self.entries
        return export_entries(
            entries,
            fmt,
            self.context,
            labels=self.labels,
            skip_first_row=self.skip_first_row,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable tree of the current (filtered) grouping."""
        state = self.collapse_state
        modules = []
        for module in self.result.modules:
            modules.append(
                {
                    "name": module.name,
                    "label": self.module_label(module.name),
                    "collapsed": state.is_collapsed(module.name),
                    "levels": [
                        {"name": lc.name, "value": lc.value}
                        for lc in self.result.counts_by_module[module.name]
                    ],
                    "testcases": [
                        {
                            "id": tc.id,
                            "level": tc.level.value,
                            "description": self.testcase_descriptions.get(tc.id),
                            "collapsed": state.is_collapsed(tc.id),
                            "entries": [
                                {"level": e.level.value, "message": e.message} for e in tc.entries
                            ],
                        }
                        for tc in module.testcases
                    ],
                }
            )
        return {
            "test_id": self.context.test_id,
            "domain": self.context.unicode_domain,
            "ascii_domain": self.context.ascii_domain,
            "created_at": self.context.created_at_utc.isoformat(),
            "title": self.title,
            "filter": self.filter.to_dict(),
            "counts": dict(self.result.counts),
            "modules": modules,
        }


async def load_result_view(
    store: FileResultStore,
    test_id: str,
    *,
    language: str = DEFAULT_LANGUAGE,
    strict: bool = False,
    skip_first_row: bool = False,
) -> ResultView:
    """Fetch a stored result and build its view. Raises NoDataError."""
    payload = await store.get_test_results(test_id)
    logger.debug("Loaded test %s (%d entries)", test_id, len(payload.results))
    return ResultView.from_payload(
        payload, language=language, strict=strict, skip_first_row=skip_first_row
    )
