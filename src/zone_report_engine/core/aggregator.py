"""Grouping of flat result entries into a module -> test case -> entry tree.

The aggregation is a pure function of its inputs apart from the collapse
state, which is owned by the caller and passed in explicitly. A reset pass
rewrites every flag it touches; a re-filter pass only assigns defaults to keys
it has never seen.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from .models import SEVERITY_DESCENDING, Entry, Severity, is_unspecified

Counts = dict[str, int]


@dataclass(slots=True)
class TestCaseGroup:
    """Entries of one test case with their rolled-up severity."""

    __test__ = False  # not a pytest test class

    id: str
    entries: list[Entry] = field(default_factory=list)
    level: Severity = Severity.INFO

    def append(self, entry: Entry) -> None:
        self.entries.append(entry)
        if entry.level.rank > self.level.rank:
            self.level = entry.level


@dataclass(slots=True)
class ModuleGroup:
    name: str
    testcases: list[TestCaseGroup] = field(default_factory=list)
    testcases_by_key: dict[str, TestCaseGroup] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LevelCount:
    name: str
    value: int


class CollapseState(MutableMapping[str, bool]):
    """Expand/collapse flags keyed by module name and test case id.

    Unknown keys read as collapsed.
    """

    def __init__(self, flags: Mapping[str, bool] | None = None) -> None:
        self._flags: dict[str, bool] = dict(flags or {})

    def __getitem__(self, key: str) -> bool:
        return self._flags[key]

    def __setitem__(self, key: str, value: bool) -> None:
        self._flags[key] = bool(value)

    def __delitem__(self, key: str) -> None:
        del self._flags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"CollapseState({self._flags!r})"

    def is_collapsed(self, key: str) -> bool:
        return self._flags.get(key, True)

    def toggle(self, key: str) -> bool:
        self._flags[key] = not self.is_collapsed(key)
        return self._flags[key]

    def expand_all(self, modules: Iterable[ModuleGroup]) -> None:
        for module in modules:
            self._flags[module.name] = False

    def collapse_all(self, modules: Iterable[ModuleGroup]) -> None:
        for module in modules:
            self._flags[module.name] = True

    def to_dict(self) -> dict[str, bool]:
        return dict(self._flags)


@dataclass(slots=True)
class AggregatedResult:
    modules: list[ModuleGroup]
    counts: Counts
    collapse_state: CollapseState
    counts_by_module: dict[str, list[LevelCount]]

    @property
    def testcase_total(self) -> int:
        return self.counts["all"]


def empty_counts() -> Counts:
    counts: Counts = {"all": 0}
    for level in Severity:
        counts[level.value] = 0
    return counts


def _ingest(entries: Iterable[Entry | Mapping[str, Any]], *, strict: bool) -> Iterator[Entry]:
    for item in entries:
        if isinstance(item, Entry):
            yield item
        else:
            yield Entry.from_dict(item, strict=strict)


def _testcase_sort_key(testcase: TestCaseGroup) -> tuple[int, int]:
    # UNSPECIFIED first, then descending rollup severity.
    return (0 if is_unspecified(testcase.id) else 1, -testcase.level.rank)


def count_levels(testcases: Iterable[TestCaseGroup]) -> list[LevelCount]:
    """Return per-level test case counts, highest severity first, zeros omitted."""
    levels: dict[Severity, int] = {}
    for testcase in testcases:
        levels[testcase.level] = levels.get(testcase.level, 0) + 1
    return [LevelCount(name=lvl.value, value=levels[lvl]) for lvl in SEVERITY_DESCENDING if lvl in levels]


def aggregate(
    entries: Iterable[Entry | Mapping[str, Any]],
    *,
    reset_collapse: bool,
    collapse_state: CollapseState | None = None,
    strict: bool = False,
) -> AggregatedResult:
    """Group entries by module and test case and derive severity summaries.

    Modules and test cases keep first-seen order until the sort pass: test
    cases are ordered UNSPECIFIED first and then by descending rollup level,
    entries by descending level. Both sorts are stable.

    Counts are per test case, keyed by the test case rollup level.
    """
    state = collapse_state if collapse_state is not None else CollapseState()

    modules: list[ModuleGroup] = []
    modules_by_name: dict[str, ModuleGroup] = {}

    for entry in _ingest(entries, strict=strict):
        module = modules_by_name.get(entry.module)
        if module is None:
            module = ModuleGroup(name=entry.module)
            modules_by_name[entry.module] = module
            modules.append(module)

        testcase = module.testcases_by_key.get(entry.testcase)
        if testcase is None:
            testcase = TestCaseGroup(id=entry.testcase)
            module.testcases_by_key[entry.testcase] = testcase
            module.testcases.append(testcase)

            if reset_collapse or entry.testcase not in state:
                state[entry.testcase] = True
            if reset_collapse or entry.module not in state:
                state[entry.module] = True

        testcase.append(entry)

    counts = empty_counts()
    for module in modules:
        module.testcases.sort(key=_testcase_sort_key)
        for testcase in module.testcases:
            testcase.entries.sort(key=lambda e: -e.level.rank)
            counts[testcase.level.value] += 1
            counts["all"] += 1

    for key in list(state):
        if is_unspecified(key):
            state[key] = False

    counts_by_module = {module.name: count_levels(module.testcases) for module in modules}

    return AggregatedResult(
        modules=modules,
        counts=counts,
        collapse_state=state,
        counts_by_module=counts_by_module,
    )
