"""Level and free-text filtering of result entries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, fields

from .aggregator import AggregatedResult, CollapseState, aggregate
from .models import Entry, Severity

LEVEL_NAMES: tuple[str, ...] = tuple(s.value for s in Severity)


@dataclass(slots=True)
class FilterSpec:
    """Active level toggles plus a search query.

    `all` is true whenever no individual level is active.
    """

    all: bool = True
    info: bool = False
    notice: bool = False
    warning: bool = False
    error: bool = False
    critical: bool = False
    search: str = ""
    # Number of active level pills; -1 right after an explicit "all" toggle.
    active_count: int = 0

    @classmethod
    def for_levels(cls, levels: Iterable[Severity | str] | None, search: str | None = None) -> FilterSpec:
        """Build a spec that shows only the given levels (all when empty)."""
        spec = cls(search=search or "")
        for level in levels or ():
            name = Severity.parse(level, strict=True).value
            if not getattr(spec, name):
                spec.toggle(name)
        return spec

    @property
    def active_levels(self) -> frozenset[Severity]:
        return frozenset(s for s in Severity if getattr(self, s.value))

    def toggle(self, name: str) -> None:
        """Flip one pill and restore the `all` invariant."""
        key = name.strip().lower()
        if key != "all" and key not in LEVEL_NAMES:
            valid = ", ".join(("all", *LEVEL_NAMES))
            raise ValueError(f"Unknown filter '{name}'. Valid values: {valid}.")

        setattr(self, key, not getattr(self, key))
        active = len(self.active_levels)
        self.active_count = active

        if active < 1:
            self.all = True
        elif key == "all":
            for level in LEVEL_NAMES:
                setattr(self, level, False)
            self.all = True
            self.active_count = -1
        else:
            self.all = False

    def to_dict(self) -> dict[str, bool | str]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "active_count"}


def filter_by_level(entries: Sequence[Entry], spec: FilterSpec) -> Sequence[Entry]:
    if spec.all:
        return entries
    levels = spec.active_levels
    return [e for e in entries if e.level in levels]


def filter_by_search(entries: Sequence[Entry], query: str | None) -> Sequence[Entry]:
    if not query:
        return entries
    needle = query.casefold()
    return [e for e in entries if needle in e.message.casefold()]


def filter_entries(entries: Sequence[Entry], spec: FilterSpec) -> Sequence[Entry]:
    """Apply the level filter, then the search filter. Order is preserved."""
    return filter_by_search(filter_by_level(entries, spec), spec.search)


def refilter(
    entries: Sequence[Entry],
    spec: FilterSpec,
    collapse_state: CollapseState,
) -> AggregatedResult:
    """Filter and re-aggregate, keeping existing collapse flags."""
    return aggregate(
        filter_entries(entries, spec),
        reset_collapse=False,
        collapse_state=collapse_state,
    )
