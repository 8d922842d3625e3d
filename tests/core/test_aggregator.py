from __future__ import annotations

from zone_report_engine.core.aggregator import CollapseState, LevelCount, aggregate
from zone_report_engine.core.filters import FilterSpec, refilter
from zone_report_engine.core.models import Entry, Severity


def _entry(module: str, testcase: str, level: str, message: str = "") -> Entry:
    return Entry.from_dict({"module": module, "testcase": testcase, "level": level, "message": message})


def _entries() -> list[Entry]:
    return [
        _entry("dnssec", "A", "ERROR", "m1"),
        _entry("dnssec", "A", "info", "m2"),
        _entry("basic", "UNSPECIFIED", "notice", "m3"),
    ]


def test_aggregate_groups_and_counts() -> None:
    result = aggregate(_entries(), reset_collapse=True)

    assert [m.name for m in result.modules] == ["dnssec", "basic"]
    dnssec = result.modules[0]
    assert [tc.id for tc in dnssec.testcases] == ["A"]
    assert dnssec.testcases[0].level is Severity.ERROR
    assert [e.message for e in dnssec.testcases[0].entries] == ["m1", "m2"]

    assert result.counts == {"all": 2, "info": 0, "notice": 1, "warning": 0, "error": 1, "critical": 0}
    assert result.testcase_total == 2
    assert result.collapse_state.to_dict() == {
        "A": True,
        "dnssec": True,
        "UNSPECIFIED": False,
        "basic": True,
    }


def test_aggregate_empty_input() -> None:
    result = aggregate([], reset_collapse=True)
    assert result.modules == []
    assert result.counts["all"] == 0
    assert all(v == 0 for v in result.counts.values())


def test_aggregate_accepts_raw_records() -> None:
    result = aggregate(
        [{"module": "zone", "testcase": "ZONE01", "level": "WARNING", "message": "w"}],
        reset_collapse=True,
    )
    assert result.modules[0].testcases[0].level is Severity.WARNING


def test_testcases_sorted_unspecified_first_then_by_level_stable() -> None:
    entries = [
        _entry("m", "X", "warning"),
        _entry("m", "Y", "error"),
        _entry("m", "Z", "warning"),
        _entry("m", "UNSPECIFIED", "info"),
    ]
    result = aggregate(entries, reset_collapse=True)
    assert [tc.id for tc in result.modules[0].testcases] == ["UNSPECIFIED", "Y", "X", "Z"]


def test_entries_sorted_by_descending_level_stable() -> None:
    entries = [
        _entry("m", "T", "info", "a"),
        _entry("m", "T", "critical", "b"),
        _entry("m", "T", "info", "c"),
        _entry("m", "T", "warning", "d"),
    ]
    result = aggregate(entries, reset_collapse=True)
    assert [e.message for e in result.modules[0].testcases[0].entries] == ["b", "d", "a", "c"]


def test_rollup_is_max_entry_level() -> None:
    entries = [_entry("m", "T", "notice"), _entry("m", "T", "critical"), _entry("m", "T", "warning")]
    result = aggregate(entries, reset_collapse=True)
    assert result.modules[0].testcases[0].level is Severity.CRITICAL
    assert result.counts["critical"] == 1
    assert result.counts["all"] == 1


def test_counts_by_module_highest_first_without_zeros() -> None:
    entries = [
        _entry("m", "A", "info"),
        _entry("m", "B", "error"),
        _entry("m", "C", "error"),
    ]
    result = aggregate(entries, reset_collapse=True)
    assert result.counts_by_module["m"] == [
        LevelCount(name="error", value=2),
        LevelCount(name="info", value=1),
    ]


def test_aggregate_is_idempotent() -> None:
    first = aggregate(_entries(), reset_collapse=True)
    second = aggregate(_entries(), reset_collapse=True)
    assert first.counts == second.counts
    assert [m.name for m in first.modules] == [m.name for m in second.modules]
    assert first.collapse_state.to_dict() == second.collapse_state.to_dict()


def test_reset_overwrites_user_flags() -> None:
    state = CollapseState({"dnssec": False, "A": False})
    aggregate(_entries(), reset_collapse=True, collapse_state=state)
    assert state["dnssec"] is True
    assert state["A"] is True


def test_refilter_preserves_user_flags() -> None:
    state = CollapseState()
    aggregate(_entries(), reset_collapse=True, collapse_state=state)
    state["dnssec"] = False
    state["A"] = False

    spec = FilterSpec()
    spec.toggle("error")
    result = refilter(_entries(), spec, state)

    assert [m.name for m in result.modules] == ["dnssec"]
    assert state["dnssec"] is False
    assert state["A"] is False
    # Flags for groups filtered out are kept.
    assert state["basic"] is True


def test_refilter_defaults_only_new_keys() -> None:
    errors_only = FilterSpec.for_levels(["error"])
    state = CollapseState()
    refilter(_entries(), errors_only, state)
    assert set(state) == {"A", "dnssec"}
    state["dnssec"] = False

    refilter(_entries(), FilterSpec(), state)

    assert state["dnssec"] is False
    assert state["basic"] is True
    assert state["UNSPECIFIED"] is False


def test_unspecified_always_expanded_any_case() -> None:
    state = CollapseState({"unspecified": True})
    aggregate([_entry("system", "Unspecified", "info")], reset_collapse=True, collapse_state=state)
    assert state["unspecified"] is False
    assert state["Unspecified"] is False


def test_collapse_state_expand_and_collapse_all() -> None:
    result = aggregate(_entries(), reset_collapse=True)
    state = result.collapse_state

    state.expand_all(result.modules)
    assert not state.is_collapsed("dnssec")
    assert not state.is_collapsed("basic")
    # Test case flags are untouched.
    assert state.is_collapsed("A")

    state.collapse_all(result.modules)
    assert state.is_collapsed("dnssec")
    assert state.is_collapsed("basic")


def test_collapse_state_toggle_and_unknown_keys() -> None:
    state = CollapseState()
    assert state.is_collapsed("never-seen")
    assert state.toggle("X") is False
    assert state.toggle("X") is True


def test_reaggregating_sorted_output_keeps_order() -> None:
    entries = [
        _entry("m", "X", "warning", "x1"),
        _entry("m", "Y", "error", "y1"),
        _entry("m", "X", "info", "x2"),
        _entry("m", "Z", "warning", "z1"),
        _entry("m", "UNSPECIFIED", "notice", "u1"),
        _entry("m", "Y", "error", "y2"),
        _entry("n", "W", "critical", "w1"),
    ]
    first = aggregate(entries, reset_collapse=True)
    flattened = [e for m in first.modules for tc in m.testcases for e in tc.entries]

    second = aggregate(flattened, reset_collapse=True)

    def shape(result) -> list[tuple[str, str, list[str]]]:
        return [(m.name, tc.id, [e.message for e in tc.entries]) for m in result.modules for tc in m.testcases]

    assert shape(second) == shape(first)
    assert shape(first)[:4] == [
        ("m", "UNSPECIFIED", ["u1"]),
        ("m", "Y", ["y1", "y2"]),
        ("m", "X", ["x1", "x2"]),
        ("m", "Z", ["z1"]),
    ]
