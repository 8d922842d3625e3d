"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from zone_report_engine.core.export import ExportFormat, save_payload
from zone_report_engine.core.filters import FilterSpec
from zone_report_engine.core.form import FormValidationError, RowKind, RunTestForm
from zone_report_engine.core.models import Severity, UnknownSeverityError
from zone_report_engine.core.result_source import FileResultStore, NoDataError
from zone_report_engine.core.settings import Settings, resolve_language, resolve_settings
from zone_report_engine.core.view import ResultView, load_result_view

ALL_LEVELS = [s.value for s in Severity]


def _parse_levels(levels: Sequence[str] | None) -> list[Severity]:
    """Parse user-supplied severity names into Severity values."""
    out: list[Severity] = []
    for s in levels or ():
        if not s.strip():
            continue
        try:
            out.append(Severity.parse(s, strict=True))
        except UnknownSeverityError as e:
            valid = ", ".join(ALL_LEVELS)
            raise ValueError(
                f"Unknown severity level '{s}'. Valid values: {valid}. "
                "Tip: levels is case-insensitive (e.g., 'error', 'WARNING')."
            ) from e
    return out


def _no_data(test_id: str, err: NoDataError) -> dict[str, Any]:
    return {"test_id": test_id, "found": False, "alert": {"level": "error", "message": str(err)}}


async def _load_view(
    test_id: str,
    *,
    settings: Settings,
    levels: Sequence[str] | None,
    search: str | None,
    language: str | None,
) -> ResultView:
    view = await load_result_view(
        FileResultStore(settings.base_dir),
        test_id,
        language=resolve_language(language) if language else settings.language,
        strict=settings.strict_levels,
        skip_first_row=settings.export_skip_first_row,
    )
    view.filter = FilterSpec.for_levels(_parse_levels(levels), search)
    view.apply_filter()
    return view


async def view_result_impl(
    *,
    test_id: str,
    levels: Sequence[str] | None = None,
    search: str | None = None,
    expand_all: bool = False,
    language: str | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Implementation for the `view_result` MCP tool."""
    settings = settings or resolve_settings()
    try:
        view = await _load_view(
            test_id, settings=settings, levels=levels, search=search, language=language
        )
    except NoDataError as e:
        return _no_data(test_id, e)

    if expand_all:
        view.expand_all()
    out = view.to_dict()
    out["found"] = True
    return out


async def export_result_impl(
    *,
    test_id: str,
    format: str,
    levels: Sequence[str] | None = None,
    search: str | None = None,
    filtered: bool = False,
    output_dir: str | None = None,
    language: str | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Implementation for the `export_result` MCP tool.

    Notes
    -----
    - levels/search only matter when filtered is true; the default exports
      the full result set.
    - without output_dir the payload text is returned inline.
    """
    settings = settings or resolve_settings()
    fmt = ExportFormat.parse(format)
    try:
        view = await _load_view(
            test_id, settings=settings, levels=levels, search=search, language=language
        )
    except NoDataError as e:
        return _no_data(test_id, e)

    payload = view.export(fmt, filtered=filtered)
    out: dict[str, Any] = {
        "test_id": test_id,
        "found": True,
        "filename": payload.filename,
        "mime_type": payload.mime_type,
    }
    if output_dir:
        path = await save_payload(payload, Path(output_dir))
        out["path"] = str(path)
    else:
        out["content"] = payload.text
    return out


async def result_history_impl(
    *,
    test_id: str,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Implementation for the `result_history` MCP tool."""
    settings = settings or resolve_settings()
    store = FileResultStore(settings.base_dir)
    try:
        payload = await store.get_test_results(test_id)
    except NoDataError as e:
        return _no_data(test_id, e)

    history = await store.get_test_history(payload.params)
    out: dict[str, Any] = {
        "test_id": test_id,
        "found": True,
        "history": [h.model_dump(mode="json") for h in history],
    }
    if not history:
        out["alert"] = {"level": "info", "message": "No previous tests found for this domain."}
    return out


def check_test_form_impl(
    *,
    domain: str,
    nameservers: Sequence[Mapping[str, Any]] | None = None,
    ds_info: Sequence[Mapping[str, Any]] | None = None,
    disable_ipv4: bool = False,
    disable_ipv6: bool = False,
    profile: str | None = None,
) -> dict[str, Any]:
    """Implementation for the `check_test_form` MCP tool.

    Rows are entered one field at a time, the same way a user fills them in,
    so the row validators and the list growth behave as in the form.
    """
    form = RunTestForm(profiles=[profile] if profile else None)
    form.set_domain(domain)
    form.disable_ipv4 = disable_ipv4
    form.disable_ipv6 = disable_ipv6

    for kind, rows in ((RowKind.NAMESERVERS, nameservers), (RowKind.DS_INFO, ds_info)):
        group = form.group(kind)
        for i, row in enumerate(rows or ()):
            # Blank rows do not trigger growth, so make room explicitly.
            target = group[i] if i < len(group) else group.add_row()
            for name, value in row.items():
                if name not in target.fields:
                    valid = ", ".join(target.fields)
                    raise ValueError(
                        f"Unknown field '{name}' in {kind.value}[{i}]. Valid fields: {valid}."
                    )
                target.set(name, value)

    try:
        params = form.build_params()
    except FormValidationError as e:
        return {"valid": False, "errors": e.errors}
    return {"valid": True, "errors": [], "params": params}
