"""Row types for the nameserver and DS-record input lists.

Each row owns its values, a dirty/touched state and per-field errors. Setting
a field runs the row's cross-field validator and then notifies change
listeners, so listeners always observe the post-validation state.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, ClassVar

REQUIRED = "required"
SERVER_ERROR = "serverError"

RowListener = Callable[["Row"], None]


class RowKind(str, Enum):
    NAMESERVERS = "nameservers"
    DS_INFO = "ds_info"

    @classmethod
    def parse(cls, value: RowKind | str) -> RowKind:
        try:
            return cls(value)
        except ValueError as e:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown list '{value}'. Valid values: {valid}.") from e


class Row:
    kind: ClassVar[RowKind]
    fields: ClassVar[tuple[str, ...]]

    def __init__(self, value: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict.fromkeys(self.fields, "")
        if value:
            for name, v in value.items():
                self._check_field(name)
                self._values[name] = "" if v is None else v
        self.dirty = False
        self.touched = False
        self.disabled = False
        self.errors: dict[str, dict[str, Any]] = {}
        self._listeners: list[RowListener] = []

    def __repr__(self) -> str:
        state = "dirty" if self.dirty else "pristine"
        return f"{type(self).__name__}({self._values!r}, {state})"

    def _check_field(self, name: str) -> None:
        if name not in self.fields:
            raise KeyError(f"{type(self).__name__} has no field '{name}'")

    @property
    def pristine(self) -> bool:
        return not self.dirty

    @property
    def is_blank(self) -> bool:
        return not any(self._values.values())

    def get(self, name: str) -> Any:
        self._check_field(name)
        return self._values[name]

    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def set(self, name: str, value: Any) -> None:
        """Edit one field as a user would."""
        self._check_field(name)
        if self.disabled:
            raise RuntimeError(f"{type(self).__name__} is disabled")
        self._values[name] = "" if value is None else value
        self.errors.pop(name, None)
        self.mark_dirty()
        self.touched = True
        self.validate()
        for listener in list(self._listeners):
            listener(self)

    def reset(self) -> None:
        self._values = dict.fromkeys(self.fields, "")
        self.errors.clear()
        self.dirty = False
        self.touched = False

    def mark_dirty(self) -> None:
        self.dirty = True

    def mark_pristine(self) -> None:
        self.dirty = False
        self.touched = False

    def set_error(self, name: str, key: str, detail: Any = True) -> None:
        self._check_field(name)
        self.errors.setdefault(name, {})[key] = detail

    def clear_error(self, name: str, key: str) -> None:
        field_errors = self.errors.get(name)
        if field_errors is None:
            return
        field_errors.pop(key, None)
        if not field_errors:
            del self.errors[name]

    def subscribe(self, listener: RowListener) -> Callable[[], None]:
        """Register a change listener; returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def validate(self) -> None:
        raise NotImplementedError


class NameserverRow(Row):
    kind = RowKind.NAMESERVERS
    fields = ("ns", "ip")

    def validate(self) -> None:
        validate_nameserver_row(self)


class DsRecordRow(Row):
    kind = RowKind.DS_INFO
    fields = ("keytag", "algorithm", "digtype", "digest")

    def validate(self) -> None:
        validate_ds_row(self)


def validate_nameserver_row(row: NameserverRow) -> None:
    """An IP without a name makes the name required; an empty row is reset."""
    ns = row.get("ns")
    ip = row.get("ip")
    if ip and not ns:
        row.set_error("ns", REQUIRED)
    elif not ip and not ns:
        row.clear_error("ns", REQUIRED)
        row.mark_pristine()
    else:
        row.clear_error("ns", REQUIRED)


def validate_ds_row(row: DsRecordRow) -> None:
    """Either all four DS fields are given or none; an empty row is reset."""
    if any(row.get(name) for name in row.fields):
        for name in row.fields:
            if row.get(name):
                row.clear_error(name, REQUIRED)
            else:
                row.set_error(name, REQUIRED)
    else:
        for name in row.fields:
            row.clear_error(name, REQUIRED)
        row.mark_pristine()


def new_row(kind: RowKind | str, value: Mapping[str, Any] | None = None) -> Row:
    """Create a blank (or pre-filled) row of the given list kind."""
    kind = RowKind.parse(kind)
    if kind is RowKind.NAMESERVERS:
        return NameserverRow(value)
    if kind is RowKind.DS_INFO:
        return DsRecordRow(value)
    raise ValueError(f"Unsupported list kind: {kind!r}")
