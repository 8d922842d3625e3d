"""Variable-length input lists that grow on edit and never become empty."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, Final
from weakref import WeakSet

from .rows import Row, RowKind, new_row

logger = logging.getLogger(__name__)

ALL: Final = "all"


class RepeatingFieldGroup:
    """Ordered rows of one kind with a trailing blank row.

    The first edit of a watched (pristine) row appends a new blank row and
    removes the watch, so every row triggers growth at most once per arming.
    """

    def __init__(self, kind: RowKind | str) -> None:
        self.kind = RowKind.parse(kind)
        self.disabled = False
        self._rows: list[Row] = []
        self._watched: WeakSet[Row] = WeakSet()
        self.add_row()

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Row:
        return self._rows[index]

    def __repr__(self) -> str:
        return f"RepeatingFieldGroup({self.kind.value}, rows={len(self._rows)})"

    @property
    def rows(self) -> list[Row]:
        return list(self._rows)

    def is_watched(self, row: Row) -> bool:
        return row in self._watched

    def add_row(self, value: Mapping[str, Any] | None = None) -> Row:
        """Append a row.

        A blank row is watched for its first edit. A pre-filled row is marked
        dirty and not watched; bulk loaders append the trailing blank row
        themselves.
        """
        row = new_row(self.kind, value)
        row.disabled = self.disabled
        if value is None:
            self._watch(row)
        else:
            row.mark_dirty()
        self._rows.append(row)
        return row

    def delete_row(self, index: int | str) -> int | None:
        """Delete one row, or every row with the ALL sentinel.

        Returns the index of the row whose delete control should take focus
        after a removal, or None when nothing was removed (the row was reset
        to blank instead, or ALL was used).
        """
        if index == ALL or index == -1:
            for i in range(len(self._rows) - 1, -1, -1):
                self._remove(i)
            return None

        if not isinstance(index, int) or not 0 <= index < len(self._rows):
            raise IndexError(f"{self.kind.value} row index out of range: {index!r}")

        focus: int | None
        last = len(self._rows) - 1
        if len(self._rows) == 1 or (index == last and not self._rows[index - 1].pristine):
            self._rows[index].reset()
            focus = None
        else:
            self._remove(index)
            focus = index if index < len(self._rows) else index - 1

        self._watch(self._rows[-1])
        return focus

    def set_disabled(self, disabled: bool) -> None:
        self.disabled = disabled
        for row in self._rows:
            row.disabled = disabled

    def filled_rows(self) -> list[Row]:
        return [row for row in self._rows if not row.is_blank]

    def _remove(self, index: int) -> None:
        row = self._rows.pop(index)
        self._watched.discard(row)

    def _watch(self, row: Row) -> None:
        if not row.pristine or row in self._watched:
            return

        def on_change(changed: Row) -> None:
            if changed.pristine:
                return
            unsubscribe()
            self._watched.discard(changed)
            if changed in self._rows:
                logger.debug("%s row edited, appending a blank row", self.kind.value)
                self.add_row()

        unsubscribe = row.subscribe(on_change)
        self._watched.add(row)
