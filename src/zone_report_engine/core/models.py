"""Core data models for zone test results."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

UNSPECIFIED = "UNSPECIFIED"


class UnknownSeverityError(ValueError):
    """Raised when an entry carries a level outside the severity model."""


class Severity(str, Enum):
    """Ordered severity levels reported by the test backend."""

    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def parse(cls, value: Any, *, strict: bool = False) -> Severity:
        """Parse a level name case-insensitively.

        Unknown names raise in strict mode; otherwise they are clamped to INFO
        and logged so the result can still be displayed.
        """
        if isinstance(value, Severity):
            return value
        name = str(value or "").strip().lower()
        try:
            return cls(name)
        except ValueError as e:
            if strict:
                valid = ", ".join(s.value for s in cls)
                raise UnknownSeverityError(
                    f"Unknown severity level '{value}'. Valid values: {valid}."
                ) from e
            logger.warning("Unknown severity level %r, clamping to %s", value, cls.INFO.value)
            return cls.INFO


_RANKS: dict[Severity, int] = {
    Severity.INFO: 0,
    Severity.NOTICE: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
    Severity.CRITICAL: 4,
}

# Highest first; used for presentation ordering.
SEVERITY_DESCENDING: tuple[Severity, ...] = tuple(sorted(Severity, key=lambda s: -s.rank))


def is_unspecified(testcase: str) -> bool:
    return testcase.upper() == UNSPECIFIED


@dataclass(frozen=True, slots=True)
class Entry:
    """One diagnostic finding (module, test case, severity, message)."""

    module: str
    testcase: str
    level: Severity
    message: str
    args: Mapping[str, Any] | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], *, strict: bool = False) -> Entry:
        """Ingest a raw backend record, normalizing its level."""
        try:
            module = str(raw["module"])
            level_raw = raw["level"]
        except KeyError as e:
            raise ValueError(f"Result entry is missing field {e.args[0]!r}") from e
        return cls(
            module=module,
            testcase=str(raw.get("testcase") or UNSPECIFIED),
            level=Severity.parse(level_raw, strict=strict),
            message=str(raw.get("message") or ""),
            args=raw.get("args"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape of the entry with its normalized level."""
        d: dict[str, Any] = {
            "module": self.module,
            "testcase": self.testcase,
            "level": self.level.value,
            "message": self.message,
        }
        if self.args is not None:
            d["args"] = dict(self.args)
        return d
