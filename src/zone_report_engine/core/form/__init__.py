"""Run-test form with repeating nameserver and DS-record lists."""

from __future__ import annotations

from .group import ALL, RepeatingFieldGroup
from .rows import (
    REQUIRED,
    SERVER_ERROR,
    DsRecordRow,
    NameserverRow,
    Row,
    RowKind,
    new_row,
    validate_ds_row,
    validate_nameserver_row,
)
from .run_form import (
    NO_PARENT_DATA,
    PARENT_DATA_FETCHED,
    FormValidationError,
    RunTestForm,
    validate_protocols,
)

__all__ = [
    "ALL",
    "NO_PARENT_DATA",
    "PARENT_DATA_FETCHED",
    "REQUIRED",
    "SERVER_ERROR",
    "DsRecordRow",
    "FormValidationError",
    "NameserverRow",
    "RepeatingFieldGroup",
    "Row",
    "RowKind",
    "RunTestForm",
    "new_row",
    "validate_ds_row",
    "validate_nameserver_row",
    "validate_protocols",
]
