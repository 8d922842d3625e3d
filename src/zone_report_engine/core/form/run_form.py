"""The "run a test" form: domain, protocol toggles and two repeating lists."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..domain import sanitize_domain
from .group import ALL, RepeatingFieldGroup
from .rows import REQUIRED, SERVER_ERROR, Row, RowKind

logger = logging.getLogger(__name__)

NO_PARENT_DATA = "No data found for the zone."
PARENT_DATA_FETCHED = "Parent data fetched with success."
DEFAULT_PROFILE = "default"


class FormValidationError(ValueError):
    """Raised when a request is built from an invalid form."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        paths = ", ".join(f"{e['path'] or '/'} ({e['error']})" for e in errors)
        super().__init__(f"Form is invalid: {paths}")


def validate_protocols(disable_ipv4: bool, disable_ipv6: bool) -> dict[str, bool] | None:
    """At least one address family must stay enabled."""
    if disable_ipv4 is True and disable_ipv6 is True:
        return {"noProtocol": True}
    return None


def _to_number(value: Any) -> int:
    if value in ("", None):
        return 0
    return int(value)


class RunTestForm:
    def __init__(self, profiles: Sequence[str] | None = None) -> None:
        self.profiles = list(profiles or [])
        self.reset()

    def reset(self) -> None:
        """Rebuild a fresh form with one blank row per list."""
        self.domain = ""
        self.domain_touched = False
        self.disable_ipv4 = False
        self.disable_ipv6 = False
        self.profile = self.profiles[0] if self.profiles else DEFAULT_PROFILE
        self.disabled = False
        self.domain_errors: dict[str, Any] = {}
        self.form_errors: dict[str, Any] = {}
        self.groups: dict[RowKind, RepeatingFieldGroup] = {
            RowKind.NAMESERVERS: RepeatingFieldGroup(RowKind.NAMESERVERS),
            RowKind.DS_INFO: RepeatingFieldGroup(RowKind.DS_INFO),
        }

    @property
    def nameservers(self) -> RepeatingFieldGroup:
        return self.groups[RowKind.NAMESERVERS]

    @property
    def ds_info(self) -> RepeatingFieldGroup:
        return self.groups[RowKind.DS_INFO]

    def group(self, list_name: RowKind | str) -> RepeatingFieldGroup:
        return self.groups[RowKind.parse(list_name)]

    def set_domain(self, value: str) -> None:
        self.domain = value
        self.domain_touched = True
        self.domain_errors.pop(SERVER_ERROR, None)

    def add_row(self, list_name: RowKind | str, value: Mapping[str, Any] | None = None) -> Row:
        return self.group(list_name).add_row(value)

    def delete_row(self, list_name: RowKind | str, index: int | str) -> int | None:
        return self.group(list_name).delete_row(index)

    def disable_all(self, disabled: bool = True) -> None:
        self.disabled = disabled
        for group in self.groups.values():
            group.set_disabled(disabled)

    def validate_protocols(self) -> dict[str, bool] | None:
        return validate_protocols(self.disable_ipv4, self.disable_ipv6)

    def request_parent_data(self, list_name: RowKind | str) -> tuple[RowKind, str] | None:
        """Validate the domain and lock the form while parent data is fetched.

        Returns the (list, domain) request, or None when the domain is missing.
        """
        kind = RowKind.parse(list_name)
        self.domain_touched = True
        if not self.domain.strip():
            return None
        self.disable_all(True)
        return kind, self.domain

    def set_parent_data(self, list_name: RowKind | str, rows: Sequence[Mapping[str, Any]]) -> str:
        """Replace a list with fetched rows plus one trailing blank row."""
        group = self.group(list_name)
        self.disable_all(False)

        group.delete_row(ALL)
        for row in rows:
            group.add_row(row)
        group.add_row()
        message = PARENT_DATA_FETCHED if rows else NO_PARENT_DATA
        logger.debug("Loaded %d %s rows from parent", len(rows), group.kind.value)
        return message

    def apply_server_errors(self, errors: Sequence[Mapping[str, Any]]) -> None:
        """Attach backend validation errors to the fields named by their paths.

        Paths look like "/domain" or "/nameservers/0/ns".
        """
        self.disable_all(False)
        for error in errors:
            message = error.get("message", "")
            segments = str(error.get("path", "")).split("/")[1:]
            self._apply_server_error([s for s in segments if s != ""], message)

    def _apply_server_error(self, segments: list[str], message: Any) -> None:
        if not segments:
            self.form_errors[SERVER_ERROR] = message
            return
        head = segments[0]
        if head == "domain" and len(segments) == 1:
            self.domain_errors[SERVER_ERROR] = message
            return
        if head in ("disable_ipv4", "disable_ipv6", "profile", "ipv4", "ipv6") and len(segments) == 1:
            self.form_errors[SERVER_ERROR] = message
            return
        try:
            group = self.group(head)
        except ValueError as e:
            raise KeyError(f"Unknown form path: /{'/'.join(segments)}") from e
        if len(segments) == 1:
            self.form_errors[SERVER_ERROR] = message
            return
        try:
            row = group[int(segments[1])]
        except (ValueError, IndexError) as e:
            raise KeyError(f"Unknown form path: /{'/'.join(segments)}") from e
        if len(segments) == 2:
            for name in row.fields:
                row.set_error(name, SERVER_ERROR, message)
            return
        row.set_error(segments[2], SERVER_ERROR, message)

    def errors(self) -> list[dict[str, Any]]:
        """Every validation problem as {"path", "error", "detail"}."""
        out: list[dict[str, Any]] = []
        if not self.domain.strip():
            out.append({"path": "/domain", "error": REQUIRED, "detail": True})
        for key, detail in self.domain_errors.items():
            out.append({"path": "/domain", "error": key, "detail": detail})
        protocol = self.validate_protocols()
        if protocol:
            out.extend({"path": "", "error": key, "detail": v} for key, v in protocol.items())
        for key, detail in self.form_errors.items():
            out.append({"path": "", "error": key, "detail": detail})
        for kind, group in self.groups.items():
            for i, row in enumerate(group):
                for name, field_errors in row.errors.items():
                    for key, detail in field_errors.items():
                        out.append({"path": f"/{kind.value}/{i}/{name}", "error": key, "detail": detail})
        return out

    @property
    def is_valid(self) -> bool:
        return not self.errors()

    def build_params(self) -> dict[str, Any]:
        """Return the run-test request for a valid form."""
        errors = self.errors()
        if errors:
            raise FormValidationError(errors)

        params: dict[str, Any] = {
            "domain": sanitize_domain(self.domain),
            "profile": self.profile,
        }
        if self.disable_ipv4:
            params["ipv4"] = False
        if self.disable_ipv6:
            params["ipv6"] = False

        nameservers: list[dict[str, Any]] = []
        for row in self.nameservers:
            ns = sanitize_domain(str(row.get("ns")))
            ip = str(row.get("ip")).strip()
            if not ns and not ip:
                continue
            item: dict[str, Any] = {"ns": ns}
            if ip:
                item["ip"] = ip
            nameservers.append(item)
        params["nameservers"] = nameservers

        ds_info: list[dict[str, Any]] = []
        for row in self.ds_info:
            v = row.values()
            try:
                algorithm = _to_number(v["algorithm"])
                digtype = _to_number(v["digtype"])
                if not (v["keytag"] or algorithm > 0 or digtype > 0 or v["digest"]):
                    continue
                ds_info.append(
                    {
                        "keytag": _to_number(v["keytag"]),
                        "algorithm": algorithm,
                        "digtype": digtype,
                        "digest": str(v["digest"]).strip(),
                    }
                )
            except ValueError as e:
                raise FormValidationError(
                    [{"path": f"/{RowKind.DS_INFO.value}", "error": "number", "detail": str(e)}]
                ) from e
        params["ds_info"] = ds_info
        return params
