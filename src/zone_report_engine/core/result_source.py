"""File-backed source of stored test results and test history.

Results live in a directory as `<test_id>.json` (optionally gzip-compressed as
`<test_id>.json.gz`) in the shape returned by the test backend.
"""

from __future__ import annotations

import asyncio
import gzip
import json
import logging
import re
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiofiles
from aiofiles.threadpool import wrap
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .domain import sanitize_domain
from .models import Severity

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data for this test."
_TEST_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class NoDataError(LookupError):
    """Raised when a test result cannot be fetched or parsed."""

    def __init__(self, test_id: str, reason: str | None = None) -> None:
        self.test_id = test_id
        self.reason = reason
        super().__init__(NO_DATA_MESSAGE)


class ResultParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    domain: str
    ipv4: bool = True
    ipv6: bool = True
    profile: str = "default"
    nameservers: list[dict[str, Any]] = Field(default_factory=list)
    ds_info: list[dict[str, Any]] = Field(default_factory=list)


class ResultPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hash_id: str
    created_at: datetime
    params: ResultParams
    results: list[dict[str, Any]] = Field(default_factory=list)
    testcase_descriptions: dict[str, str] = Field(default_factory=dict)

    @field_validator("created_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            v = v.replace(tzinfo=UTC)
        return v


class HistoryItem(BaseModel):
    id: str
    created_at: datetime
    overall_result: str
    undelegated: bool = False


def validate_test_id(test_id: str) -> str:
    if not _TEST_ID_RE.match(test_id or ""):
        raise ValueError(f"Invalid test id: {test_id!r}")
    return test_id


@asynccontextmanager
async def _open_text(path: Path):
    """Open a stored result for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding="utf-8")
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding="utf-8") as f:
            yield f


def _overall_result(results: list[dict[str, Any]]) -> str:
    best = Severity.INFO
    for raw in results:
        level = Severity.parse(raw.get("level"))
        if level.rank > best.rank:
            best = level
    return best.value


class FileResultStore:
    """Reads stored test results from a directory."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def _path_for(self, test_id: str) -> Path | None:
        for suffix in (".json", ".json.gz"):
            p = self.base_dir / f"{test_id}{suffix}"
            if p.is_file():
                return p
        return None

    async def _read(self, path: Path) -> ResultPayload:
        async with _open_text(path) as f:
            text = await f.read()
        return ResultPayload.model_validate_json(text)

    async def get_test_results(self, test_id: str) -> ResultPayload:
        """Fetch one stored result; any failure surfaces as NoDataError."""
        validate_test_id(test_id)
        path = self._path_for(test_id)
        if path is None:
            logger.debug("No stored result for test %s in %s", test_id, self.base_dir)
            raise NoDataError(test_id, "not found")
        try:
            return await self._read(path)
        except (OSError, ValueError, EOFError) as e:
            logger.warning("Unreadable result for test %s: %s", test_id, e)
            raise NoDataError(test_id, str(e)) from e

    async def list_test_ids(self) -> list[str]:
        def scan() -> list[str]:
            if not self.base_dir.is_dir():
                return []
            ids: set[str] = set()
            for p in self.base_dir.iterdir():
                name = p.name
                for suffix in (".json.gz", ".json"):
                    if name.endswith(suffix):
                        stem = name[: -len(suffix)]
                        if _TEST_ID_RE.match(stem):
                            ids.add(stem)
                        break
            return sorted(ids)

        return await asyncio.to_thread(scan)

    async def get_test_history(self, params: ResultParams | dict[str, Any]) -> list[HistoryItem]:
        """Previous tests of the same domain, newest first."""
        if isinstance(params, dict):
            params = ResultParams.model_validate(params)
        wanted = sanitize_domain(params.domain).lower()

        items: list[HistoryItem] = []
        for test_id in await self.list_test_ids():
            try:
                payload = await self.get_test_results(test_id)
            except NoDataError:
                continue
            if sanitize_domain(payload.params.domain).lower() != wanted:
                continue
            items.append(
                HistoryItem(
                    id=payload.hash_id,
                    created_at=payload.created_at,
                    overall_result=_overall_result(payload.results),
                    undelegated=bool(payload.params.nameservers or payload.params.ds_info),
                )
            )
        items.sort(key=lambda h: h.created_at, reverse=True)
        return items


def load_payload(raw: str | bytes) -> ResultPayload:
    """Parse a backend payload from JSON text."""
    try:
        return ResultPayload.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid test result payload: {e}") from e
