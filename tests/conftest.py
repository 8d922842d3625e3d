from __future__ import annotations

import copy
import gzip
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from zone_report_engine.core.settings import Settings

RAW_RESULTS: list[dict[str, Any]] = [
    {"module": "SYSTEM", "testcase": "UNSPECIFIED", "level": "INFO", "message": "Using version v4.7.3"},
    {"module": "DNSSEC", "testcase": "DNSSEC01", "level": "NOTICE", "message": "DS record found"},
    {"module": "DNSSEC", "testcase": "DNSSEC01", "level": "ERROR", "message": "DS digest type 1 is deprecated"},
    {"module": "DNSSEC", "testcase": "DNSSEC02", "level": "WARNING", "message": "DNSKEY uses a short key"},
    {"module": "BASIC", "testcase": "BASIC01", "level": "INFO", "message": "Parent zone is se"},
]


@pytest.fixture
def raw_results() -> list[dict[str, Any]]:
    return copy.deepcopy(RAW_RESULTS)


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    def _make(
        hash_id: str = "abc123",
        domain: str = "example.se",
        created_at: str = "2024-03-01T12:30:00+00:00",
        results: list[dict[str, Any]] | None = None,
        **params: Any,
    ) -> dict[str, Any]:
        return {
            "hash_id": hash_id,
            "created_at": created_at,
            "params": {"domain": domain, **params},
            "results": copy.deepcopy(RAW_RESULTS) if results is None else results,
            "testcase_descriptions": {"DNSSEC01": "Legal values for the DS hash digest algorithm"},
        }

    return _make


@pytest.fixture
def write_result() -> Callable[..., Path]:
    def _write(directory: Path, payload: dict[str, Any], *, gz: bool = False) -> Path:
        text = json.dumps(payload)
        if gz:
            path = directory / f"{payload['hash_id']}.json.gz"
            with gzip.open(path, "wt", encoding="utf-8") as f:
                f.write(text)
        else:
            path = directory / f"{payload['hash_id']}.json"
            path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(base_dir=tmp_path)
