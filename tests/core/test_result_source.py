from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from zone_report_engine.core.result_source import (
    NO_DATA_MESSAGE,
    FileResultStore,
    NoDataError,
    load_payload,
)


@pytest.mark.asyncio
async def test_get_test_results_plain(tmp_path: Path, make_payload, write_result) -> None:
    write_result(tmp_path, make_payload())

    payload = await FileResultStore(tmp_path).get_test_results("abc123")

    assert payload.hash_id == "abc123"
    assert payload.params.domain == "example.se"
    assert payload.params.ipv4 is True
    assert payload.created_at == datetime(2024, 3, 1, 12, 30, tzinfo=UTC)
    assert len(payload.results) == 5
    assert payload.testcase_descriptions["DNSSEC01"].startswith("Legal values")


@pytest.mark.asyncio
async def test_get_test_results_gzip(tmp_path: Path, make_payload, write_result) -> None:
    write_result(tmp_path, make_payload(hash_id="gz1"), gz=True)

    payload = await FileResultStore(tmp_path).get_test_results("gz1")

    assert payload.hash_id == "gz1"


@pytest.mark.asyncio
async def test_naive_created_at_is_utc(tmp_path: Path, make_payload, write_result) -> None:
    write_result(tmp_path, make_payload(created_at="2024-03-01T12:30:00"))

    payload = await FileResultStore(tmp_path).get_test_results("abc123")

    assert payload.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_missing_result_raises_no_data(tmp_path: Path) -> None:
    with pytest.raises(NoDataError) as exc:
        await FileResultStore(tmp_path).get_test_results("nothere")
    assert str(exc.value) == NO_DATA_MESSAGE
    assert exc.value.test_id == "nothere"


@pytest.mark.asyncio
async def test_malformed_result_raises_no_data(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "partial.json").write_text(json.dumps({"hash_id": "partial"}), encoding="utf-8")
    store = FileResultStore(tmp_path)

    with pytest.raises(NoDataError):
        await store.get_test_results("broken")
    with pytest.raises(NoDataError):
        await store.get_test_results("partial")


@pytest.mark.asyncio
async def test_invalid_test_id_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Invalid test id"):
        await FileResultStore(tmp_path).get_test_results("../etc/passwd")


@pytest.mark.asyncio
async def test_list_test_ids(tmp_path: Path, make_payload, write_result) -> None:
    write_result(tmp_path, make_payload(hash_id="b"))
    write_result(tmp_path, make_payload(hash_id="a"), gz=True)
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    assert await FileResultStore(tmp_path).list_test_ids() == ["a", "b"]
    assert await FileResultStore(tmp_path / "missing").list_test_ids() == []


@pytest.mark.asyncio
async def test_history_same_domain_newest_first(tmp_path: Path, make_payload, write_result) -> None:
    write_result(tmp_path, make_payload(hash_id="old", created_at="2024-01-01T00:00:00+00:00"))
    write_result(
        tmp_path,
        make_payload(
            hash_id="new",
            domain="Example.se.",
            created_at="2024-02-01T00:00:00+00:00",
            results=[{"module": "BASIC", "testcase": "B01", "level": "WARNING", "message": "w"}],
            nameservers=[{"ns": "ns1.example.se"}],
        ),
    )
    write_result(tmp_path, make_payload(hash_id="other", domain="example.com"))

    history = await FileResultStore(tmp_path).get_test_history({"domain": "example.se"})

    assert [h.id for h in history] == ["new", "old"]
    assert history[0].overall_result == "warning"
    assert history[0].undelegated is True
    assert history[1].overall_result == "error"
    assert history[1].undelegated is False


def test_load_payload_rejects_invalid() -> None:
    with pytest.raises(ValueError, match="Invalid test result payload"):
        load_payload("[]")
