"""Tests for the in-memory Totalum record API."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from totalum_auth_adapter import InMemoryTotalumCrud, TotalumApiError
from totalum_auth_adapter.memory import matches

RECORD = {"_id": "1", "name": "Alice", "age": 30, "email": "a@x.io"}


@pytest.mark.parametrize(
    ("term", "expected"),
    [
        ({"name": "Alice"}, True),
        ({"name": "Bob"}, False),
        ({"name": {"ne": "Bob"}}, True),
        ({"age": {"gte": 30}}, True),
        ({"age": {"lte": 29}}, False),
        ({"name": {"regex": "^ali", "options": "i"}}, True),
        ({"name": {"regex": "^ali"}}, False),
        ({"or": [{"name": "Bob"}, {"age": 30}]}, True),
        ({"or": [{"name": "Bob"}, {"age": 31}]}, False),
        ({"missing": None}, True),
        ({"missing": {"gte": 1}}, False),
    ],
)
def test_matches(term, expected) -> None:
    assert matches(RECORD, term) is expected


class TestInMemoryTotalumCrud:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self) -> None:
        crud = InMemoryTotalumCrud()
        response = await crud.create_record("user", {"name": "A"})

        record = response["data"]
        assert record["_id"] in crud.tables["user"]
        assert record["createdAt"].endswith("Z")
        assert record["updatedAt"] == record["createdAt"]

    @pytest.mark.asyncio
    async def test_edit_and_delete_missing_records(self) -> None:
        crud = InMemoryTotalumCrud()
        with pytest.raises(TotalumApiError) as exc_info:
            await crud.edit_record_by_id("user", "nope", {})
        assert exc_info.value.status_code == 404
        with pytest.raises(TotalumApiError):
            await crud.delete_record_by_id("user", "nope")

    @pytest.mark.asyncio
    async def test_pagination_and_sort(self) -> None:
        crud = InMemoryTotalumCrud()
        crud.seed("t", *({"n": n} for n in (3, 1, 2, 5, 4)))
        response = await crud.get_records(
            "t", {"sort": {"n": 1}, "pagination": {"limit": 2, "page": 1}}
        )
        assert [r["n"] for r in response["data"]] == [3, 4]

    def test_helpers(self) -> None:
        crud = InMemoryTotalumCrud()
        assert crud.seed("t", {"_id": "x"}, {"a": 1})[0] == "x"
        crud.fail_on.add("x")
        crud.calls.append(("get", "t", {}))
        assert crud.count_calls("get") == 1

        crud.clear()
        assert crud.tables == {}
        assert crud.calls == []
        assert crud.fail_on == set()


@pytest.mark.asyncio
async def test_payloads_are_stored_as_json(adapter, crud) -> None:
    at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    created = await adapter.create("user", {"name": "A", "createdAt": at})
    await adapter.update(
        "user", [{"field": "id", "value": created["id"]}], {"createdBy": at}
    )

    stored = crud.tables["user"][created["id"]]
    assert stored["createdAt"] == "2024-01-02T03:04:05+00:00"
    assert stored["createdBy"] == "2024-01-02T03:04:05+00:00"


@pytest.mark.asyncio
async def test_unencodable_payload_is_rejected() -> None:
    crud = InMemoryTotalumCrud()
    with pytest.raises(TypeError):
        await crud.create_record("user", {"blob": object()})
