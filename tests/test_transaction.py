"""Tests for TotalumAdapter.transaction (sequential, fail-fast)."""

from __future__ import annotations

import pytest

from totalum_auth_adapter import (
    TotalumApiError,
    TransactionAbortedError,
    TransactionalAdapter,
)


class TestTransaction:
    @pytest.mark.asyncio
    async def test_runs_operations_in_order(self, adapter, crud) -> None:
        async def work(tx):
            user = await tx.create("user", {"name": "Dan", "email": "d@x.io"})
            await tx.create("session", {"userId": user["id"], "token": "t"})
            return user["id"]

        user_id = await adapter.transaction(work)

        assert user_id in crud.tables["user"]
        assert [call[0] for call in crud.calls] == ["create", "create"]
        session = next(iter(crud.tables["session"].values()))
        assert session["user_id"] == user_id

    @pytest.mark.asyncio
    async def test_callback_receives_transactional_adapter(self, adapter) -> None:
        seen = {}

        async def work(tx):
            seen["tx"] = tx
            await tx.find_one("user", [{"field": "id", "value": "missing"}])
            await tx.create("user", {"name": "Dan"})

        await adapter.transaction(work)

        tx = seen["tx"]
        assert isinstance(tx, TransactionalAdapter)
        assert tx.id == adapter.id
        assert tx.uow.committed
        assert tx.uow.writes == 1

    @pytest.mark.asyncio
    async def test_failure_stops_and_keeps_earlier_writes(
        self, adapter, crud, seeded_users
    ) -> None:
        crud.fail_on.add("u1")

        async def work(tx):
            await tx.create("user", {"name": "Dan"})
            await tx.update("user", [{"field": "id", "value": "u1"}], {"name": "A"})
            await tx.create("user", {"name": "Never"})

        with pytest.raises(TotalumApiError):
            await adapter.transaction(work)

        names = {r["name"] for r in crud.tables["user"].values()}
        assert "Dan" in names
        assert "Never" not in names
        assert crud.count_calls("create") == 1

    @pytest.mark.asyncio
    async def test_operations_after_failure_are_refused(
        self, adapter, crud, seeded_users
    ) -> None:
        crud.fail_on.add("u1")
        caught = {}

        async def work(tx):
            with pytest.raises(TotalumApiError) as first:
                await tx.delete("user", [{"field": "id", "value": "u1"}])
            with pytest.raises(TransactionAbortedError) as aborted:
                await tx.create("user", {"name": "Never"})
            caught["first"] = first.value
            caught["aborted"] = aborted.value

        with pytest.raises(TotalumApiError) as outer:
            await adapter.transaction(work)

        assert caught["aborted"].cause is caught["first"]
        assert outer.value is caught["first"]
        assert crud.count_calls("create") == 0

    @pytest.mark.asyncio
    async def test_swallowed_failure_is_still_raised(
        self, adapter, crud, seeded_users
    ) -> None:
        crud.fail_on.add("u2")

        async def work(tx):
            try:
                await tx.update_many("user", None, {"role": "x"})
                await tx.delete("user", [{"field": "id", "value": "u2"}])
            except TotalumApiError:
                pass
            return "done"

        with pytest.raises(TotalumApiError):
            await adapter.transaction(work)

    @pytest.mark.asyncio
    async def test_aborted_error_surfaces_original_cause(
        self, adapter, crud, seeded_users
    ) -> None:
        crud.fail_on.add("u3")

        async def work(tx):
            try:
                await tx.delete("user", [{"field": "id", "value": "u3"}])
            except TotalumApiError:
                pass
            await tx.count("user")

        with pytest.raises(TotalumApiError) as exc_info:
            await adapter.transaction(work)
        assert isinstance(exc_info.value.__cause__, TransactionAbortedError)

    @pytest.mark.asyncio
    async def test_callback_error_propagates(self, adapter, crud) -> None:
        async def work(tx):
            await tx.create("user", {"name": "Dan"})
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await adapter.transaction(work)
        assert len(crud.tables["user"]) == 1

    @pytest.mark.asyncio
    async def test_nested_transaction_joins_outer_unit(self, adapter) -> None:
        async def inner(tx):
            await tx.create("user", {"name": "Inner"})
            return tx.uow

        async def outer(tx):
            await tx.create("user", {"name": "Outer"})
            inner_uow = await tx.transaction(inner)
            assert inner_uow is tx.uow
            return tx.uow

        uow = await adapter.transaction(outer)
        assert uow.writes == 2

    @pytest.mark.asyncio
    async def test_reads_are_not_writes(self, adapter, seeded_users) -> None:
        async def work(tx):
            await tx.find_many("user", limit=2)
            assert await tx.count("user") == 3
            await tx.delete_many("user", [{"field": "role", "value": "admin"}])
            return tx.uow

        uow = await adapter.transaction(work)
        assert uow.writes == 1
