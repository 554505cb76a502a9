"""TotalumAdapter: the auth storage contract over the Totalum record API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .batch import BatchResult, run_batch
from .config import AdapterCapabilities, TotalumAdapterConfig
from .connection import TotalumConnectionManager
from .exceptions import CreationError, TransactionAbortedError
from .naming import (
    REMOTE_ID_FIELD,
    record_to_contract,
    record_to_remote,
    to_remote_case,
)
from .ports import IAuthStorageAdapter, ITotalumCrud, Record
from .query_builder import TotalumQueryBuilder
from .uow import TotalumUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping

    from .where import SortBy, WhereInput

logger = logging.getLogger("totalum_auth_adapter.adapter")

R = TypeVar("R")


def unwrap_response(response: Any) -> Any:
    """Return the ``data`` member of a Totalum response envelope, or None."""
    if isinstance(response, dict):
        return response.get("data")
    return None


def _select(record: Record, select: Iterable[str] | None) -> Record:
    if not select:
        return record
    return {key: record[key] for key in select if key in record}


class TotalumAdapter(IAuthStorageAdapter):
    """
    Auth storage contract implemented against Totalum.

    Stateless: every call translates field names and filters, talks to the
    remote API and translates the result back.

    Known limitations of the remote store, kept visible on purpose:

    - ``lt``/``gt`` behave as ``lte``/``gte``.
    - ``find_many`` pages are ``limit`` wide; an ``offset`` that is not a
      multiple of ``limit`` starts at the beginning of its page.
    - ``count`` and the batch operations see at most ``scan_limit`` records.
    - ``update``/``delete`` find then mutate in two round trips with no
      isolation in between.
    - ``transaction`` orders operations but cannot roll them back.

    Example:
        ```python
        connection = TotalumConnectionManager.from_env()
        adapter = TotalumAdapter(connection)
        user = await adapter.find_one("user", [{"field": "email", "value": e}])
        ```
    """

    def __init__(
        self,
        client: ITotalumCrud | TotalumConnectionManager,
        config: TotalumAdapterConfig | None = None,
        *,
        query_builder: TotalumQueryBuilder | None = None,
    ) -> None:
        if isinstance(client, TotalumConnectionManager):
            self._connection = client
        else:
            self._connection = TotalumConnectionManager.for_client(client)
        self._config = config or TotalumAdapterConfig()
        self._query_builder = query_builder or TotalumQueryBuilder()
        self.capabilities = AdapterCapabilities()

    @property
    def id(self) -> str:
        return self.capabilities.adapter_id

    @property
    def config(self) -> TotalumAdapterConfig:
        return self._config

    def _log(self, msg: str, *args: Any) -> None:
        if self._config.debug_logs:
            logger.debug(msg, *args)

    async def _crud(self) -> ITotalumCrud:
        return await self._connection.connect()

    def table_name(self, model: str) -> str:
        """``emailVerification`` -> ``email_verification``."""
        table = to_remote_case(model)
        self._log('Model "%s" -> Table "%s"', model, table)
        return table

    async def _fetch(
        self,
        table: str,
        where: Iterable[WhereInput] | None,
        *,
        limit: int,
        offset: int | None = None,
        sort_by: SortBy | Mapping[str, Any] | None = None,
    ) -> list[Record]:
        """Run one ``get_records`` call; returns raw Totalum records."""
        query = self._query_builder.build_query(
            where, limit=limit, offset=offset, sort_by=sort_by
        )
        crud = await self._crud()
        response = await crud.get_records(table, query)
        return list(unwrap_response(response) or [])

    def _to_remote_payload(self, data: Mapping[str, Any]) -> Record:
        payload = record_to_remote(dict(data))
        payload.pop(REMOTE_ID_FIELD, None)
        return payload

    # ── Contract operations ──────────────────────────────────────

    async def create(
        self,
        model: str,
        data: Mapping[str, Any],
        *,
        select: Iterable[str] | None = None,
        force_allow_id: bool = False,
    ) -> Record:
        self._log("CREATE %s %s", model, data)
        table = self.table_name(model)
        payload = record_to_remote(dict(data))
        # Totalum generates _id itself
        if not force_allow_id:
            payload.pop(REMOTE_ID_FIELD, None)
        crud = await self._crud()
        record = unwrap_response(await crud.create_record(table, payload))
        if not record:
            raise CreationError(model)
        result = record_to_contract(record)
        self._log("CREATE result: %s", result)
        return _select(result, select)

    async def find_one(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        *,
        select: Iterable[str] | None = None,
    ) -> Record | None:
        self._log("FIND_ONE %s %s", model, where)
        items = await self._fetch(self.table_name(model), where, limit=1)
        if not items:
            self._log("FIND_ONE: Not found")
            return None
        return _select(record_to_contract(items[0]), select)

    async def find_many(
        self,
        model: str,
        where: Iterable[WhereInput] | None = None,
        *,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: SortBy | Mapping[str, Any] | None = None,
        select: Iterable[str] | None = None,
    ) -> list[Record]:
        self._log("FIND_MANY %s %s", model, where)
        items = await self._fetch(
            self.table_name(model),
            where,
            limit=limit or self._config.default_limit,
            offset=offset,
            sort_by=sort_by,
        )
        result = [_select(record_to_contract(item), select) for item in items]
        self._log("FIND_MANY result count: %d", len(result))
        return result

    async def count(self, model: str, where: Iterable[WhereInput] | None = None) -> int:
        """Count matches by fetching them; saturates at ``scan_limit``."""
        items = await self._fetch(
            self.table_name(model), where, limit=self._config.scan_limit
        )
        self._log("COUNT %s: %d", model, len(items))
        return len(items)

    async def update(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> Record | None:
        self._log("UPDATE %s %s", model, where)
        table = self.table_name(model)
        items = await self._fetch(table, where, limit=1)
        if not items:
            self._log("UPDATE: Record not found")
            return None
        crud = await self._crud()
        response = await crud.edit_record_by_id(
            table, items[0][REMOTE_ID_FIELD], self._to_remote_payload(update)
        )
        record = unwrap_response(response)
        if not record:
            self._log("UPDATE: Failed to update record")
            return None
        return record_to_contract(record)

    async def update_many_report(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> BatchResult:
        """Like :meth:`update_many` but reports which records failed."""
        table = self.table_name(model)
        items = await self._fetch(table, where, limit=self._config.scan_limit)
        payload = self._to_remote_payload(update)
        crud = await self._crud()

        async def _edit(record_id: Any) -> None:
            await crud.edit_record_by_id(table, record_id, payload)

        result = await run_batch(
            [item.get(REMOTE_ID_FIELD) for item in items],
            _edit,
            concurrency=self._config.batch_concurrency,
            label=f"UPDATE_MANY {table}",
        )
        self._log("UPDATE_MANY result count: %d", result.succeeded)
        return result

    async def update_many(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> int:
        return (await self.update_many_report(model, where, update)).succeeded

    async def delete(self, model: str, where: Iterable[WhereInput] | None) -> None:
        self._log("DELETE %s %s", model, where)
        table = self.table_name(model)
        items = await self._fetch(table, where, limit=1)
        if not items:
            self._log("DELETE: Record not found")
            return
        crud = await self._crud()
        await crud.delete_record_by_id(table, items[0][REMOTE_ID_FIELD])

    async def delete_many_report(
        self, model: str, where: Iterable[WhereInput] | None
    ) -> BatchResult:
        """Like :meth:`delete_many` but reports which records failed."""
        table = self.table_name(model)
        items = await self._fetch(table, where, limit=self._config.scan_limit)
        crud = await self._crud()

        async def _delete(record_id: Any) -> None:
            await crud.delete_record_by_id(table, record_id)

        result = await run_batch(
            [item.get(REMOTE_ID_FIELD) for item in items],
            _delete,
            concurrency=self._config.batch_concurrency,
            label=f"DELETE_MANY {table}",
        )
        self._log("DELETE_MANY result count: %d", result.succeeded)
        return result

    async def delete_many(self, model: str, where: Iterable[WhereInput] | None) -> int:
        return (await self.delete_many_report(model, where)).succeeded

    async def transaction(
        self, callback: Callable[[IAuthStorageAdapter], Awaitable[R]]
    ) -> R:
        """Run ``callback`` as a sequential, non-atomic unit of work.

        The callback receives a :class:`TransactionalAdapter`. The first
        failing operation aborts the unit: later calls raise
        :class:`~totalum_auth_adapter.exceptions.TransactionAbortedError`
        and the first error is raised to the caller, even if the
        callback caught it. Writes made before the failure stay applied.
        """
        self._log("TRANSACTION: Starting (sequential fallback)")
        async with TotalumUnitOfWork() as uow:
            try:
                result = await callback(TransactionalAdapter(self, uow))
            except TransactionAbortedError as exc:
                raise exc.cause from exc
            if uow.failure is not None:
                raise uow.failure
        self._log("TRANSACTION: Completed, %d write(s)", uow.writes)
        return result


class TransactionalAdapter(IAuthStorageAdapter):
    """The adapter as seen from inside :meth:`TotalumAdapter.transaction`."""

    def __init__(self, adapter: TotalumAdapter, uow: TotalumUnitOfWork) -> None:
        self._adapter = adapter
        self.uow = uow

    @property
    def id(self) -> str:
        return self._adapter.id

    async def _run(self, operation: Callable[[], Awaitable[R]], *, write: bool) -> R:
        self.uow.ensure_active()
        try:
            result = await operation()
        except Exception as exc:
            self.uow.record_failure(exc)
            raise
        if write:
            self.uow.record_write()
        return result

    async def create(
        self,
        model: str,
        data: Mapping[str, Any],
        *,
        select: Iterable[str] | None = None,
        force_allow_id: bool = False,
    ) -> Record:
        return await self._run(
            lambda: self._adapter.create(
                model, data, select=select, force_allow_id=force_allow_id
            ),
            write=True,
        )

    async def find_one(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        *,
        select: Iterable[str] | None = None,
    ) -> Record | None:
        return await self._run(
            lambda: self._adapter.find_one(model, where, select=select), write=False
        )

    async def find_many(
        self,
        model: str,
        where: Iterable[WhereInput] | None = None,
        *,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: SortBy | Mapping[str, Any] | None = None,
        select: Iterable[str] | None = None,
    ) -> list[Record]:
        return await self._run(
            lambda: self._adapter.find_many(
                model,
                where,
                limit=limit,
                offset=offset,
                sort_by=sort_by,
                select=select,
            ),
            write=False,
        )

    async def count(self, model: str, where: Iterable[WhereInput] | None = None) -> int:
        return await self._run(
            lambda: self._adapter.count(model, where), write=False
        )

    async def update(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> Record | None:
        return await self._run(
            lambda: self._adapter.update(model, where, update), write=True
        )

    async def update_many(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> int:
        return await self._run(
            lambda: self._adapter.update_many(model, where, update), write=True
        )

    async def delete(self, model: str, where: Iterable[WhereInput] | None) -> None:
        await self._run(lambda: self._adapter.delete(model, where), write=True)

    async def delete_many(self, model: str, where: Iterable[WhereInput] | None) -> int:
        return await self._run(
            lambda: self._adapter.delete_many(model, where), write=True
        )

    async def transaction(
        self, callback: Callable[[IAuthStorageAdapter], Awaitable[R]]
    ) -> R:
        """Nested transactions join the enclosing unit of work."""
        self.uow.ensure_active()
        return await callback(self)
