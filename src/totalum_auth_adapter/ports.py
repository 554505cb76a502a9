"""Ports: the remote record API consumed and the storage contract exposed."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping

    from .where import SortBy, WhereInput

R = TypeVar("R")

Record = dict[str, Any]


class ITotalumCrud(ABC):
    """The slice of the Totalum record API the adapter needs.

    Every method resolves to the raw response envelope; records live under
    its ``"data"`` key.
    """

    @abstractmethod
    async def create_record(self, table: str, data: Mapping[str, Any]) -> Any:
        """Insert ``data`` into ``table``; the envelope holds the new record."""
        ...

    @abstractmethod
    async def get_records(self, table: str, query: Mapping[str, Any]) -> Any:
        """Query ``table``; the envelope holds a list of records.

        ``query`` is ``{"filter": [...]?, "pagination": {"limit", "page"},
        "sort": {field: 1 | -1}?}``.
        """
        ...

    @abstractmethod
    async def edit_record_by_id(
        self, table: str, record_id: str, data: Mapping[str, Any]
    ) -> Any:
        """Patch one record; the envelope holds the updated record."""
        ...

    @abstractmethod
    async def delete_record_by_id(self, table: str, record_id: str) -> Any:
        ...


class IAuthStorageAdapter(ABC):
    """Storage contract required by the authentication library.

    Records and field names are in contract casing (``emailVerified``,
    ``id``). ``where`` accepts :class:`~totalum_auth_adapter.where.WhereClause`
    instances or the equivalent plain dicts.
    """

    @abstractmethod
    async def create(
        self,
        model: str,
        data: Mapping[str, Any],
        *,
        select: Iterable[str] | None = None,
        force_allow_id: bool = False,
    ) -> Record: ...

    @abstractmethod
    async def find_one(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        *,
        select: Iterable[str] | None = None,
    ) -> Record | None: ...

    @abstractmethod
    async def find_many(
        self,
        model: str,
        where: Iterable[WhereInput] | None = None,
        *,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: SortBy | Mapping[str, Any] | None = None,
        select: Iterable[str] | None = None,
    ) -> list[Record]: ...

    @abstractmethod
    async def count(
        self, model: str, where: Iterable[WhereInput] | None = None
    ) -> int: ...

    @abstractmethod
    async def update(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> Record | None: ...

    @abstractmethod
    async def update_many(
        self,
        model: str,
        where: Iterable[WhereInput] | None,
        update: Mapping[str, Any],
    ) -> int: ...

    @abstractmethod
    async def delete(
        self, model: str, where: Iterable[WhereInput] | None
    ) -> None: ...

    @abstractmethod
    async def delete_many(
        self, model: str, where: Iterable[WhereInput] | None
    ) -> int: ...

    @abstractmethod
    async def transaction(
        self, callback: Callable[[IAuthStorageAdapter], Awaitable[R]]
    ) -> R: ...
