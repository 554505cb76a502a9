"""
Unit of Work for the Totalum adapter.

Totalum has no transactions. ``TotalumUnitOfWork`` therefore gives
*ordering* and *fail-fast* only: operations run one after another in the
order they are issued, every write is applied immediately, and after the
first failure no further operation is allowed. Nothing is ever rolled
back; writes made before a failure stay in the remote store.
"""

from __future__ import annotations

import logging
from collections import deque
from types import TracebackType
from typing import TYPE_CHECKING, Any

from .exceptions import TransactionAbortedError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("totalum_auth_adapter.uow")


class TotalumUnitOfWork:
    """Sequential best-effort unit of work (no atomicity, no isolation).

    Used as an async context manager: a clean exit commits, an exception
    rolls back. ``commit()`` only runs the on-commit hooks, since every
    write has already reached Totalum. ``rollback()`` cannot undo anything;
    it drops the hooks and logs how many writes were left in place.
    """

    def __init__(self) -> None:
        self.writes: int = 0
        self.committed: bool = False
        self.rolled_back: bool = False
        self._failure: BaseException | None = None
        self._on_commit: deque[Callable[[], Awaitable[Any]]] = deque()

    @property
    def failure(self) -> BaseException | None:
        """The first error raised by an operation in this unit, if any."""
        return self._failure

    @property
    def is_active(self) -> bool:
        return not (self.committed or self.rolled_back or self._failure)

    def ensure_active(self) -> None:
        """Raise if an earlier operation failed or the unit is finished."""
        if self._failure is not None:
            raise TransactionAbortedError(self._failure)
        if self.committed or self.rolled_back:
            raise RuntimeError("Unit of work already completed")

    def record_write(self) -> None:
        self.writes += 1

    def record_failure(self, exc: BaseException) -> None:
        if self._failure is None:
            self._failure = exc

    def on_commit(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Run ``callback`` once the unit finishes without a failure."""
        self._on_commit.append(callback)

    async def commit(self) -> None:
        if self.committed or self.rolled_back:
            return
        if self._failure is not None:
            await self.rollback()
            return
        self.committed = True
        logger.debug("Totalum unit of work done, %d write(s) applied", self.writes)
        while self._on_commit:
            callback = self._on_commit.popleft()
            try:
                await callback()
            except Exception as exc:
                logger.error("Error in on_commit hook: %s", exc, exc_info=True)

    async def rollback(self) -> None:
        if self.committed or self.rolled_back:
            return
        self.rolled_back = True
        self._on_commit.clear()
        if self.writes:
            logger.warning(
                "Totalum cannot roll back; %d write(s) remain applied",
                self.writes,
            )

    async def __aenter__(self) -> TotalumUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()
