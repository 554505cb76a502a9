"""Per-record batch execution with bounded concurrency and failure accounting."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchFailure:
    """One record a batch operation could not process."""

    record_id: Any
    error: BaseException

    @property
    def reason(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


@dataclass
class BatchResult:
    """Outcome of ``update_many`` / ``delete_many``.

    Nothing is rolled back: ``succeeded`` records stay changed even when
    ``failures`` is not empty.
    """

    succeeded: int = 0
    failures: list[BatchFailure] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return self.succeeded + len(self.failures)

    @property
    def failed_ids(self) -> list[Any]:
        return [f.record_id for f in self.failures]

    @property
    def ok(self) -> bool:
        return not self.failures


async def run_batch(
    record_ids: Sequence[Any],
    action: Callable[[Any], Awaitable[Any]],
    *,
    concurrency: int = 1,
    label: str = "batch",
) -> BatchResult:
    """Apply ``action`` to every id, at most ``concurrency`` at a time.

    With ``concurrency=1`` the ids are processed strictly in order. An
    exception from one id is recorded and logged; the remaining ids still
    run.
    """
    result = BatchResult()
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _run_one(record_id: Any) -> None:
        async with semaphore:
            try:
                await action(record_id)
            except Exception as exc:
                logger.warning(
                    "%s failed for record %s: %s",
                    label,
                    record_id,
                    exc,
                    exc_info=True,
                )
                result.failures.append(BatchFailure(record_id, exc))
            else:
                result.succeeded += 1

    if concurrency <= 1:
        for record_id in record_ids:
            await _run_one(record_id)
    else:
        await asyncio.gather(*(_run_one(record_id) for record_id in record_ids))
    return result
