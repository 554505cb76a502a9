"""Exceptions for the Totalum storage adapter."""

from __future__ import annotations

from typing import Any


class AdapterError(Exception):
    """Root exception for the totalum-auth-adapter package."""


class InfrastructureError(AdapterError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""


class TotalumPersistenceError(PersistenceError):
    """Base for Totalum persistence errors."""


class CreationError(TotalumPersistenceError):
    """Raised when the remote store returns no record for a create call."""

    def __init__(self, model: str) -> None:
        self.model = model
        super().__init__(f"Failed to create {model}")


class TotalumConnectionError(TotalumPersistenceError):
    """Raised when the Totalum API cannot be reached."""


class TotalumApiError(TotalumPersistenceError):
    """Raised when the Totalum API answers with a non-success status."""

    def __init__(self, status_code: int, body: Any = None, *, url: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        msg = f"Totalum API error {status_code}"
        if url:
            msg += f" for {url}"
        if body:
            msg += f": {body}"
        super().__init__(msg)


class TransactionAbortedError(TotalumPersistenceError):
    """Raised for operations issued after a failure inside a transaction.

    The remote store cannot roll back, so once one operation fails the
    unit of work refuses further calls instead of piling writes on top of
    a half-applied sequence.
    """

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            f"Transaction aborted by an earlier failure: {cause!r}"
        )
