"""Totalum storage adapter for an authentication library.

Translates the auth library's storage contract (camelCase records,
structured where-clauses, transactions) into calls against the Totalum
record API (snake_case tables, a small filter vocabulary, no transactions).
"""

from __future__ import annotations

from .adapter import TotalumAdapter, TransactionalAdapter, unwrap_response
from .batch import BatchFailure, BatchResult, run_batch
from .client import TotalumClient
from .config import AdapterCapabilities, TotalumAdapterConfig, TotalumSettings
from .connection import TotalumConnectionManager
from .exceptions import (
    AdapterError,
    CreationError,
    TotalumApiError,
    TotalumConnectionError,
    TotalumPersistenceError,
    TransactionAbortedError,
)
from .memory import InMemoryTotalumCrud
from .model_mapper import AuthModelMapper
from .naming import (
    RESERVED_FIELDS,
    is_reserved_field,
    record_to_contract,
    record_to_remote,
    to_contract_case,
    to_remote_case,
)
from .ports import IAuthStorageAdapter, ITotalumCrud
from .query_builder import TotalumQueryBuilder
from .schema import Account, Session, User, Verification
from .uow import TotalumUnitOfWork
from .where import Connector, SortBy, WhereClause, WhereOperator

__all__ = [
    # Adapter
    "TotalumAdapter",
    "TransactionalAdapter",
    "TotalumAdapterConfig",
    "AdapterCapabilities",
    "unwrap_response",
    # Remote API
    "TotalumClient",
    "TotalumConnectionManager",
    "TotalumSettings",
    "InMemoryTotalumCrud",
    # Ports
    "IAuthStorageAdapter",
    "ITotalumCrud",
    # Translation
    "TotalumQueryBuilder",
    "WhereClause",
    "WhereOperator",
    "Connector",
    "SortBy",
    "RESERVED_FIELDS",
    "to_remote_case",
    "to_contract_case",
    "is_reserved_field",
    "record_to_remote",
    "record_to_contract",
    "AuthModelMapper",
    "User",
    "Session",
    "Account",
    "Verification",
    # Unit of work and batches
    "TotalumUnitOfWork",
    "BatchResult",
    "BatchFailure",
    "run_batch",
    # Exceptions
    "AdapterError",
    "TotalumPersistenceError",
    "CreationError",
    "TotalumApiError",
    "TotalumConnectionError",
    "TransactionAbortedError",
]
