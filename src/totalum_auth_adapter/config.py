"""Adapter options, capabilities and remote API settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_API_KEY = "test-api-key"
DEFAULT_BASE_URL = "https://api.totalum.app/"


@dataclass(frozen=True)
class TotalumAdapterConfig:
    """Configuration for :class:`~totalum_auth_adapter.adapter.TotalumAdapter`.

    Attributes:
        debug_logs: Emit per-call DEBUG traces (model, table, result sizes).
        collection_prefix: Totalum collection prefix. Recorded for callers;
            table names are derived from model names alone.
        default_limit: Page size for ``find_many`` when no limit is given.
        scan_limit: Records fetched by ``count`` and by the batch
            operations. Larger match sets are truncated to this size.
        batch_concurrency: Maximum in-flight remote calls in
            ``update_many`` / ``delete_many``. 1 keeps them sequential.
    """

    debug_logs: bool = False
    collection_prefix: str = "data_"
    default_limit: int = 50
    scan_limit: int = 1000
    batch_concurrency: int = 1

    def __post_init__(self) -> None:
        if self.default_limit < 1:
            raise ValueError("default_limit must be >= 1")
        if self.scan_limit < 1:
            raise ValueError("scan_limit must be >= 1")
        if self.batch_concurrency < 1:
            raise ValueError("batch_concurrency must be >= 1")


@dataclass(frozen=True)
class AdapterCapabilities:
    """What the remote store can represent natively.

    The auth library uses these flags to decide what it must serialise
    itself (JSON blobs, booleans) and whether it generates ids.
    """

    adapter_id: str = "totalum"
    supports_json: bool = False
    supports_dates: bool = True
    supports_booleans: bool = False
    supports_numeric_ids: bool = False
    disable_id_generation: bool = True


@dataclass(frozen=True)
class TotalumSettings:
    """Connection settings for the Totalum API."""

    api_key: str = DEFAULT_API_KEY
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TotalumSettings:
        """Read ``TOTALUM_API_KEY`` / ``TOTALUM_API_URL`` / ``TOTALUM_TIMEOUT``."""
        env = os.environ if environ is None else environ
        timeout = env.get("TOTALUM_TIMEOUT")
        return cls(
            api_key=env.get("TOTALUM_API_KEY") or DEFAULT_API_KEY,
            base_url=env.get("TOTALUM_API_URL") or DEFAULT_BASE_URL,
            timeout=float(timeout) if timeout else 30.0,
        )
