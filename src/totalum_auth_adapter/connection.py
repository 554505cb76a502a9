"""TotalumConnectionManager: lazily created, injectable client handle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .client import TotalumClient
from .config import TotalumSettings
from .exceptions import TotalumConnectionError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .ports import ITotalumCrud

logger = logging.getLogger(__name__)


class TotalumConnectionManager:
    """Own the Totalum client for the application's composition root.

    The client is created on the first ``connect()`` and reused afterwards.
    Tests pass ``client_factory`` (or a ready client) to substitute a fake.
    """

    def __init__(
        self,
        settings: TotalumSettings | None = None,
        *,
        client_factory: Callable[[TotalumSettings], ITotalumCrud] | None = None,
        health_check_table: str = "user",
    ) -> None:
        self._settings = settings or TotalumSettings()
        self._client_factory = client_factory or TotalumClient.from_settings
        self._health_check_table = health_check_table
        self._client: ITotalumCrud | None = None
        self._owns_client = True

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **kwargs: Any
    ) -> TotalumConnectionManager:
        return cls(TotalumSettings.from_env(environ), **kwargs)

    @classmethod
    def for_client(cls, client: ITotalumCrud) -> TotalumConnectionManager:
        """Wrap an already-built client (it is used as-is, never closed)."""
        manager = cls(client_factory=lambda _settings: client)
        manager._client = client
        manager._owns_client = False
        return manager

    @property
    def settings(self) -> TotalumSettings:
        return self._settings

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> ITotalumCrud:
        """Create and cache the client. Idempotent."""
        if self._client is not None:
            return self._client
        try:
            self._client = self._client_factory(self._settings)
        except Exception as e:
            raise TotalumConnectionError(str(e)) from e
        logger.debug("Totalum client created for %s", self._settings.base_url)
        return self._client

    @property
    def client(self) -> ITotalumCrud:
        """Return the client; raises if not connected."""
        if self._client is None:
            raise TotalumConnectionError("Not connected; call connect() first")
        return self._client

    async def close(self) -> None:
        client, self._client = self._client, None
        if not self._owns_client:
            return
        aclose = getattr(client, "aclose", None)
        if aclose is not None:
            await aclose()

    async def health_check(self) -> bool:
        """Read one record; return True if the API answered."""
        if self._client is None:
            return False
        try:
            await self._client.get_records(
                self._health_check_table, {"pagination": {"limit": 1, "page": 0}}
            )
            return True
        except Exception:  # noqa: BLE001
            logger.debug("Totalum health check failed", exc_info=True)
            return False
