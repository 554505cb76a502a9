"""Totalum record API client over httpx."""

from __future__ import annotations

import json
import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from .exceptions import TotalumApiError, TotalumConnectionError
from .naming import json_default
from .ports import ITotalumCrud

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .config import TotalumSettings

logger = logging.getLogger(__name__)

_CRUD_PATH = "api/v1/crud"
_JSON_HEADERS = {"Content-Type": "application/json"}


class TotalumClient(ITotalumCrud):
    """
    Async HTTP implementation of :class:`ITotalumCrud`.

    Responses are returned as decoded JSON envelopes; the adapter unwraps
    ``"data"``. Non-2xx answers raise :class:`TotalumApiError`, transport
    failures raise :class:`TotalumConnectionError`. Nothing is retried.

    Example:
        ```python
        async with TotalumClient(api_key="...") as client:
            envelope = await client.get_records(
                "user", {"pagination": {"limit": 1, "page": 0}}
            )
        ```
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.totalum.app/",
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self._base_url,
            headers={"api-key": api_key},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: TotalumSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TotalumClient:
        return cls(
            settings.api_key,
            settings.base_url,
            timeout=settings.timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _table_path(table: str, record_id: str | None = None) -> str:
        path = f"{_CRUD_PATH}/{quote(table, safe='')}"
        if record_id is not None:
            path += f"/{quote(str(record_id), safe='')}"
        return path

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise TotalumConnectionError(
                f"{method} {path} failed: {e}"
            ) from e
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.debug(
                "Totalum %s %s -> %s", method, path, e.response.status_code
            )
            raise TotalumApiError(
                e.response.status_code, _response_body(e.response), url=path
            ) from e
        if not response.content:
            return None
        return response.json()

    async def create_record(self, table: str, data: Mapping[str, Any]) -> Any:
        return await self._request(
            "POST",
            self._table_path(table),
            content=_encode_body(data),
            headers=_JSON_HEADERS,
        )

    async def get_records(self, table: str, query: Mapping[str, Any]) -> Any:
        return await self._request(
            "GET",
            self._table_path(table),
            params={
                "query": json.dumps(
                    query, separators=(",", ":"), default=json_default
                )
            },
        )

    async def edit_record_by_id(
        self, table: str, record_id: str, data: Mapping[str, Any]
    ) -> Any:
        return await self._request(
            "PATCH",
            self._table_path(table, record_id),
            content=_encode_body(data),
            headers=_JSON_HEADERS,
        )

    async def delete_record_by_id(self, table: str, record_id: str) -> Any:
        return await self._request("DELETE", self._table_path(table, record_id))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> TotalumClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _encode_body(data: Mapping[str, Any]) -> bytes:
    return json.dumps(dict(data), default=json_default).encode()


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
