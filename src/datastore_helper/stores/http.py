"""HTTPStore — remote key-value service reached over a small REST API."""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import quote

try:
    import httpx
except ImportError as exc:
    raise ImportError(
        "HTTPStore requires the 'httpx' package. Install it with: pip install httpx"
    ) from exc

from datastore_helper.exceptions import RemoteStoreError
from datastore_helper.result import Key
from datastore_helper.stores.base import RemoteStore

URL_ENV_VAR = "DATASTORE_HELPER_URL"
TOKEN_ENV_VAR = "DATASTORE_HELPER_TOKEN"

_OK_PUT_STATUSES = frozenset({200, 201, 204})


class HTTPStore(RemoteStore):
    """Store backed by a remote HTTP service.

    Endpoints, relative to ``base_url``:

    * ``GET  /v1/namespaces/{namespace}/keys/{key}`` — 200 with
      ``{"value": ...}``, or 404 when the key does not exist.
    * ``PUT  /v1/namespaces/{namespace}/keys/{key}`` with body
      ``{"value": ...}`` — 200, 201 or 204 on success.

    Any other status, a timeout or a connection failure raises
    :class:`RemoteStoreError`, leaving retry decisions to the caller.

    Parameters:
        base_url:  Service base URL.  Falls back to ``DATASTORE_HELPER_URL``.
        api_token: Bearer token.  Falls back to ``DATASTORE_HELPER_TOKEN``.
        timeout:   Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        resolved_url = base_url or os.getenv(URL_ENV_VAR, "")
        self._base_url = resolved_url.rstrip("/") if resolved_url else ""
        self._api_token = api_token or os.getenv(TOKEN_ENV_VAR, "")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, namespace: str, key: Key) -> str:
        if not self._base_url:
            raise RemoteStoreError(
                "configure", f"base URL not configured (set base_url or {URL_ENV_VAR} env var)"
            )
        return (
            f"{self._base_url}/v1/namespaces/{quote(namespace, safe='')}"
            f"/keys/{quote(str(key), safe='')}"
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def get(self, namespace: str, key: Key) -> Any:
        url = self._url(namespace, key)
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, headers=self._headers(), timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise RemoteStoreError("get", f"timed out after {self._timeout} seconds") from e
        except httpx.HTTPError as e:
            raise RemoteStoreError("get", f"could not reach remote store: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise RemoteStoreError("get", f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteStoreError("get", "response body is not valid JSON") from e
        if not isinstance(body, dict) or "value" not in body:
            raise RemoteStoreError("get", "response body has no 'value' field")
        return body["value"]

    async def put(self, namespace: str, key: Key, value: Any) -> None:
        url = self._url(namespace, key)
        try:
            async with httpx.AsyncClient() as client:
                response = await client.put(
                    url,
                    json={"value": value},
                    headers=self._headers(),
                    timeout=self._timeout,
                )
        except httpx.TimeoutException as e:
            raise RemoteStoreError("put", f"timed out after {self._timeout} seconds") from e
        except httpx.HTTPError as e:
            raise RemoteStoreError("put", f"could not reach remote store: {e}") from e

        if response.status_code not in _OK_PUT_STATUSES:
            raise RemoteStoreError("put", f"HTTP {response.status_code}")
