"""InMemoryStore — zero-config, dict-backed remote stand-in for development and testing."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from datastore_helper.result import Key
from datastore_helper.stores.base import RemoteStore


class InMemoryStore(RemoteStore):
    """In-memory store using nested dicts.  Data is lost on process exit."""

    def __init__(self) -> None:
        self._data: dict[str, dict[Key, Any]] = defaultdict(dict)

    async def get(self, namespace: str, key: Key) -> Any:
        return self._data[namespace].get(key)

    async def put(self, namespace: str, key: Key, value: Any) -> None:
        self._data[namespace][key] = value
