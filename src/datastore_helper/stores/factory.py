"""Build a remote store from its configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from datastore_helper.exceptions import ConfigError
from datastore_helper.stores.http import HTTPStore
from datastore_helper.stores.memory import InMemoryStore
from datastore_helper.stores.sqlite import SQLiteStore

if TYPE_CHECKING:
    from datastore_helper.config import StoreConfigSchema
    from datastore_helper.stores.base import RemoteStore


def create_store(config: StoreConfigSchema) -> RemoteStore:
    """Create the backend named by ``config.type``.

    Raises:
        ConfigError: If a required field for the chosen backend is missing.
    """
    if config.type == "sqlite":
        if not config.path:
            raise ConfigError("SQLite store requires 'path' configuration")
        return SQLiteStore(config.path)

    if config.type == "http":
        store = HTTPStore(
            base_url=config.url or None,
            api_token=config.api_token or None,
            timeout=config.timeout,
        )
        if not store.base_url:
            raise ConfigError("HTTP store requires 'url' configuration (or DATASTORE_HELPER_URL)")
        return store

    return InMemoryStore()
