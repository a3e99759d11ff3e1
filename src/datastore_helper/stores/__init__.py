"""Remote key-value backends."""

from datastore_helper.stores.base import RemoteStore
from datastore_helper.stores.factory import create_store
from datastore_helper.stores.http import HTTPStore
from datastore_helper.stores.memory import InMemoryStore
from datastore_helper.stores.sqlite import SQLiteStore

__all__ = ["HTTPStore", "InMemoryStore", "RemoteStore", "SQLiteStore", "create_store"]
