"""Tests for SQLiteStore."""

import importlib
import sys

import pytest

from datastore_helper.exceptions import RemoteStoreError
from datastore_helper.stores import SQLiteStore


@pytest.fixture
async def store():
    s = SQLiteStore(":memory:")
    yield s
    await s.close()


async def test_get_nonexistent(store):
    assert await store.get("ns", "key") is None


async def test_put_and_get(store):
    await store.put("ns", "k", {"coins": 10, "items": ["sword"]})
    assert await store.get("ns", "k") == {"coins": 10, "items": ["sword"]}


async def test_overwrite(store):
    await store.put("ns", "k", 1)
    await store.put("ns", "k", 2)
    assert await store.get("ns", "k") == 2


async def test_int_and_str_keys_are_distinct(store):
    await store.put("ns", 42, "int")
    await store.put("ns", "42", "str")
    assert await store.get("ns", 42) == "int"
    assert await store.get("ns", "42") == "str"


async def test_namespace_isolation(store):
    await store.put("a", "k", 1)
    await store.put("b", "k", 2)
    assert await store.get("a", "k") == 1
    assert await store.get("b", "k") == 2


async def test_unserializable_value_raises(store):
    with pytest.raises(RemoteStoreError, match="not serializable"):
        await store.put("ns", "k", object())


async def test_persists_across_connections(tmp_path):
    path = str(tmp_path / "data.db")
    first = SQLiteStore(path)
    await first.put("Players", 1, "Alice")
    await first.close()

    second = SQLiteStore(path)
    assert await second.get("Players", 1) == "Alice"
    await second.close()


async def test_close_twice(store):
    await store.close()
    await store.close()


def test_missing_driver_names_install_command(monkeypatch):
    monkeypatch.setitem(sys.modules, "aiosqlite", None)
    monkeypatch.delitem(sys.modules, "datastore_helper.stores.sqlite")
    with pytest.raises(ImportError, match="pip install aiosqlite"):
        importlib.import_module("datastore_helper.stores.sqlite")
