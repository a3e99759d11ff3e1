"""Shared test fixtures."""

import asyncio
import random
from typing import Any

import pytest

from datastore_helper import DataStoreHelper, StaticEnvironment
from datastore_helper.stores import InMemoryStore, RemoteStore


class FakeClock:
    """Records every requested sleep and returns after one loop iteration."""

    def __init__(self) -> None:
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await asyncio.sleep(0)


class FlakyStore(RemoteStore):
    """In-memory remote that fails a scripted number of calls first.

    ``fail_puts`` / ``fail_gets`` count down on every call; a negative
    value means "fail forever".
    """

    def __init__(self, fail_puts: int = 0, fail_gets: int = 0) -> None:
        self.backend = InMemoryStore()
        self.fail_puts = fail_puts
        self.fail_gets = fail_gets
        self.put_calls: list[tuple[str, Any, Any]] = []
        self.get_calls: list[tuple[str, Any]] = []

    async def get(self, namespace, key):
        self.get_calls.append((namespace, key))
        if self.fail_gets:
            self.fail_gets -= 1 if self.fail_gets > 0 else 0
            raise ConnectionError("get rate limited")
        return await self.backend.get(namespace, key)

    async def put(self, namespace, key, value):
        self.put_calls.append((namespace, key, value))
        if self.fail_puts:
            self.fail_puts -= 1 if self.fail_puts > 0 else 0
            raise ConnectionError("put rate limited")
        await self.backend.put(namespace, key, value)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def remote():
    return FlakyStore()


@pytest.fixture
def helper(remote, clock):
    return DataStoreHelper(
        "Players",
        store=remote,
        environment=StaticEnvironment(False),
        clock=clock,
        rng=random.Random(0),
    )
