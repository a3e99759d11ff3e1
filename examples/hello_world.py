"""
datastore_helper — Hello World

Reads and writes go through an in-memory cache.  Writes reach the remote
store on save() or on the autosave timer, with retries on failure.
"""

import asyncio
import logging

from datastore_helper import DataStoreHelper, StaticEnvironment
from datastore_helper.stores import InMemoryStore, RemoteStore


# ─── A remote that rate-limits every other write ───


class RateLimitedStore(RemoteStore):
    def __init__(self) -> None:
        self._backend = InMemoryStore()
        self._calls = 0

    async def get(self, namespace, key):
        return await self._backend.get(namespace, key)

    async def put(self, namespace, key, value):
        self._calls += 1
        if self._calls % 2:
            raise ConnectionError("429 Too Many Requests")
        await self._backend.put(namespace, key, value)


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    # ──────────────────────────────────────
    #  1. Create one helper per namespace
    # ──────────────────────────────────────
    players = DataStoreHelper(
        "Players",
        RateLimitedStore(),
        environment=StaticEnvironment(False),
    )

    # ──────────────────────────────────────
    #  2. Stage writes in memory
    # ──────────────────────────────────────
    players.set(42, {"name": "Alice", "coins": 10})
    players.set(7, {"name": "Bob", "coins": 3})
    print("cached:", await players.get(42))

    # ──────────────────────────────────────
    #  3. Flush one key, retried with backoff
    # ──────────────────────────────────────
    report = await players.save(42)
    print("saved:", report.saved, "failed:", list(report.failed))

    # ──────────────────────────────────────
    #  4. Turn on autosave every 5 seconds
    # ──────────────────────────────────────
    players.set_setting("AutoSaveInterval", 5)
    players.set_setting("AutoSaveEnabled", True)
    await asyncio.sleep(0)
    print("autosave armed:", players.scheduler.armed)

    # ──────────────────────────────────────
    #  5. Flush what is left on shutdown
    # ──────────────────────────────────────
    report = await players.close()
    print("final flush:", report.saved)


if __name__ == "__main__":
    asyncio.run(main())
