"""Tests for DataStoreHelper — full handle integration."""

import asyncio
import logging
import random

from datastore_helper import (
    DEFAULT_SETTINGS,
    DataStoreHelper,
    HelperConfig,
    StaticEnvironment,
    StoreConfigSchema,
)
from datastore_helper.stores import InMemoryStore, SQLiteStore


class ManualClock:
    def __init__(self):
        self._waiters = []

    async def sleep(self, seconds):
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        await waiter

    async def tick(self):
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)
        await settle()


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


# ── the Players scenario ─────────────────────────────────────


async def test_players_scenario(helper, remote, clock):
    helper.set(42, "Alice")
    assert await helper.get(42) == "Alice"
    assert remote.get_calls == []

    remote.fail_puts = 2
    report = await helper.save(42)
    assert report.saved == (42,)
    assert len(remote.put_calls) == 3
    assert 42 not in helper.cache
    assert len(clock.sleeps) == 2

    remote.put_calls.clear()
    report = await helper.save()
    assert report.ok
    assert remote.put_calls == []


async def test_get_after_save_hits_remote(helper, remote):
    helper.set("k", "v")
    await helper.save("k")
    assert await helper.get("k") == "v"
    assert remote.get_calls == [("Players", "k")]


async def test_namespace_is_store_name(helper, remote):
    helper.set(1, "x")
    await helper.save()
    assert remote.put_calls[0][0] == "Players"


async def test_handles_are_isolated():
    store = InMemoryStore()
    env = StaticEnvironment(False)
    players = DataStoreHelper("Players", store, environment=env)
    guilds = DataStoreHelper("Guilds", store, environment=env)
    players.set(1, "Alice")
    guilds.set(1, "Red Team")
    await players.save()
    await guilds.save()
    assert await players.get(1) == "Alice"
    assert await guilds.get(1) == "Red Team"


async def test_partial_settings_dict_keeps_gate_working(caplog):
    remote = InMemoryStore()
    with caplog.at_level(logging.WARNING):
        helper = DataStoreHelper(
            "Players",
            remote,
            settings={"AutoSaveEnabled": False, "Bogus": 1},
            environment=StaticEnvironment(True),
        )
    assert set(helper.get_settings()) == set(DEFAULT_SETTINGS)
    assert "Bogus is not a valid setting!" in caplog.text

    helper.set(1, "v")
    report = await helper.save()
    assert report.gated
    assert await remote.get("Players", 1) is None



# ── settings surface ─────────────────────────────────────────


async def test_set_setting_and_get_settings(helper):
    helper.set_setting("AutoSaveInterval", 60)
    assert helper.get_settings()["AutoSaveInterval"] == 60


async def test_invalid_setting_is_logged_noop(helper, caplog):
    before = helper.get_settings()
    with caplog.at_level(logging.WARNING):
        helper.set_setting("Nope", True)
    assert helper.get_settings() == before
    assert "[Players] Nope is not a valid setting!" in caplog.text


async def test_bind_setting(helper):
    seen = []
    helper.bind_setting("VerboseLogging", seen.append)
    helper.set_setting("VerboseLogging", False)
    await settle()
    assert seen == [False]


async def test_bind_invalid_setting_never_fires(helper):
    seen = []
    helper.bind_setting("Nope", seen.append)
    helper.set_setting("Nope", 1)
    await settle()
    assert seen == []


async def test_debug_logging_reports_setting_changes(helper, caplog):
    helper.set_setting("DebugLogging", True)
    with caplog.at_level(logging.DEBUG, logger="datastore_helper.Players"):
        helper.set_setting("StudioEnabled", True)
        helper.set_setting("AutoSaveInterval", 30)
    assert "Successfully set 'StudioEnabled' to enabled" in caplog.text
    assert "Successfully set 'AutoSaveInterval' to 30" in caplog.text


# ── autosave ─────────────────────────────────────────────────


async def test_autosave_flushes_cache():
    clock = ManualClock()
    remote = InMemoryStore()
    helper = DataStoreHelper(
        "Players", remote, environment=StaticEnvironment(False), clock=clock
    )
    helper.set(1, "Alice")
    helper.set_setting("AutoSaveEnabled", True)
    await settle()
    assert helper.scheduler.armed

    await clock.tick()
    assert 1 not in helper.cache
    assert await remote.get("Players", 1) == "Alice"
    await helper.close()


async def test_autosave_respects_gating():
    clock = ManualClock()
    remote = InMemoryStore()
    helper = DataStoreHelper(
        "Players", remote, environment=StaticEnvironment(True), clock=clock
    )
    helper.set(1, "Alice")
    helper.set_setting("AutoSaveEnabled", True)
    await settle()
    await clock.tick()
    assert 1 in helper.cache
    assert await remote.get("Players", 1) is None
    await helper.close(flush=False)


# ── lifecycle ────────────────────────────────────────────────


async def test_close_flushes_and_stops(remote):
    helper = DataStoreHelper(
        "Players", remote, environment=StaticEnvironment(False), clock=ManualClock()
    )
    helper.set_setting("AutoSaveEnabled", True)
    await settle()
    helper.set(1, "a")
    report = await helper.close()
    assert report.saved == (1,)
    assert not helper.scheduler.armed
    assert await remote.backend.get("Players", 1) == "a"


async def test_close_without_flush(helper, remote):
    helper.set(1, "a")
    assert await helper.close(flush=False) is None
    assert remote.put_calls == []
    assert 1 in helper.cache


async def test_async_context_manager(remote, clock):
    async with DataStoreHelper(
        "Players", remote, environment=StaticEnvironment(False), clock=clock
    ) as helper:
        helper.set("k", "v")
    assert await remote.backend.get("Players", "k") == "v"


async def test_max_tries_is_configurable(remote, clock):
    helper = DataStoreHelper(
        "Players",
        remote,
        max_tries=2,
        environment=StaticEnvironment(False),
        clock=clock,
        rng=random.Random(0),
    )
    remote.fail_puts = -1
    helper.set(1, "a")
    report = await helper.save()
    assert 1 in report.failed
    assert len(remote.put_calls) == 2


# ── configuration ────────────────────────────────────────────


async def test_from_config_memory():
    config = HelperConfig(name="Players", settings={"AutoSaveInterval": 30})
    helper = DataStoreHelper.from_config(config, environment=StaticEnvironment(False))
    assert isinstance(helper.store, InMemoryStore)
    assert helper.get_settings()["AutoSaveInterval"] == 30
    assert helper.retrier.max_tries == 5


async def test_from_config_sqlite_owns_store(tmp_path):
    config = HelperConfig(
        name="Players",
        store=StoreConfigSchema(type="sqlite", path=str(tmp_path / "players.db")),
    )
    helper = DataStoreHelper.from_config(config, environment=StaticEnvironment(False))
    assert isinstance(helper.store, SQLiteStore)
    helper.set(42, {"name": "Alice"})
    await helper.close()

    reopened = SQLiteStore(str(tmp_path / "players.db"))
    assert await reopened.get("Players", 42) == {"name": "Alice"}
    await reopened.close()


async def test_from_config_injected_store_is_not_closed(remote):
    closed = []

    async def close():
        closed.append(True)

    remote.close = close
    helper = DataStoreHelper.from_config(
        HelperConfig(name="Players"), store=remote, environment=StaticEnvironment(False)
    )
    await helper.close()
    assert closed == []
    assert helper.store is remote
