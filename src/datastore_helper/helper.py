"""DataStoreHelper — the per-namespace handle tying cache, settings and autosave together."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

from datastore_helper.cache import KeyValueCache
from datastore_helper.diagnostics import Diagnostics
from datastore_helper.environment import EnvVarEnvironment
from datastore_helper.retry import MAX_TRIES, Retrier
from datastore_helper.scheduler import AutoSaveScheduler
from datastore_helper.settings import Settings, SettingsSchema
from datastore_helper.stores.factory import create_store
from datastore_helper.stores.memory import InMemoryStore

if TYPE_CHECKING:
    from types import TracebackType

    from datastore_helper._internal.clock import Clock
    from datastore_helper.config import HelperConfig
    from datastore_helper.environment import Environment
    from datastore_helper.result import Key, SaveReport
    from datastore_helper.settings import SettingCallback
    from datastore_helper.stores.base import RemoteStore


class DataStoreHelper:
    """Caches reads and writes for one remote namespace and flushes them with retries.

    One helper per logical namespace; there is no process-wide registry.
    Writes are staged in memory by :meth:`set` and reach the remote store
    on :meth:`save`, either called directly or by the autosave task.
    Nothing here raises on remote failure: exhausted retries are logged
    and surface as ``None`` / a :class:`SaveReport` listing the failures.

    The helper does not install any shutdown hook.  Whoever owns the
    process should ``await helper.close()`` (or ``save()``) before exit
    so that dirty entries are flushed.

    Parameters:
        name:        Store name.  Used as the remote namespace and log prefix.
        store:       Remote backend.  Defaults to :class:`InMemoryStore`.
        max_tries:   Attempt budget for every remote call.
        settings:    Initial settings.  Defaults to :class:`SettingsSchema`.
        environment: Non-production signal.  Defaults to
                     :class:`EnvVarEnvironment`.
        clock:       Injectable clock shared by backoff and autosave.
        rng:         Injectable random source for backoff jitter.
    """

    def __init__(
        self,
        name: str,
        store: RemoteStore | None = None,
        *,
        max_tries: int = MAX_TRIES,
        settings: SettingsSchema | dict[str, Any] | None = None,
        environment: Environment | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.name = name
        self._store: RemoteStore = store or InMemoryStore()
        self._owns_store = False

        self.settings = Settings(settings)
        self.diagnostics = Diagnostics(name, self.settings.get)
        self.settings.diagnostics = self.diagnostics

        self.retrier = Retrier(max_tries=max_tries, clock=clock, rng=rng)
        self.cache = KeyValueCache(
            name,
            self._store,
            self.settings,
            self.retrier,
            environment or EnvVarEnvironment(),
            self.diagnostics,
        )
        self.scheduler = AutoSaveScheduler(
            self.settings,
            self.cache.save,
            clock=clock,
            diagnostics=self.diagnostics,
        )

    @classmethod
    def from_config(
        cls,
        config: HelperConfig,
        *,
        store: RemoteStore | None = None,
        environment: Environment | None = None,
    ) -> DataStoreHelper:
        """Build a helper from validated configuration.

        Settings are applied at construction, so a config with
        ``AutoSaveEnabled`` true still starts Idle; call
        ``set_setting("AutoSaveEnabled", True)`` inside the event loop to
        arm it.
        """
        helper = cls(
            config.name,
            store or create_store(config.store),
            max_tries=config.max_tries,
            settings=config.settings,
            environment=environment,
        )
        helper._owns_store = store is None
        return helper

    @property
    def store(self) -> RemoteStore:
        return self._store

    # ── settings ─────────────────────────────────────────────

    def set_setting(self, name: str, value: Any) -> None:
        """Change a setting.  Unknown names are logged and ignored."""
        self.settings.set(name, value)

    def get_settings(self) -> dict[str, Any]:
        """Return a copy of the current settings."""
        return self.settings.get()

    def bind_setting(self, name: str, callback: SettingCallback) -> None:
        """Call *callback* with the new value whenever *name* is set."""
        self.settings.subscribe(name, callback)

    # ── data ─────────────────────────────────────────────────

    def set(self, key: Key, value: Any) -> None:
        self.cache.set(key, value)

    async def get(self, key: Key) -> Any:
        return await self.cache.get(key)

    async def load(self, key: Key) -> Any:
        return await self.cache.load(key)

    async def save(self, key: Key | None = None) -> SaveReport:
        return await self.cache.save(key)

    # ── lifecycle ────────────────────────────────────────────

    async def close(self, flush: bool = True) -> SaveReport | None:
        """Stop autosave, wait for in-flight autosaves, then optionally flush.

        Closes the remote store only if this helper created it.
        """
        await self.scheduler.close()
        report = await self.save() if flush else None
        if self._owns_store:
            await self._store.close()
        return report

    async def __aenter__(self) -> DataStoreHelper:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
