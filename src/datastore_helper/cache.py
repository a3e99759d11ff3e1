"""KeyValueCache — in-memory staging area with deferred, retried persistence."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

from datastore_helper.result import CallResult, Key, SaveReport

if TYPE_CHECKING:
    from datastore_helper.diagnostics import Diagnostics
    from datastore_helper.environment import Environment
    from datastore_helper.retry import Retrier
    from datastore_helper.settings import Settings
    from datastore_helper.stores.base import RemoteStore

STUDIO_SETTING = "StudioEnabled"

_MISSING = object()


class KeyValueCache:
    """Write-back cache for one remote namespace.

    Presence of a key means its value is either dirty (set but not yet
    persisted) or the last value loaded from the remote store.  Absence
    means the next ``get`` must fetch it.  A key leaves the cache only
    when a remote ``put`` for it succeeds.

    Every ``set`` and ``load`` stamps the key with a new version.  A save
    remembers the version it persisted and only evicts the key if the
    version is unchanged when the put returns, so a ``set`` that lands
    while a save for the same key is in flight stays dirty for the next
    flush instead of being dropped.

    All methods must be called from the event loop that owns the cache.
    Mutations of the backing dict happen between suspension points, which
    serializes them without a lock.

    Parameters:
        namespace:   Remote namespace (the store name).
        store:       Remote backend.
        settings:    Live settings, consulted for ``StudioEnabled``.
        retrier:     Retrier wrapping every remote call.
        environment: Non-production signal used to gate writes.
        diagnostics: Gated logger.
    """

    def __init__(
        self,
        namespace: str,
        store: RemoteStore,
        settings: Settings,
        retrier: Retrier,
        environment: Environment,
        diagnostics: Diagnostics,
    ) -> None:
        self.namespace = namespace
        self._store = store
        self._settings = settings
        self._retrier = retrier
        self._environment = environment
        self._diagnostics = diagnostics
        self._entries: dict[Key, Any] = {}
        self._versions: dict[Key, int] = {}
        self._stamps = itertools.count(1)

    # ── introspection ────────────────────────────────────────

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, key: Key, default: Any = None) -> Any:
        """Return the cached value without ever touching the remote store."""
        return self._entries.get(key, default)

    def dirty_keys(self) -> list[Key]:
        """Keys currently held in memory."""
        return list(self._entries)

    # ── reads / writes ───────────────────────────────────────

    def set(self, key: Key, value: Any) -> None:
        """Stage *value* under *key*.  Never touches the remote store."""
        self._stage(key, value)
        self._diagnostics.debug("Successfully set the value of key: %s", key)

    async def get(self, key: Key) -> Any:
        """Return the cached value, loading it from the remote store on a miss."""
        value = self._entries.get(key, _MISSING)
        if value is not _MISSING:
            return value
        return await self.load(key)

    async def load(self, key: Key) -> Any:
        """Fetch *key* from the remote store, replacing any cached value.

        Returns ``None`` when the key does not exist remotely (the cache
        entry is dropped) or when every attempt failed (the cache is left
        untouched).
        """
        result = await self._retrier.call(
            lambda: self._store.get(self.namespace, key),
            description=f"load {key!r}",
        )
        if not result.ok:
            self._diagnostics.warning(
                "Failed to fetch key %s from the remote store after %d tries. Error: %s",
                key,
                result.attempts,
                result.error,
            )
            return None

        if result.value is None:
            self._entries.pop(key, None)
            self._versions.pop(key, None)
            return None

        self._stage(key, result.value)
        return result.value

    async def save(self, key: Key | None = None) -> SaveReport:
        """Persist one key, or every cached key when *key* is ``None``.

        Each key is saved independently: successes are evicted, failures
        stay cached for a later attempt.  Saving a key that is not cached
        does nothing.  In a non-production environment with
        ``StudioEnabled`` off, nothing is written and nothing is evicted.
        """
        if self._environment.is_non_production() and not self._settings[STUDIO_SETTING]:
            self._diagnostics.warning(
                "Saving is disabled in non-production environments! "
                "You can re-enable this through the %s setting.",
                STUDIO_SETTING,
            )
            return SaveReport.gated_report()

        if key is not None:
            keys = [key] if key in self._entries else []
        else:
            keys = list(self._entries)

        saved: list[Key] = []
        failed: dict[Key, BaseException | None] = {}
        for target in keys:
            # A concurrent save may already have flushed it.
            if target not in self._entries:
                continue
            result = await self._save_one(target)
            if not result.ok:
                failed[target] = result.error
            elif target not in self._entries:
                saved.append(target)

        return SaveReport(saved=tuple(saved), failed=failed)

    # ── internals ────────────────────────────────────────────

    def _stage(self, key: Key, value: Any) -> None:
        self._entries[key] = value
        self._versions[key] = next(self._stamps)

    async def _save_one(self, key: Key) -> CallResult:
        value = self._entries[key]
        version = self._versions[key]

        result = await self._retrier.call(
            lambda: self._store.put(self.namespace, key, value),
            description=f"save {key!r}",
        )

        if not result.ok:
            self._diagnostics.warning(
                "Failed to save key (%s) after %d tries. Error: %s",
                key,
                result.attempts,
                result.error,
            )
            return result

        if self._versions.get(key) == version:
            del self._entries[key]
            del self._versions[key]
            self._diagnostics.info("Successfully saved key: %s", key)
        elif key in self._versions:
            self._diagnostics.debug(
                "Key %s changed while it was being saved; keeping the newer value", key
            )
        return result
