"""Settings — a closed set of named options with change subscriptions."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from datastore_helper.exceptions import SettingError

if TYPE_CHECKING:
    from datastore_helper.diagnostics import Diagnostics

logger = logging.getLogger(__name__)

SettingCallback = Callable[[Any], Any]


class SettingsSchema(BaseModel):
    """Typed defaults for a helper's settings.

    Field aliases are the canonical setting names used by
    :class:`Settings`, so ``SettingsSchema().model_dump(by_alias=True)``
    yields the default mapping.

    Attributes:
        auto_save_enabled:  Run the periodic autosave task.
        auto_save_interval: Seconds between autosaves.
        verbose_logging:    Emit ``[<name>]`` verbose messages.
        debug_logging:      Emit ``[DEBUG]`` messages.
        studio_enabled:     Allow remote writes in non-production environments.
    """

    model_config = ConfigDict(populate_by_name=True)

    auto_save_enabled: bool = Field(default=False, alias="AutoSaveEnabled")
    auto_save_interval: float = Field(default=180, alias="AutoSaveInterval")
    verbose_logging: bool = Field(default=True, alias="VerboseLogging")
    debug_logging: bool = Field(default=False, alias="DebugLogging")
    studio_enabled: bool = Field(default=False, alias="StudioEnabled")


DEFAULT_SETTINGS: dict[str, Any] = SettingsSchema().model_dump(by_alias=True)


def _describe(value: Any) -> str:
    if isinstance(value, bool):
        return "enabled" if value else "disabled"
    return str(value)


class Settings:
    """Mapping of setting name → value, seeded once and closed afterwards.

    * ``set`` only accepts names that existed at construction.  Unknown
      names are logged and ignored.  Values are not type-checked.
    * Every accepted ``set`` fires all subscribers of that name, even if
      the value did not change.

    Dispatch: when called inside a running event loop, ``set`` schedules
    each subscriber with ``loop.call_soon`` (coroutine functions become
    tasks) and returns before any of them runs.  Outside a loop, the
    subscribers run inline after the value is stored.  Ordering between
    subscribers of the same setting is not part of the contract.
    A subscriber that raises is logged; the others still run.

    Parameters:
        defaults:    Overrides applied on top of :class:`SettingsSchema`
                     defaults.  Unknown names are logged and ignored.
        diagnostics: Optional gated logger for user-facing messages.
    """

    def __init__(
        self,
        defaults: SettingsSchema | dict[str, Any] | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._callbacks: dict[str, list[SettingCallback]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self.diagnostics = diagnostics

        if isinstance(defaults, SettingsSchema):
            defaults = defaults.model_dump(by_alias=True)
        self._values: dict[str, Any] = dict(DEFAULT_SETTINGS)
        for name, value in (defaults or {}).items():
            if name not in self._values:
                self._warn("%s is not a valid setting!", name)
                continue
            self._values[name] = value

    # ── read access ──────────────────────────────────────────

    def get(self) -> dict[str, Any]:
        """Return a copy of the current settings."""
        return dict(self._values)

    def require(self, name: str) -> Any:
        """Return the value of *name*, raising :class:`SettingError` if unknown."""
        if name not in self._values:
            raise SettingError(name)
        return self._values[name]

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._values)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    # ── mutation ─────────────────────────────────────────────

    def set(self, name: str, value: Any) -> None:
        """Overwrite *name* with *value* and notify its subscribers."""
        if name not in self._values:
            self._warn("%s is not a valid setting!", name)
            return

        self._values[name] = value
        if self.diagnostics is not None:
            self.diagnostics.debug("Successfully set '%s' to %s", name, _describe(value))

        for callback in list(self._callbacks.get(name, ())):
            self._dispatch(name, callback, value)

    def subscribe(self, name: str, callback: SettingCallback) -> None:
        """Call *callback* with the new value every time *name* is set."""
        if name not in self._values:
            self._warn("Cannot bind callback, setting %s does not exist!", name)
            return
        self._callbacks.setdefault(name, []).append(callback)

    def unsubscribe(self, name: str, callback: SettingCallback) -> None:
        """Remove one registration of *callback*.  No-op if it is not subscribed."""
        callbacks = self._callbacks.get(name, [])
        if callback in callbacks:
            callbacks.remove(callback)

    # ── internals ────────────────────────────────────────────

    def _warn(self, msg: str, *args: Any) -> None:
        if self.diagnostics is not None:
            self.diagnostics.warning(msg, *args)
        else:
            logger.warning(msg, *args)

    def _dispatch(self, name: str, callback: SettingCallback, value: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._invoke(name, callback, value)
            return
        loop.call_soon(self._invoke, name, callback, value)

    def _invoke(self, name: str, callback: SettingCallback, value: Any) -> None:
        try:
            outcome = callback(value)
        except Exception:
            logger.exception("Callback for setting '%s' raised", name)
            return
        if inspect.iscoroutine(outcome):
            try:
                task = asyncio.get_running_loop().create_task(outcome)
            except RuntimeError:
                outcome.close()
                logger.warning(
                    "Async callback for setting '%s' skipped: no running event loop", name
                )
                return
            self._tasks.add(task)
            task.add_done_callback(lambda t: self._on_task_done(name, t))

    def _on_task_done(self, name: str, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Callback for setting '%s' raised", name, exc_info=task.exception()
            )
