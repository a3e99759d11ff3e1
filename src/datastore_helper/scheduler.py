"""AutoSaveScheduler — periodic flush task re-armed whenever its settings change."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from numbers import Real
from typing import TYPE_CHECKING, Any

from datastore_helper._internal.clock import Clock, SystemClock

if TYPE_CHECKING:
    from datastore_helper.diagnostics import Diagnostics
    from datastore_helper.settings import Settings

logger = logging.getLogger(__name__)

ENABLED_SETTING = "AutoSaveEnabled"
INTERVAL_SETTING = "AutoSaveInterval"
DEFAULT_INTERVAL = 180


class AutoSaveScheduler:
    """Owns at most one periodic task that calls *flush* every interval.

    States are **Idle** (no task) and **Armed** (one task with a fixed
    interval).  On construction the scheduler is Idle and subscribes to
    ``AutoSaveEnabled`` and ``AutoSaveInterval``:

    * ``AutoSaveEnabled`` set to a falsy value → cancel, Idle.
    * ``AutoSaveEnabled`` set to a truthy value, or ``AutoSaveInterval``
      set while enabled → cancel the old task and start a new one that
      uses the interval current at start time, Armed.
    * ``AutoSaveInterval`` set while disabled → nothing.

    Cancel-then-start happens synchronously in :meth:`rearm`, so no two
    periodic tasks are ever live at once.  Each tick runs *flush* as its
    own task behind :func:`asyncio.shield`: cancelling the periodic task
    stops future ticks but lets a flush already dispatched finish.

    Parameters:
        settings:    Settings to read and subscribe to.
        flush:       Async zero-argument callable, usually ``cache.save``.
        clock:       Injectable clock for the waits between ticks.
        diagnostics: Gated logger.
    """

    def __init__(
        self,
        settings: Settings,
        flush: Callable[[], Awaitable[Any]],
        clock: Clock | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self._settings = settings
        self._flush = flush
        self._clock = clock or SystemClock()
        self._diagnostics = diagnostics
        self._task: asyncio.Task[None] | None = None
        self._interval: float | None = None
        self._inflight: set[asyncio.Task[Any]] = set()

        settings.subscribe(ENABLED_SETTING, self._on_enabled_changed)
        settings.subscribe(INTERVAL_SETTING, self._on_interval_changed)

    # ── state ────────────────────────────────────────────────

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float | None:
        """Interval of the live task, or ``None`` while Idle."""
        return self._interval if self.armed else None

    # ── transitions ──────────────────────────────────────────

    def rearm(self) -> None:
        """Cancel any live task and start a new one with the current interval.

        Without a running event loop the scheduler stays Idle.
        """
        self.stop()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Autosave needs a running event loop; staying idle")
            return
        interval = self._current_interval()
        self._interval = interval
        self._task = loop.create_task(self._run(interval))
        if self._diagnostics is not None:
            self._diagnostics.debug("Autosave armed with a %ss interval", interval)

    def stop(self) -> None:
        """Cancel the live task, if any.  In-flight flushes keep running."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            self._interval = None
            if self._diagnostics is not None:
                self._diagnostics.debug("Autosave stopped")

    async def drain(self) -> None:
        """Wait for every flush already dispatched by a tick to finish."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def close(self) -> None:
        self.stop()
        await self.drain()

    # ── setting callbacks ────────────────────────────────────

    def _on_enabled_changed(self, value: Any) -> None:
        if value:
            self.rearm()
        else:
            self.stop()

    def _on_interval_changed(self, value: Any) -> None:
        if self._settings[ENABLED_SETTING]:
            self.rearm()

    # ── internals ────────────────────────────────────────────

    def _current_interval(self) -> float:
        value = self._settings[INTERVAL_SETTING]
        if isinstance(value, bool) or not isinstance(value, Real) or value <= 0:
            if self._diagnostics is not None:
                self._diagnostics.warning(
                    "Invalid %s %r, falling back to %ss",
                    INTERVAL_SETTING,
                    value,
                    DEFAULT_INTERVAL,
                )
            return DEFAULT_INTERVAL
        return float(value)

    async def _run(self, interval: float) -> None:
        while True:
            await self._clock.sleep(interval)
            flush = asyncio.get_running_loop().create_task(self._flush())
            self._inflight.add(flush)
            flush.add_done_callback(self._inflight.discard)
            try:
                await asyncio.shield(flush)
            except Exception:
                logger.exception("Autosave flush failed")
