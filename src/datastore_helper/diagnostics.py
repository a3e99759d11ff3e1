"""Diagnostics — leveled logging gated by the VerboseLogging and DebugLogging settings."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

VERBOSE_SETTING = "VerboseLogging"
DEBUG_SETTING = "DebugLogging"


class Diagnostics:
    """Per-handle logger namespaced by store name.

    Two independent channels:

    * **verbose** (``info`` / ``warning``) — emitted only while
      ``VerboseLogging`` is truthy, prefixed with ``[<name>]``.
    * **debug** (``debug`` / ``debug_warning``) — emitted only while
      ``DebugLogging`` is truthy, prefixed with ``[DEBUG]``.

    The gates are read from *settings* on every call, so toggling a setting
    takes effect on the next message.

    Parameters:
        name:     Store name, used as the prefix and the logger suffix.
        settings: Zero-argument callable returning the live settings mapping.
    """

    def __init__(self, name: str, settings: Callable[[], Mapping[str, Any]]) -> None:
        self.name = name
        self._settings = settings
        self.logger = logging.getLogger(f"datastore_helper.{name}")

    def _enabled(self, setting: str) -> bool:
        return bool(self._settings().get(setting, False))

    # ── verbose channel ──────────────────────────────────────

    def info(self, msg: str, *args: Any) -> None:
        if self._enabled(VERBOSE_SETTING):
            self.logger.info("[%s] " + msg, self.name, *args)

    def warning(self, msg: str, *args: Any) -> None:
        if self._enabled(VERBOSE_SETTING):
            self.logger.warning("[%s] " + msg, self.name, *args)

    # ── debug channel ────────────────────────────────────────

    def debug(self, msg: str, *args: Any) -> None:
        if self._enabled(DEBUG_SETTING):
            self.logger.debug("[DEBUG] " + msg, *args)

    def debug_warning(self, msg: str, *args: Any) -> None:
        if self._enabled(DEBUG_SETTING):
            self.logger.warning("[DEBUG] " + msg, *args)
