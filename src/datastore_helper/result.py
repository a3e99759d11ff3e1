"""Outcome types returned at the retrier and cache boundaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Key = str | int


@dataclass(frozen=True)
class CallResult:
    """Immutable outcome of a retried remote call.

    Attributes:
        ok:       ``True`` if one of the attempts succeeded.
        value:    Value produced by the successful attempt.
        error:    Last error seen when every attempt failed.
        attempts: Number of times the operation was invoked.
    """

    ok: bool
    value: Any = None
    error: BaseException | None = None
    attempts: int = 0

    # ── Factory helpers ──────────────────────────────────────

    @staticmethod
    def success(value: Any = None, attempts: int = 1) -> CallResult:
        return CallResult(ok=True, value=value, attempts=attempts)

    @staticmethod
    def failure(error: BaseException | None, attempts: int) -> CallResult:
        return CallResult(ok=False, error=error, attempts=attempts)

    def as_tuple(self) -> tuple[bool, Any]:
        """Return ``(ok, value_or_error)``."""
        return (True, self.value) if self.ok else (False, self.error)


@dataclass(frozen=True)
class SaveReport:
    """Immutable summary of a ``save`` call.

    Attributes:
        saved:  Keys that were persisted and evicted from the cache.  A key
                re-set while its put was in flight is persisted but stays
                cached, and is listed in neither field.
        failed: Keys whose persistence exhausted its retries, mapped to
                the last error.  These stay cached.
        gated:  ``True`` when the environment policy blocked the write and
                no remote call was attempted.
    """

    saved: tuple[Key, ...] = ()
    failed: dict[Key, BaseException | None] = field(default_factory=dict)
    gated: bool = False

    @property
    def ok(self) -> bool:
        return not self.gated and not self.failed

    @staticmethod
    def gated_report() -> SaveReport:
        return SaveReport(gated=True)
