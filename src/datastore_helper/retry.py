"""Backoff retrier — wraps a fallible remote call with exponential backoff and jitter."""

from __future__ import annotations

import inspect
import logging
import random
from collections.abc import Callable
from typing import Any

from datastore_helper._internal.clock import Clock, SystemClock
from datastore_helper.result import CallResult

logger = logging.getLogger(__name__)

MAX_TRIES = 5


def backoff_delay(attempt: int, rng: random.Random | None = None) -> float:
    """Seconds to wait after failed *attempt* (1-based): ``2**attempt + U(0, 1)``."""
    jitter = (rng or random).random()
    return 2**attempt + jitter


class Retrier:
    """Calls an operation up to ``max_tries`` times, backing off between failures.

    The operation is treated as idempotent: the retrier re-invokes it
    after any ``Exception`` and does no deduplication across attempts.
    Callers are responsible for only wrapping calls that are safe to
    repeat (a put-by-key overwrite is; an append is not).

    Parameters:
        max_tries: Maximum number of attempts, at least 1.
        clock:     Injectable clock whose ``sleep`` performs the backoff.
        rng:       Injectable random source for the jitter.
    """

    def __init__(
        self,
        max_tries: int = MAX_TRIES,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if max_tries < 1:
            raise ValueError(f"max_tries must be at least 1, got {max_tries}")
        self.max_tries = max_tries
        self._clock = clock or SystemClock()
        self._rng = rng or random.Random()

    async def call(self, operation: Callable[[], Any], description: str = "") -> CallResult:
        """Run *operation* until it succeeds or the attempt budget is spent.

        *operation* takes no arguments and returns a value or an awaitable.
        The first success returns immediately.  Exhaustion returns a failed
        :class:`CallResult` carrying the last error; it never raises.
        Cancellation of the calling task is not retried.
        """
        label = description or getattr(operation, "__name__", "operation")
        last_error: BaseException | None = None

        for attempt in range(1, self.max_tries + 1):
            try:
                value = operation()
                if inspect.isawaitable(value):
                    value = await value
                return CallResult.success(value, attempts=attempt)
            except Exception as exc:
                last_error = exc

            if attempt < self.max_tries:
                delay = backoff_delay(attempt, self._rng)
                logger.debug(
                    "%s failed (attempt %d/%d): %s, retrying in %.2fs",
                    label,
                    attempt,
                    self.max_tries,
                    last_error,
                    delay,
                )
                await self._clock.sleep(delay)

        logger.debug("%s failed after %d attempts: %s", label, self.max_tries, last_error)
        return CallResult.failure(last_error, attempts=self.max_tries)


async def call_with_retry(
    operation: Callable[[], Any],
    *,
    max_tries: int = MAX_TRIES,
    clock: Clock | None = None,
    rng: random.Random | None = None,
) -> tuple[bool, Any]:
    """Tuple-shaped shortcut: ``(True, value)`` on success, ``(False, last_error)`` otherwise."""
    result = await Retrier(max_tries=max_tries, clock=clock, rng=rng).call(operation)
    return result.as_tuple()
