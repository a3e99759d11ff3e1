"""Clock abstraction for testable time-dependent logic."""

from __future__ import annotations

import asyncio
from typing import Protocol


class Clock(Protocol):
    """Protocol for suspending the current task.  Inject a fake in tests."""

    async def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Default clock backed by the running event loop."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
