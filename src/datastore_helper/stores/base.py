"""RemoteStore protocol — the remote key-value service behind the cache."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from datastore_helper.result import Key


class RemoteStore(ABC):
    """Abstract base for all remote backends.

    Each helper owns one *namespace* (e.g. ``"Players"``).  Payloads are
    opaque to the store: it persists any JSON-serializable value keyed by
    ``(namespace, key)``.

    Calls may be slow and may fail.  Implementations raise on failure and
    never retry themselves; retrying is the caller's job.  ``put`` must be
    a pure overwrite so that repeating it is safe.
    """

    @abstractmethod
    async def get(self, namespace: str, key: Key) -> Any:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    async def put(self, namespace: str, key: Key, value: Any) -> None:
        """Create or overwrite a value."""
        ...

    async def close(self) -> None:
        """Release any held resources.  No-op by default."""
