"""Environment signal — tells the cache whether it runs outside production."""

from __future__ import annotations

import os
from typing import Protocol

ENV_VAR = "DATASTORE_HELPER_ENV"

NON_PRODUCTION_VALUES = frozenset({"development", "dev", "studio", "offline", "test", "local"})


class Environment(Protocol):
    """Protocol for the host's "is this non-production?" query."""

    def is_non_production(self) -> bool: ...


class StaticEnvironment:
    """Fixed answer, set at construction.  Useful for tests and embedding."""

    def __init__(self, non_production: bool = False) -> None:
        self._non_production = non_production

    def is_non_production(self) -> bool:
        return self._non_production


class EnvVarEnvironment:
    """Reads :data:`ENV_VAR` on every query.

    Unset or unrecognised values count as production.
    """

    def __init__(self, var: str = ENV_VAR) -> None:
        self._var = var

    def is_non_production(self) -> bool:
        value = os.getenv(self._var, "")
        return value.strip().lower() in NON_PRODUCTION_VALUES
