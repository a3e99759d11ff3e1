"""Configuration models for building helpers and stores from JSON."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from datastore_helper.exceptions import ConfigError
from datastore_helper.retry import MAX_TRIES
from datastore_helper.settings import SettingsSchema


class StoreConfigSchema(BaseModel):
    """Remote store configuration.

    Attributes:
        type:      Backend type ("memory", "sqlite" or "http").
        path:      Path to the SQLite database file (for sqlite type).
        url:       Service base URL (for http type).
        api_token: Bearer token (for http type).
        timeout:   Per-request timeout in seconds (for http type).
    """

    type: Literal["memory", "sqlite", "http"] = "memory"
    path: str = ""
    url: str = ""
    api_token: str = ""
    timeout: float = 30.0


class HelperConfig(BaseModel):
    """Everything needed to construct one :class:`~datastore_helper.DataStoreHelper`.

    Attributes:
        name:      Store name, used as the remote namespace and log prefix.
        max_tries: Attempt budget for every remote call.
        store:     Remote store configuration.
        settings:  Initial settings.
    """

    name: str
    max_tries: int = Field(default=MAX_TRIES, ge=1)
    store: StoreConfigSchema = Field(default_factory=StoreConfigSchema)
    settings: SettingsSchema = Field(default_factory=SettingsSchema)


def load_config(path: str | Path) -> HelperConfig:
    """Read and validate a JSON helper configuration file.

    Raises:
        ConfigError: If the file cannot be read or fails validation.
    """
    try:
        raw = Path(path).read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    try:
        return HelperConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e
