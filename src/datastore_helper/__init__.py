"""datastore_helper — a resilience layer in front of a flaky remote key-value store.

Reads and writes go through an in-memory cache.  Writes are deferred and
flushed on demand or by an autosave timer, and every remote call is
retried with exponential backoff.  Failures degrade to log-and-continue.
"""

from datastore_helper.cache import KeyValueCache
from datastore_helper.config import HelperConfig, StoreConfigSchema, load_config
from datastore_helper.environment import EnvVarEnvironment, StaticEnvironment
from datastore_helper.exceptions import (
    ConfigError,
    DataStoreHelperError,
    RemoteStoreError,
    SettingError,
)
from datastore_helper.helper import DataStoreHelper
from datastore_helper.result import CallResult, SaveReport
from datastore_helper.retry import MAX_TRIES, Retrier, call_with_retry
from datastore_helper.settings import DEFAULT_SETTINGS, Settings, SettingsSchema

__all__ = [
    "DEFAULT_SETTINGS",
    "MAX_TRIES",
    "CallResult",
    "ConfigError",
    "DataStoreHelper",
    "DataStoreHelperError",
    "EnvVarEnvironment",
    "HelperConfig",
    "KeyValueCache",
    "RemoteStoreError",
    "Retrier",
    "SaveReport",
    "SettingError",
    "Settings",
    "SettingsSchema",
    "StaticEnvironment",
    "StoreConfigSchema",
    "call_with_retry",
    "load_config",
]
