"""Tests for configuration loading."""

import json

import pytest
from pydantic import ValidationError

from datastore_helper import ConfigError, HelperConfig, StoreConfigSchema, load_config


def test_defaults():
    config = HelperConfig(name="Players")
    assert config.max_tries == 5
    assert config.store.type == "memory"
    assert config.settings.auto_save_enabled is False
    assert config.settings.auto_save_interval == 180


def test_settings_by_alias():
    config = HelperConfig.model_validate(
        {"name": "Players", "settings": {"AutoSaveEnabled": True, "StudioEnabled": True}}
    )
    assert config.settings.auto_save_enabled is True
    assert config.settings.studio_enabled is True


def test_max_tries_must_be_positive():
    with pytest.raises(ValidationError):
        HelperConfig(name="Players", max_tries=0)


def test_unknown_store_type_rejected():
    with pytest.raises(ValidationError):
        StoreConfigSchema(type="redis")


def test_load_config(tmp_path):
    path = tmp_path / "helper.json"
    path.write_text(
        json.dumps(
            {
                "name": "Players",
                "max_tries": 3,
                "store": {"type": "sqlite", "path": "players.db"},
                "settings": {"AutoSaveInterval": 60},
            }
        )
    )
    config = load_config(path)
    assert config.name == "Players"
    assert config.max_tries == 3
    assert config.store.path == "players.db"
    assert config.settings.auto_save_interval == 60


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path / "nope.json")


def test_load_config_invalid(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"store": {"type": "memory"}}')
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(path)
