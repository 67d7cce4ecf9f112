from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Resilience against corrupted config files.
3. Value coercion and fallback in validation.
4. Persistence (Save/Load) without touching real user data.
"""

import json
from unittest.mock import patch

import pytest

from notetree.domain.config import (
    get_default_app_state,
    get_default_config,
    load_app_state,
    load_config,
    save_config,
    validate_config,
)
from notetree.domain.constants import CURRENT_CONFIG_VERSION


@pytest.fixture
def mock_user_data_dir(tmp_path):
    """
    Fixture to mock the user data directory.
    Prevents tests from reading/writing to the real OS user folder.
    """
    config_dir = tmp_path / "NoteTree"
    config_dir.mkdir()

    with patch("notetree.domain.config.get_user_data_dir", return_value=str(config_dir)):
        yield config_dir


def test_load_fresh_state_returns_defaults(mock_user_data_dir):
    """If no config file exists, it should return the default state structure."""
    assert not (mock_user_data_dir / "config.json").exists()

    state = load_app_state()

    assert state["version"] == CURRENT_CONFIG_VERSION
    assert state["settings"] == get_default_config()


def test_load_corrupted_file_returns_defaults(mock_user_data_dir):
    """If JSON is malformed, it should fall back to defaults safely."""
    (mock_user_data_dir / "config.json").write_text("{ incomplete json ", encoding="utf-8")

    state = load_app_state()

    assert state == get_default_app_state()


def test_validate_config_coerces_values():
    clean = validate_config({
        "provider": "ftp",
        "flash_timeout": "2.5",
        "save_workers": 0,
        "server_url": "https://notes.example.org/",
        "log_level": "debug",
        "unknown_key": 1,
    })

    assert clean["provider"] == "local"
    assert clean["flash_timeout"] == 2.5
    assert clean["save_workers"] == 1
    assert clean["server_url"] == "https://notes.example.org"
    assert clean["log_level"] == "DEBUG"
    assert "unknown_key" not in clean


def test_validate_config_falls_back_on_garbage():
    clean = validate_config({"flash_timeout": "soon", "save_workers": None})
    defaults = get_default_config()

    assert clean["flash_timeout"] == defaults["flash_timeout"]
    assert clean["save_workers"] == defaults["save_workers"]


def test_save_and_reload_settings(mock_user_data_dir):
    cfg = get_default_config()
    cfg["provider"] = "server"
    cfg["server_url"] = "https://notes.example.org"

    save_config(cfg)

    on_disk = json.loads((mock_user_data_dir / "config.json").read_text(encoding="utf-8"))
    assert on_disk["version"] == CURRENT_CONFIG_VERSION
    assert on_disk["settings"]["provider"] == "server"

    assert load_config()["server_url"] == "https://notes.example.org"


def test_explicit_config_path(tmp_path):
    path = str(tmp_path / "custom.json")
    save_config({"save_workers": 8}, config_path=path)
    assert load_config(path)["save_workers"] == 8
