from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of application settings as JSON in the user
data directory, with default fallback for missing or corrupted files.
"""

import logging
import os
from typing import Any, Dict, Optional

from notetree.domain import constants as const
from notetree.infra.fs import get_user_data_dir, read_json, write_json_atomic

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

PROVIDER_LOCAL = "local"
PROVIDER_SERVER = "server"
SUPPORTED_PROVIDERS = (PROVIDER_LOCAL, PROVIDER_SERVER)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_config_path() -> str:
    """Return the absolute location of config.json."""
    return os.path.join(get_user_data_dir(), CONFIG_FILENAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Storage
        "provider": PROVIDER_LOCAL,
        "storage_file": "",
        "server_url": "http://localhost:8000",

        # Session behavior
        "flash_timeout": const.DEFAULT_FLASH_TIMEOUT,
        "save_workers": const.DEFAULT_SAVE_WORKERS,

        # Diagnostics
        "log_level": "INFO",
        "log_to_file": False,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": const.CURRENT_CONFIG_VERSION,
        "settings": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Coerce a raw configuration into a well-formed one.

    Unknown providers and out-of-range numbers fall back to defaults with
    a warning rather than aborting startup.

    Args:
        cfg: Raw configuration dictionary.

    Returns:
        Dict[str, Any]: Normalized configuration.
    """
    defaults = get_default_config()
    clean = defaults.copy()
    clean.update({k: v for k, v in cfg.items() if k in defaults})

    if clean["provider"] not in SUPPORTED_PROVIDERS:
        logger.warning(f"Unknown provider '{clean['provider']}'. Using '{PROVIDER_LOCAL}'.")
        clean["provider"] = PROVIDER_LOCAL

    try:
        clean["flash_timeout"] = max(0.0, float(clean["flash_timeout"]))
    except (TypeError, ValueError):
        logger.warning("Invalid flash_timeout. Using default.")
        clean["flash_timeout"] = defaults["flash_timeout"]

    try:
        clean["save_workers"] = max(1, int(clean["save_workers"]))
    except (TypeError, ValueError):
        logger.warning("Invalid save_workers. Using default.")
        clean["save_workers"] = defaults["save_workers"]

    clean["storage_file"] = str(clean["storage_file"] or "")
    clean["server_url"] = str(clean["server_url"] or defaults["server_url"]).rstrip("/")
    clean["log_level"] = str(clean["log_level"] or "INFO").upper()
    clean["log_to_file"] = bool(clean["log_to_file"])
    return clean


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load application state from disk.

    Args:
        config_path: Override for the config file location.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    path = config_path or get_config_path()
    data = read_json(path)

    if data is None:
        logger.debug("Config file not found or unreadable. Returning defaults.")
        return get_default_app_state()

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return get_default_app_state()

    state = get_default_app_state()
    settings = data.get("settings")
    if isinstance(settings, dict):
        state["settings"] = validate_config(settings)
    return state


def save_app_state(state: Dict[str, Any], config_path: Optional[str] = None) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
        config_path: Override for the config file location.
    """
    path = config_path or get_config_path()
    state["version"] = const.CURRENT_CONFIG_VERSION
    try:
        write_json_atomic(path, state)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Retrieve the active settings directly."""
    return load_app_state(config_path)["settings"]


def save_config(config: Dict[str, Any], config_path: Optional[str] = None) -> None:
    """Validate and persist the provided settings."""
    state = load_app_state(config_path)
    state["settings"] = validate_config(config)
    save_app_state(state, config_path)
