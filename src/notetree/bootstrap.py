from __future__ import annotations

"""
Application Bootstrap.

Loads the persisted settings, initializes logging from them and builds a
ready-to-use NoteStore for the consumer layer.
"""

import logging
from typing import Any, Dict, Optional

from notetree.core.services.store import NoteStore
from notetree.domain.config import load_config
from notetree.infra.logging import LoggingConfig, configure_logging, get_default_log_path

logger = logging.getLogger(__name__)


def build_logging_config(cfg: Dict[str, Any]) -> LoggingConfig:
    """Map the user settings onto a LoggingConfig."""
    return LoggingConfig(
        level=cfg.get("log_level", "INFO"),
        console=True,
        log_file=get_default_log_path() if cfg.get("log_to_file") else None,
    )


def open_store(config_path: Optional[str] = None, fetch: bool = True) -> NoteStore:
    """
    Create the application store from the persisted configuration.

    Args:
        config_path: Override for the config file location.
        fetch: Load the document tree right away.

    Returns:
        NoteStore: Store bound to the configured provider.
    """
    cfg = load_config(config_path)
    configure_logging(build_logging_config(cfg))

    store = NoteStore.from_config(cfg)
    logger.info(f"Session opened with provider '{cfg['provider']}'.")

    if fetch:
        result = store.fetch_nodes()
        if not result.ok:
            logger.error(f"Initial load failed: {result.error}")
    return store
