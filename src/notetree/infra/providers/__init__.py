from __future__ import annotations

"""
Storage Provider Registry.

Facade over the concrete providers plus a factory building the one
selected in the configuration.
"""

from typing import Any, Dict

from notetree.domain.config import PROVIDER_SERVER
from notetree.infra.providers.base import StorageProvider
from notetree.infra.providers.local import LocalFileProvider
from notetree.infra.providers.server import ServerProvider


def create_provider(cfg: Dict[str, Any]) -> StorageProvider:
    """
    Instantiate the storage provider named by ``cfg["provider"]``.

    Args:
        cfg: Validated configuration (see ``domain.config``).

    Returns:
        StorageProvider: A ready to install provider.
    """
    if cfg.get("provider") == PROVIDER_SERVER:
        return ServerProvider(cfg["server_url"])
    return LocalFileProvider(cfg.get("storage_file") or None)


__all__ = [
    "StorageProvider",
    "LocalFileProvider",
    "ServerProvider",
    "create_provider",
]
