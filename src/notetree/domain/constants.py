from __future__ import annotations

"""
Domain Constants.

Centralized names, limits and identifiers shared by the document tree,
the storage providers and the configuration layer.
"""

from typing import List

# Name of the document root directory
ROOT_NAME = "/"

# Characters that may not appear in a file or directory name
FORBIDDEN_NAME_CHARS: List[str] = ["\\", "/", ":", "*", '"', "<", ">", "|"]

# -----------------------------------------------------------------------------
# STORAGE
# -----------------------------------------------------------------------------
LOCAL_STORAGE_VERSION = "1"
LOCAL_STORAGE_FILENAME = "notebook_storage.json"
TOKEN_FILENAME = "server_token"

API_BASE_PATH = "/api/v1"
HTTP_TIMEOUT = 10

# -----------------------------------------------------------------------------
# SESSION DEFAULTS
# -----------------------------------------------------------------------------
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_FLASH_TIMEOUT = 1.0
DEFAULT_SAVE_WORKERS = 4
