from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration dictionaries and sample documents.
"""

import os
import sys
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from notetree.domain.node_models import DirectoryNode, FileNode, create_root  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict(tmp_path) -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'notetree.domain.config'. Storage is
    redirected into the pytest temporary directory.

    Returns:
        Dict[str, Any]: A sample configuration dictionary.
    """
    return {
        # Storage
        "provider": "local",
        "storage_file": str(tmp_path / "notebook_storage.json"),
        "server_url": "http://localhost:8000",

        # Session behavior
        "flash_timeout": 0.05,
        "save_workers": 2,

        # Diagnostics
        "log_level": "DEBUG",
        "log_to_file": False,
    }


@pytest.fixture
def sample_root() -> DirectoryNode:
    """
    Build a small document tree.

    Structure::

        /
        ├── Work
        │   ├── Plan      (file)
        │   └── Archive
        │       └── 2023  (file)
        └── Ideas         (file)
    """
    root = create_root()
    archive = DirectoryNode("Archive", {"2023": FileNode("2023", "old")})
    work = DirectoryNode("Work", {
        "Plan": FileNode("Plan", "draft"),
        "Archive": archive,
    })
    root.children["Work"] = work
    root.children["Ideas"] = FileNode("Ideas", "")
    return root
