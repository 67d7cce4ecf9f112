from __future__ import annotations

"""
Integration tests for the FileSystem Infrastructure Layer.
"""

import os
from pathlib import Path
from unittest.mock import patch

from notetree.infra.fs import get_user_data_dir, normalize_path, read_json, write_json_atomic


def test_user_data_dir_is_created(tmp_path: Path) -> None:
    with patch("os.name", "posix"), patch("os.path.expanduser", return_value=str(tmp_path)):
        path = get_user_data_dir()

    assert path == str(tmp_path / ".notetree")
    assert os.path.isdir(path)


def test_normalize_path_uses_fallback(tmp_path: Path) -> None:
    assert normalize_path("", str(tmp_path)) == str(tmp_path)
    assert normalize_path("  ", str(tmp_path)) == str(tmp_path)


def test_json_write_then_read(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "doc.json"

    write_json_atomic(str(target), {"name": "Notizen", "items": [1, 2]})

    assert read_json(str(target)) == {"name": "Notizen", "items": [1, 2]}
    # No temp files left behind
    assert os.listdir(target.parent) == ["doc.json"]


def test_read_json_missing_or_malformed(tmp_path: Path) -> None:
    target = tmp_path / "doc.json"
    assert read_json(str(target)) is None

    target.write_text("{ broken", encoding="utf-8")
    assert read_json(str(target)) is None
