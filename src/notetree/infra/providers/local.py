from __future__ import annotations

"""
Local File Storage Provider.

Keeps the whole document tree as a single versioned JSON document in the
user data directory. Intended for single-machine use without
synchronization.
"""

import copy
import logging
import os
import threading
from typing import Any, List, Optional, Tuple

from notetree.core.tree.paths import paths_equal
from notetree.domain import constants as const
from notetree.domain.errors import DuplicateError, InvalidPathError, NoteStoreError, NotFoundError
from notetree.domain.node_models import (
    DirectoryNode,
    FileNode,
    Node,
    create_root,
    node_from_dict,
    node_to_dict,
)
from notetree.domain.tree_models import Path
from notetree.infra.fs import get_user_data_dir, read_json, write_json_atomic
from notetree.infra.providers.base import StorageProvider

logger = logging.getLogger(__name__)


class LocalFileProvider(StorageProvider):
    """
    Storage provider persisting ``{"version", "root"}`` to a JSON file.

    Every operation re-reads the file, applies the change and writes it
    back atomically. A lock serializes concurrent saves from the worker pool.
    """

    description = "On this device, without synchronization"

    def __init__(self, storage_file: Optional[str] = None) -> None:
        self._path = storage_file or os.path.join(
            get_user_data_dir(), const.LOCAL_STORAGE_FILENAME
        )
        self._lock = threading.Lock()

    @property
    def storage_file(self) -> str:
        return self._path

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def is_valid(self) -> bool:
        return True

    def logout(self) -> None:
        # Notes stay on disk; there is no session to drop.
        logger.debug("LocalFileProvider: logout is a no-op.")

    # -------------------------------------------------------------------------
    # PROVIDER API
    # -------------------------------------------------------------------------

    def fetch_nodes(self) -> List[Node]:
        with self._lock:
            root = self._load_root()
        return list(root.children.values())

    def add_node(self, parent: Path, node: Node) -> Tuple[Path, Node]:
        with self._lock:
            root = self._load_root()
            parent_node = self._find_directory(root, parent)
            if node.name in parent_node.children:
                raise DuplicateError(f"'{node.name}' already exists.")

            parent_node.children[node.name] = copy.deepcopy(node)
            self._store_root(root)
        return list(parent), node

    def change_node_name(self, path: Path, new_name: str) -> Tuple[Path, str]:
        with self._lock:
            root = self._load_root()
            parent = self._find_parent_of(root, path)
            old_name = path[-1]

            if old_name != new_name:
                if new_name in parent.children:
                    raise DuplicateError(f"'{new_name}' already exists.")
                node = parent.children.pop(old_name)
                node.name = new_name
                parent.children[new_name] = node
                self._store_root(root)
        return list(path), new_name

    def delete_node(self, path: Path) -> Path:
        with self._lock:
            root = self._load_root()
            parent = self._find_parent_of(root, path)
            del parent.children[path[-1]]
            self._store_root(root)
        return list(path)

    def set_page_content(self, path: Path, content: str) -> None:
        with self._lock:
            root = self._load_root()
            node: Optional[Node] = root
            for part in path:
                node = node.children.get(part) if isinstance(node, DirectoryNode) else None

            if node is None:
                raise NotFoundError("Page does not exist.")
            if not isinstance(node, FileNode):
                raise InvalidPathError("Node is a directory.")

            node.content = content
            self._store_root(root)

    def move_node(self, node_path: Path, new_parent_path: Path) -> Tuple[Path, Path]:
        name = node_path[-1]
        if paths_equal(node_path[:-1], new_parent_path):
            return list(node_path), list(node_path)

        with self._lock:
            root = self._load_root()
            old_parent = self._find_parent_of(root, node_path)
            new_parent = self._find_directory(root, new_parent_path)
            if name in new_parent.children:
                raise DuplicateError(f"'{name}' already exists.")

            new_parent.children[name] = old_parent.children.pop(name)
            self._store_root(root)
        return list(node_path), [*new_parent_path, name]

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _find_directory(self, root: DirectoryNode, path: Path) -> DirectoryNode:
        node: Optional[Node] = root
        for part in path:
            node = node.children.get(part) if isinstance(node, DirectoryNode) else None

        if not isinstance(node, DirectoryNode):
            raise NotFoundError("Directory does not exist.")
        return node

    def _find_parent_of(self, root: DirectoryNode, path: Path) -> DirectoryNode:
        if not path:
            raise InvalidPathError("The root has no parent.")

        parent = self._find_directory(root, path[:-1])
        if path[-1] not in parent.children:
            raise NotFoundError("Node does not exist.")
        return parent

    def _load_root(self) -> DirectoryNode:
        data = read_json(self._path)
        if not self._is_valid_storage(data):
            if data is not None:
                logger.warning(f"LocalFileProvider: Unusable storage at {self._path}. Reinitializing.")
            return self._store_default()

        try:
            root = node_from_dict(data["root"])
        except InvalidPathError as e:
            logger.warning(f"LocalFileProvider: Corrupted tree ({e}). Reinitializing.")
            return self._store_default()

        if not isinstance(root, DirectoryNode):
            return self._store_default()
        return root

    def _store_root(self, root: DirectoryNode) -> None:
        try:
            write_json_atomic(self._path, {
                "version": const.LOCAL_STORAGE_VERSION,
                "root": node_to_dict(root),
            })
        except OSError as e:
            logger.error(f"LocalFileProvider: Cannot write storage at {self._path}: {e}")
            raise NoteStoreError(f"Cannot write storage file: {e}") from e

    def _store_default(self) -> DirectoryNode:
        root = create_root()
        self._store_root(root)
        return root

    @staticmethod
    def _is_valid_storage(data: Any) -> bool:
        return (
            isinstance(data, dict)
            and data.get("version") == const.LOCAL_STORAGE_VERSION
            and isinstance(data.get("root"), dict)
        )
