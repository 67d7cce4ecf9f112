from __future__ import annotations

"""
Document Tree Mutation Algebra.

Strict insert, rename, delete, move and edit operations on the document
tree. Each operation has a ``check_*`` counterpart that validates every
precondition without modifying anything; the operation runs the check
first, so a failing call leaves both the document and its shadow trees
untouched. Successful structural changes are mirrored into the shadow
trees.
"""

import logging
from typing import Optional, Tuple

from notetree.core.tree.paths import (
    format_path,
    is_path_prefix,
    paths_equal,
    resolve_path,
    resolve_path_with_parent,
)
from notetree.core.tree.shadow import ShadowTrees, set_flag
from notetree.domain.errors import DuplicateError, InvalidPathError, NotFoundError
from notetree.domain.node_models import DirectoryNode, FileNode, Node
from notetree.domain.tree_models import Path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PRECONDITION CHECKS
# -----------------------------------------------------------------------------

def check_insert(root: DirectoryNode, parent_path: Path, name: str) -> DirectoryNode:
    """
    Validate that a node called ``name`` can be inserted at ``parent_path``.

    Returns:
        DirectoryNode: The resolved parent directory.

    Raises:
        NotFoundError: If the parent does not exist.
        InvalidPathError: If the parent is a file or the path crosses a file.
        DuplicateError: If the parent already has a child called ``name``.
    """
    parent = resolve_path(parent_path, root)
    if parent is None:
        raise NotFoundError(f"No node at {format_path(parent_path)}.")
    if not isinstance(parent, DirectoryNode):
        raise InvalidPathError(f"{format_path(parent_path)} is a file.")
    if name in parent.children:
        raise DuplicateError(f"'{name}' already exists in {format_path(parent_path)}.")
    return parent


def check_delete(root: DirectoryNode, path: Path) -> Tuple[Node, DirectoryNode]:
    """
    Validate that ``path`` names an existing, non-root node.

    Returns:
        Tuple[Node, DirectoryNode]: The node and its parent directory.

    Raises:
        NotFoundError: If the node does not exist.
        InvalidPathError: If ``path`` is empty or crosses a file.
    """
    if not path:
        raise InvalidPathError("The root cannot be addressed by this operation.")

    found = resolve_path_with_parent(path, root)
    if found is None:
        raise NotFoundError(f"No node at {format_path(path)}.")

    node, parent = found
    if parent is None:
        raise InvalidPathError("The root cannot be addressed by this operation.")
    return node, parent


def check_rename(root: DirectoryNode, path: Path, new_name: str) -> Tuple[Node, DirectoryNode]:
    """
    Validate renaming the node at ``path`` to ``new_name``.

    Raises:
        NotFoundError: If the node does not exist.
        InvalidPathError: If ``path`` is empty or crosses a file.
        DuplicateError: If a different sibling is already called ``new_name``.
    """
    node, parent = check_delete(root, path)
    if new_name != path[-1] and new_name in parent.children:
        raise DuplicateError(f"'{new_name}' already exists in {format_path(path[:-1])}.")
    return node, parent


def check_move(
        root: DirectoryNode,
        node_path: Path,
        new_parent_path: Path
) -> Optional[Tuple[DirectoryNode, DirectoryNode]]:
    """
    Validate moving the node at ``node_path`` into ``new_parent_path``.

    Returns:
        Optional[Tuple[DirectoryNode, DirectoryNode]]: The old and the new
        parent, or None when the node already lives in the new parent.

    Raises:
        NotFoundError: If the node or the new parent does not exist, or
            the new parent is a file.
        InvalidPathError: If ``node_path`` is empty, or the new parent lies
            inside the moved subtree.
        DuplicateError: If the new parent already has a child with that name.
    """
    _, old_parent = check_delete(root, node_path)

    new_parent = resolve_path(new_parent_path, root)
    if not isinstance(new_parent, DirectoryNode):
        raise NotFoundError(f"No directory at {format_path(new_parent_path)}.")

    if paths_equal(node_path[:-1], new_parent_path):
        return None

    if is_path_prefix(node_path, new_parent_path):
        raise InvalidPathError(f"Cannot move {format_path(node_path)} into its own subtree.")

    if node_path[-1] in new_parent.children:
        raise DuplicateError(
            f"'{node_path[-1]}' already exists in {format_path(new_parent_path)}."
        )
    return old_parent, new_parent

# -----------------------------------------------------------------------------
# STRUCTURAL OPERATIONS
# -----------------------------------------------------------------------------

def insert_node(root: DirectoryNode, parent_path: Path, node: Node) -> Path:
    """
    Add ``node`` as a child of the directory at ``parent_path``.

    Args:
        root: Document root.
        parent_path: Address of the target directory.
        node: Node to insert; its ``name`` becomes the child key.

    Returns:
        Path: Path of the inserted node.
    """
    parent = check_insert(root, parent_path, node.name)
    parent.children[node.name] = node

    new_path = [*parent_path, node.name]
    logger.debug(f"Inserted {format_path(new_path)}")
    return new_path


def rename_node(
        root: DirectoryNode,
        path: Path,
        new_name: str,
        shadows: Optional[ShadowTrees] = None
) -> Path:
    """
    Rename the node at ``path``, keeping it under the same parent.

    Renaming a node to its current name succeeds without changes.

    Returns:
        Path: The node's new path.
    """
    node, parent = check_rename(root, path, new_name)
    new_path = [*path[:-1], new_name]
    if path[-1] == new_name:
        return new_path

    node.name = new_name
    parent.children[new_name] = parent.children.pop(path[-1])

    if shadows is not None:
        shadows.rename(path, new_name)

    logger.debug(f"Renamed {format_path(path)} -> {format_path(new_path)}")
    return new_path


def delete_node(
        root: DirectoryNode,
        path: Path,
        shadows: Optional[ShadowTrees] = None
) -> Node:
    """
    Remove the node at ``path`` together with its whole subtree.

    Returns:
        Node: The detached node.
    """
    node, parent = check_delete(root, path)
    del parent.children[path[-1]]

    if shadows is not None:
        shadows.remove(path)

    logger.debug(f"Deleted {format_path(path)}")
    return node


def move_node(
        root: DirectoryNode,
        node_path: Path,
        new_parent_path: Path,
        shadows: Optional[ShadowTrees] = None
) -> Path:
    """
    Move the node at ``node_path`` into the directory at ``new_parent_path``.

    Moving a node into its current parent succeeds without changes.

    Returns:
        Path: The node's new path.
    """
    parents = check_move(root, node_path, new_parent_path)
    if parents is None:
        return list(node_path)

    old_parent, new_parent = parents
    name = node_path[-1]
    new_parent.children[name] = old_parent.children.pop(name)

    if shadows is not None:
        shadows.move(node_path, new_parent_path)

    new_path = [*new_parent_path, name]
    logger.debug(f"Moved {format_path(node_path)} -> {format_path(new_path)}")
    return new_path

# -----------------------------------------------------------------------------
# CONTENT EDIT
# -----------------------------------------------------------------------------

def get_file(root: DirectoryNode, path: Path) -> FileNode:
    """
    Resolve ``path`` to a file.

    Raises:
        NotFoundError: If the file does not exist.
        InvalidPathError: If the path names a directory or crosses a file.
    """
    node = resolve_path(path, root)
    if node is None:
        raise NotFoundError(f"No node at {format_path(path)}.")
    if not isinstance(node, FileNode):
        raise InvalidPathError(f"{format_path(path)} is a directory.")
    return node


def set_file_content(
        root: DirectoryNode,
        path: Path,
        content: str,
        shadows: Optional[ShadowTrees] = None
) -> None:
    """Replace the content of the file at ``path`` and mark it unsaved."""
    node = get_file(root, path)
    node.content = content
    if shadows is not None:
        set_flag(shadows.unsaved, path, True)
