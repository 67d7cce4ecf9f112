from __future__ import annotations

"""
Document Path Resolution.

Locates document nodes (and their parent directories) from root-relative
name sequences.
"""

from typing import Optional, Sequence, Tuple

from notetree.domain.errors import InvalidPathError
from notetree.domain.node_models import DirectoryNode, FileNode, Node
from notetree.domain.tree_models import Path


def paths_equal(a: Sequence[str], b: Sequence[str]) -> bool:
    """Return True if both paths have the same length and elements."""
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


def is_path_prefix(prefix: Sequence[str], path: Sequence[str]) -> bool:
    """Return True if ``prefix`` matches the leading elements of ``path``."""
    return len(prefix) <= len(path) and paths_equal(prefix, path[:len(prefix)])


def format_path(path: Sequence[str]) -> str:
    """Render a path for log and error messages."""
    return "/" + "/".join(path)


def resolve_path(path: Path, root: DirectoryNode) -> Optional[Node]:
    """
    Find the node addressed by ``path``.

    Args:
        path: Root-relative path. The empty path addresses ``root``.
        root: Document root directory.

    Returns:
        Optional[Node]: The node, or None if a segment is missing.

    Raises:
        InvalidPathError: If a non-final segment names a file.
    """
    found = resolve_path_with_parent(path, root)
    if found is None:
        return None
    return found[0]


def resolve_path_with_parent(
        path: Path,
        root: DirectoryNode
) -> Optional[Tuple[Node, Optional[DirectoryNode]]]:
    """
    Find the node addressed by ``path`` together with its parent directory.

    Args:
        path: Root-relative path.
        root: Document root directory.

    Returns:
        Optional[Tuple[Node, Optional[DirectoryNode]]]: ``(node, parent)``;
        the parent is None for the root. None if a segment is missing.

    Raises:
        InvalidPathError: If a non-final segment names a file.
    """
    parent: Optional[DirectoryNode] = None
    node: Node = root

    for part in path:
        if isinstance(node, FileNode):
            raise InvalidPathError(f"'{node.name}' is a file in {format_path(path)}.")

        parent = node
        child = node.children.get(part)
        if child is None:
            return None
        node = child

    return node, parent
