from __future__ import annotations

"""
Generic Labeled Tree Operations.

Path-addressed accessors and structural mutations over ``Tree`` nodes.
Structural helpers are deliberately forgiving: renaming, moving or
removing a path that does not exist is a no-op, because shadow trees only
mirror changes that already succeeded on the document tree.
"""

from typing import List, Optional, TypeVar

from notetree.domain.tree_models import Path, Tree

T = TypeVar("T")

# -----------------------------------------------------------------------------
# CONSTRUCTION AND INSPECTION
# -----------------------------------------------------------------------------

def create_empty_tree() -> Tree[T]:
    """Create a tree without children or payload."""
    return Tree()


def has_tree_node_children(tree_node: Tree[T]) -> bool:
    """Return True if the node has at least one child."""
    return len(tree_node.children) > 0


def get_tree_node_child_names(tree_node: Tree[T]) -> List[str]:
    """Return the names of all children of the node."""
    return list(tree_node.children.keys())

# -----------------------------------------------------------------------------
# PATH ACCESSORS
# -----------------------------------------------------------------------------

def get_tree_node(tree: Tree[T], path: Path) -> Optional[Tree[T]]:
    """
    Find the subtree rooted at the node addressed by ``path``.

    Args:
        tree: Root of the tree to search.
        path: Sequence of child names. The empty path addresses ``tree``.

    Returns:
        Optional[Tree[T]]: The matching node, or None if any segment is missing.
    """
    current = tree
    for part in path:
        child = current.children.get(part)
        if child is None:
            return None
        current = child
    return current


def set_tree_node(tree: Tree[T], path: Path, node: Tree[T]) -> None:
    """
    Overwrite the node at ``path`` with the children and payload of ``node``.

    Every missing node along the path is created empty.

    Args:
        tree: Root of the tree to modify.
        path: Address of the node to overwrite.
        node: Source of the new children mapping and payload.
    """
    current = tree
    for part in path:
        child = current.children.get(part)
        if child is None:
            child = Tree()
            current.children[part] = child
        current = child

    current.children = node.children
    current.payload = node.payload


def get_tree_node_payload(tree: Tree[T], path: Path) -> Optional[T]:
    """Return the payload at ``path``; a missing node reads as None."""
    node = get_tree_node(tree, path)
    if node is None:
        return None
    return node.payload


def set_tree_node_payload(tree: Tree[T], path: Path, payload: Optional[T]) -> None:
    """
    Replace the payload at ``path`` while keeping the node's children.

    Missing parents along the path are created.
    """
    current_node = get_tree_node(tree, path)
    children = current_node.children if current_node is not None else {}
    set_tree_node(tree, path, Tree(children=children, payload=payload))

# -----------------------------------------------------------------------------
# STRUCTURAL MUTATIONS
# -----------------------------------------------------------------------------

def remove_tree_node(tree: Tree[T], path: Path) -> None:
    """
    Remove the node at ``path`` and prune ancestors left without content.

    After the node is deleted from its parent, each ancestor that has
    neither a payload nor remaining children is deleted as well, walking
    upwards until an ancestor with content is found. The root itself is
    never deleted; removing the empty path clears the whole tree.

    Example, removing ``['First dir', 'Subdir', 'File 1']``::

        .                                .
        ├── First dir                    └── Second dir
        │   └── Subdir          ->           └── File 2
        │       └── File 1
        └── Second dir
            └── File 2

    Args:
        tree: Root of the tree to modify.
        path: Address of the node to remove. Missing paths are ignored.
    """
    current_path = list(path)
    while True:
        if not current_path:
            tree.children = {}
            tree.payload = None
            return

        parent_path = current_path[:-1]
        node_name = current_path[-1]
        parent = get_tree_node(tree, parent_path)
        if parent is None or node_name not in parent.children:
            return

        del parent.children[node_name]

        if parent.children or parent.payload is not None or not parent_path:
            return
        current_path = parent_path


def change_tree_node_name(tree: Tree[T], node_path: Path, new_name: str) -> None:
    """
    Rename the node at ``node_path`` within its parent, keeping its subtree.

    Does not check for an existing sibling called ``new_name``; callers
    validate collisions beforehand.

    Args:
        tree: Root of the tree to modify.
        node_path: Address of the node to rename. Missing paths are ignored.
        new_name: The new last path segment.
    """
    if not node_path:
        return

    old_name = node_path[-1]
    if old_name == new_name:
        return

    parent = get_tree_node(tree, node_path[:-1])
    if parent is None or old_name not in parent.children:
        return

    parent.children[new_name] = parent.children.pop(old_name)


def move_subtree(tree: Tree[T], subtree_path: Path, new_parent_path: Path) -> None:
    """
    Reattach the subtree at ``subtree_path`` under ``new_parent_path``.

    The subtree keeps its name and content. Ancestors of the old location
    left empty by the detach are pruned; missing nodes along the new
    parent path are created.

    Args:
        tree: Root of the tree to modify.
        subtree_path: Address of the subtree to move. Missing paths are ignored.
        new_parent_path: Address of the new parent node.
    """
    if not subtree_path:
        return

    name = subtree_path[-1]
    old_parent = get_tree_node(tree, subtree_path[:-1])
    if old_parent is None or name not in old_parent.children:
        return

    subtree = old_parent.children[name]
    remove_tree_node(tree, subtree_path)
    set_tree_node(tree, [*new_parent_path, name], subtree)
