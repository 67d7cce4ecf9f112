from __future__ import annotations

"""
Shadow Trees.

Per-path boolean flags kept beside the document tree: unsaved changes,
name editing, expansion, pending focus and highlight. A flag is set when
its path carries a ``True`` payload; a missing node means unset.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from notetree.core.tree.operations import (
    change_tree_node_name,
    create_empty_tree,
    get_tree_node,
    get_tree_node_payload,
    has_tree_node_children,
    move_subtree,
    remove_tree_node,
    set_tree_node_payload,
)
from notetree.domain.tree_models import Path, Tree

FlagTree = Tree[bool]


def is_flag_set(tree: FlagTree, path: Path) -> bool:
    """Return True if the flag at ``path`` is set."""
    return get_tree_node_payload(tree, path) is True


def set_flag(tree: FlagTree, path: Path, value: bool) -> None:
    """
    Set or clear the flag at ``path``.

    Clearing keeps flags of descendants and prunes the node once it
    carries nothing.
    """
    if value:
        set_tree_node_payload(tree, path, True)
        return

    node = get_tree_node(tree, path)
    if node is None:
        return
    if has_tree_node_children(node):
        node.payload = None
    else:
        remove_tree_node(tree, path)


@dataclass
class ShadowTrees:
    """
    The set of flag trees mirroring the document tree structure.

    Attributes:
        unsaved: Files whose content changed since the last save.
        editing: Nodes whose name is being edited.
        expanded: Expanded directories in the navigation tree.
        focus_pending: Nodes that should receive input focus.
        highlighted: Nodes currently flashed in the navigation tree.
    """
    unsaved: FlagTree = field(default_factory=create_empty_tree)
    editing: FlagTree = field(default_factory=create_empty_tree)
    expanded: FlagTree = field(default_factory=create_empty_tree)
    focus_pending: FlagTree = field(default_factory=create_empty_tree)
    highlighted: FlagTree = field(default_factory=create_empty_tree)

    def all(self) -> List[FlagTree]:
        return [self.unsaved, self.editing, self.expanded, self.focus_pending, self.highlighted]

    def as_dict(self) -> Dict[str, FlagTree]:
        return {
            "unsaved": self.unsaved,
            "editing": self.editing,
            "expanded": self.expanded,
            "focus_pending": self.focus_pending,
            "highlighted": self.highlighted,
        }

    def rename(self, path: Path, new_name: str) -> None:
        """Follow a document rename in every shadow tree."""
        for tree in self.all():
            change_tree_node_name(tree, path, new_name)

    def remove(self, path: Path) -> None:
        """Drop every flag at or below ``path``."""
        for tree in self.all():
            remove_tree_node(tree, path)

    def move(self, path: Path, new_parent_path: Path) -> None:
        """Follow a document move in every shadow tree."""
        for tree in self.all():
            move_subtree(tree, path, new_parent_path)

    def reset(self) -> None:
        """Clear every flag in every shadow tree."""
        for tree in self.all():
            remove_tree_node(tree, [])
