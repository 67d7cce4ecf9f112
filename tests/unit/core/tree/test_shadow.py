from __future__ import annotations

"""
Unit tests for the boolean shadow trees.

Verifies:
1. Flag set/clear keeps the tree canonical (no empty leftovers).
2. Structural propagation to all shadow trees at once.
"""

from notetree.core.tree.operations import create_empty_tree, get_tree_node, has_tree_node_children
from notetree.core.tree.shadow import ShadowTrees, is_flag_set, set_flag


def test_clear_prunes_leaf_flag() -> None:
    tree = create_empty_tree()
    set_flag(tree, ["Work", "Plan"], True)

    set_flag(tree, ["Work", "Plan"], False)

    assert is_flag_set(tree, ["Work", "Plan"]) is False
    assert has_tree_node_children(tree) is False


def test_clear_keeps_descendant_flags() -> None:
    tree = create_empty_tree()
    set_flag(tree, ["Work"], True)
    set_flag(tree, ["Work", "Plan"], True)

    set_flag(tree, ["Work"], False)

    assert is_flag_set(tree, ["Work"]) is False
    assert is_flag_set(tree, ["Work", "Plan"]) is True


def test_clear_unknown_flag_is_noop() -> None:
    tree = create_empty_tree()
    set_flag(tree, ["Ghost"], False)
    assert get_tree_node(tree, ["Ghost"]) is None


def test_rename_propagates_to_every_tree() -> None:
    shadows = ShadowTrees()
    set_flag(shadows.unsaved, ["Work", "Plan"], True)
    set_flag(shadows.expanded, ["Work"], True)

    shadows.rename(["Work"], "Job")

    assert is_flag_set(shadows.unsaved, ["Job", "Plan"])
    assert is_flag_set(shadows.expanded, ["Job"])
    assert not is_flag_set(shadows.unsaved, ["Work", "Plan"])


def test_move_and_remove_propagation() -> None:
    shadows = ShadowTrees()
    set_flag(shadows.unsaved, ["Work", "Plan"], True)
    set_flag(shadows.editing, ["Work", "Plan"], True)

    shadows.move(["Work", "Plan"], ["Archive"])

    assert is_flag_set(shadows.unsaved, ["Archive", "Plan"])
    assert is_flag_set(shadows.editing, ["Archive", "Plan"])
    assert get_tree_node(shadows.unsaved, ["Work"]) is None

    shadows.remove(["Archive"])

    assert all(not has_tree_node_children(t) for t in shadows.all())


def test_reset_clears_everything() -> None:
    shadows = ShadowTrees()
    for name, tree in shadows.as_dict().items():
        set_flag(tree, [name], True)

    shadows.reset()

    assert all(not has_tree_node_children(t) for t in shadows.all())
