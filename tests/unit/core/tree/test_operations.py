from __future__ import annotations

"""
Unit tests for the generic labeled Tree operations.

Verifies:
1. Payload round-trip through path addressing.
2. Removal with ancestor pruning (idempotence, sibling survival).
3. Renaming and moving whole subtrees.
"""

from notetree.core.tree.operations import (
    change_tree_node_name,
    create_empty_tree,
    get_tree_node,
    get_tree_node_child_names,
    get_tree_node_payload,
    has_tree_node_children,
    move_subtree,
    remove_tree_node,
    set_tree_node,
    set_tree_node_payload,
)
from notetree.domain.tree_models import Tree


def test_payload_round_trip() -> None:
    """A payload written at a path is read back unchanged."""
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar"], "value")

    assert get_tree_node_payload(tree, ["Foo", "Bar"]) == "value"
    # Intermediate node is created without payload
    assert get_tree_node_payload(tree, ["Foo"]) is None


def test_missing_path_reads_as_absent() -> None:
    tree = create_empty_tree()
    assert get_tree_node(tree, ["Nope"]) is None
    assert get_tree_node_payload(tree, ["Nope", "Deeper"]) is None


def test_set_payload_keeps_children() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar"], 1)
    set_tree_node_payload(tree, ["Foo"], 2)

    assert get_tree_node_payload(tree, ["Foo"]) == 2
    assert get_tree_node_payload(tree, ["Foo", "Bar"]) == 1


def test_set_tree_node_overwrites_subtree() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Old"], 1)

    set_tree_node(tree, ["Foo"], Tree(children={"New": Tree(payload=2)}))

    assert get_tree_node_child_names(get_tree_node(tree, ["Foo"])) == ["New"]
    assert get_tree_node_payload(tree, ["Foo", "New"]) == 2


def test_child_inspection() -> None:
    tree = create_empty_tree()
    assert has_tree_node_children(tree) is False

    set_tree_node_payload(tree, ["A"], True)
    set_tree_node_payload(tree, ["B"], True)

    assert has_tree_node_children(tree) is True
    assert sorted(get_tree_node_child_names(tree)) == ["A", "B"]


def test_remove_prunes_empty_ancestors() -> None:
    """Removing the only leaf also removes its now-empty ancestors."""
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["First dir", "Subdir", "File 1"], True)
    set_tree_node_payload(tree, ["Second dir", "File 2"], True)

    remove_tree_node(tree, ["First dir", "Subdir", "File 1"])

    assert get_tree_node(tree, ["First dir"]) is None
    assert get_tree_node_payload(tree, ["Second dir", "File 2"]) is True


def test_remove_is_idempotent() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar"], True)
    set_tree_node_payload(tree, ["Baz"], True)

    remove_tree_node(tree, ["Foo", "Bar"])
    remove_tree_node(tree, ["Foo", "Bar"])

    assert get_tree_node_child_names(tree) == ["Baz"]


def test_pruning_stops_at_ancestor_with_payload() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo"], "Hello")
    set_tree_node_payload(tree, ["Foo", "Bar"], "World")

    remove_tree_node(tree, ["Foo", "Bar"])

    assert get_tree_node_payload(tree, ["Foo"]) == "Hello"
    assert has_tree_node_children(get_tree_node(tree, ["Foo"])) is False


def test_sibling_survives_removal() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar"], True)
    set_tree_node_payload(tree, ["Foo", "Baz"], True)

    remove_tree_node(tree, ["Foo", "Bar"])

    assert get_tree_node(tree, ["Foo"]) is not None
    assert get_tree_node_payload(tree, ["Foo", "Baz"]) is True
    assert get_tree_node(tree, ["Foo", "Bar"]) is None


def test_remove_empty_path_clears_tree() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar"], True)

    remove_tree_node(tree, [])

    assert has_tree_node_children(tree) is False
    assert tree.payload is None


def test_rename_preserves_descendant_payloads() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar"], "value")

    change_tree_node_name(tree, ["Foo"], "Baz")

    assert get_tree_node_payload(tree, ["Baz", "Bar"]) == "value"
    assert get_tree_node_payload(tree, ["Foo", "Bar"]) is None


def test_rename_missing_path_is_noop() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo"], True)

    change_tree_node_name(tree, ["Missing"], "Other")

    assert get_tree_node_child_names(tree) == ["Foo"]


def test_move_relocates_whole_subtree() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["Foo", "Bar", "Baz"], "deep")

    move_subtree(tree, ["Foo"], ["New", "Parent"])

    assert get_tree_node_payload(tree, ["New", "Parent", "Foo", "Bar", "Baz"]) == "deep"
    assert get_tree_node(tree, ["Foo"]) is None


def test_move_prunes_emptied_source_ancestors() -> None:
    tree = create_empty_tree()
    set_tree_node_payload(tree, ["A", "B", "C"], True)

    move_subtree(tree, ["A", "B", "C"], ["X"])

    assert get_tree_node(tree, ["A"]) is None
    assert get_tree_node_payload(tree, ["X", "C"]) is True


def test_move_missing_subtree_is_noop() -> None:
    tree = create_empty_tree()
    move_subtree(tree, ["Ghost"], ["Target"])
    assert get_tree_node(tree, ["Target"]) is None
