from __future__ import annotations

"""
Unit tests for the Document Tree Mutation Algebra.

Verifies:
1. Strict preconditions (NotFound / InvalidPath / Duplicate) leave the tree untouched.
2. Shadow tree propagation on rename, delete and move.
3. Content edits mark the file unsaved.
"""

import copy

import pytest

from notetree.core.tree.mutations import (
    check_delete,
    delete_node,
    insert_node,
    move_node,
    rename_node,
    set_file_content,
)
from notetree.core.tree.paths import resolve_path
from notetree.core.tree.shadow import ShadowTrees, is_flag_set, set_flag
from notetree.domain.errors import DuplicateError, InvalidPathError, NotFoundError
from notetree.domain.node_models import DirectoryNode, FileNode

# -----------------------------------------------------------------------------
# INSERT
# -----------------------------------------------------------------------------

def test_insert_returns_new_path(sample_root) -> None:
    path = insert_node(sample_root, ["Work"], FileNode("Todo"))

    assert path == ["Work", "Todo"]
    assert isinstance(resolve_path(path, sample_root), FileNode)


def test_insert_duplicate_leaves_tree_unchanged(sample_root) -> None:
    before = copy.deepcopy(sample_root)

    with pytest.raises(DuplicateError):
        insert_node(sample_root, [], FileNode("Ideas", "other"))

    assert sample_root == before


def test_insert_into_missing_parent(sample_root) -> None:
    with pytest.raises(NotFoundError):
        insert_node(sample_root, ["Nope"], FileNode("x"))


def test_insert_into_file_is_invalid(sample_root) -> None:
    with pytest.raises(InvalidPathError):
        insert_node(sample_root, ["Ideas"], FileNode("x"))

# -----------------------------------------------------------------------------
# RENAME
# -----------------------------------------------------------------------------

def test_rename_updates_key_name_and_shadows(sample_root) -> None:
    shadows = ShadowTrees()
    set_flag(shadows.unsaved, ["Work", "Plan"], True)
    set_flag(shadows.expanded, ["Work"], True)

    new_path = rename_node(sample_root, ["Work"], "Job", shadows)

    assert new_path == ["Job"]
    job = resolve_path(["Job"], sample_root)
    assert isinstance(job, DirectoryNode)
    assert job.name == "Job"
    assert "Work" not in sample_root.children
    assert is_flag_set(shadows.unsaved, ["Job", "Plan"])
    assert is_flag_set(shadows.expanded, ["Job"])


def test_rename_to_same_name_is_noop(sample_root) -> None:
    before = copy.deepcopy(sample_root)
    assert rename_node(sample_root, ["Ideas"], "Ideas") == ["Ideas"]
    assert sample_root == before


def test_rename_to_existing_sibling_fails(sample_root) -> None:
    with pytest.raises(DuplicateError):
        rename_node(sample_root, ["Ideas"], "Work")


def test_rename_missing_node(sample_root) -> None:
    with pytest.raises(NotFoundError):
        rename_node(sample_root, ["Ghost"], "Other")

# -----------------------------------------------------------------------------
# DELETE
# -----------------------------------------------------------------------------

def test_delete_subtree_drops_flags(sample_root) -> None:
    shadows = ShadowTrees()
    set_flag(shadows.unsaved, ["Work", "Archive", "2023"], True)
    set_flag(shadows.unsaved, ["Ideas"], True)

    removed = delete_node(sample_root, ["Work"], shadows)

    assert isinstance(removed, DirectoryNode)
    assert list(sample_root.children) == ["Ideas"]
    assert not is_flag_set(shadows.unsaved, ["Work", "Archive", "2023"])
    assert is_flag_set(shadows.unsaved, ["Ideas"])


def test_delete_root_is_invalid(sample_root) -> None:
    with pytest.raises(InvalidPathError):
        delete_node(sample_root, [])


def test_check_delete_returns_node_and_parent(sample_root) -> None:
    node, parent = check_delete(sample_root, ["Work", "Plan"])

    assert node == FileNode("Plan", "draft")
    assert parent is sample_root.children["Work"]

    with pytest.raises(InvalidPathError):
        check_delete(sample_root, [])


def test_delete_missing_node(sample_root) -> None:
    with pytest.raises(NotFoundError):
        delete_node(sample_root, ["Work", "Ghost"])

# -----------------------------------------------------------------------------
# MOVE
# -----------------------------------------------------------------------------

def test_move_relocates_node_and_flags(sample_root) -> None:
    shadows = ShadowTrees()
    set_flag(shadows.unsaved, ["Work", "Plan"], True)

    new_path = move_node(sample_root, ["Work", "Plan"], ["Work", "Archive"], shadows)

    assert new_path == ["Work", "Archive", "Plan"]
    assert resolve_path(["Work", "Plan"], sample_root) is None
    assert resolve_path(new_path, sample_root).content == "draft"
    assert is_flag_set(shadows.unsaved, new_path)
    assert not is_flag_set(shadows.unsaved, ["Work", "Plan"])


def test_move_into_same_parent_is_noop(sample_root) -> None:
    before = copy.deepcopy(sample_root)
    assert move_node(sample_root, ["Work", "Plan"], ["Work"]) == ["Work", "Plan"]
    assert sample_root == before


def test_move_into_file_is_not_found(sample_root) -> None:
    with pytest.raises(NotFoundError):
        move_node(sample_root, ["Work", "Plan"], ["Ideas"])


def test_move_into_own_subtree_is_invalid(sample_root) -> None:
    with pytest.raises(InvalidPathError):
        move_node(sample_root, ["Work"], ["Work", "Archive"])


def test_move_duplicate_name_fails(sample_root) -> None:
    insert_node(sample_root, ["Work"], FileNode("Ideas"))
    before = copy.deepcopy(sample_root)

    with pytest.raises(DuplicateError):
        move_node(sample_root, ["Ideas"], ["Work"])

    assert sample_root == before

# -----------------------------------------------------------------------------
# EDIT
# -----------------------------------------------------------------------------

def test_set_content_marks_unsaved(sample_root) -> None:
    shadows = ShadowTrees()

    set_file_content(sample_root, ["Work", "Plan"], "final", shadows)

    assert resolve_path(["Work", "Plan"], sample_root).content == "final"
    assert is_flag_set(shadows.unsaved, ["Work", "Plan"])


def test_set_content_on_directory_is_invalid(sample_root) -> None:
    with pytest.raises(InvalidPathError):
        set_file_content(sample_root, ["Work"], "text")
