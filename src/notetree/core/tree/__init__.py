from __future__ import annotations

from .mutations import (
    check_delete,
    check_insert,
    check_move,
    check_rename,
    delete_node,
    get_file,
    insert_node,
    move_node,
    rename_node,
    set_file_content,
)
from .naming import get_collision_free_name, is_valid_name
from .operations import (
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
from .paths import is_path_prefix, paths_equal, resolve_path, resolve_path_with_parent
from .shadow import ShadowTrees, is_flag_set, set_flag

__all__ = [
    "create_empty_tree",
    "get_tree_node",
    "set_tree_node",
    "get_tree_node_payload",
    "set_tree_node_payload",
    "has_tree_node_children",
    "get_tree_node_child_names",
    "remove_tree_node",
    "change_tree_node_name",
    "move_subtree",
    "resolve_path",
    "resolve_path_with_parent",
    "paths_equal",
    "is_path_prefix",
    "insert_node",
    "rename_node",
    "delete_node",
    "move_node",
    "set_file_content",
    "get_file",
    "check_insert",
    "check_rename",
    "check_delete",
    "check_move",
    "get_collision_free_name",
    "is_valid_name",
    "ShadowTrees",
    "is_flag_set",
    "set_flag",
]
