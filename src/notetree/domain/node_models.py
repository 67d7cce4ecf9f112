from __future__ import annotations

"""
Document Node Models.

Defines the Directory/File tagged union forming the live document tree,
plus conversion to and from the JSON shape used by storage providers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from notetree.domain.constants import ROOT_NAME
from notetree.domain.errors import InvalidPathError


@dataclass
class FileNode:
    """
    A note. Owns text content and never has children.

    Attributes:
        name: Name of the file, unique among its siblings.
        content: Markdown text of the note.
    """
    name: str
    content: str = ""


@dataclass
class DirectoryNode:
    """
    A folder. Owns a mapping of child name to node and no content.

    Attributes:
        name: Name of the directory, unique among its siblings.
        children: Mapping of child name to child node.
    """
    name: str
    children: Dict[str, "Node"] = field(default_factory=dict)


Node = Union[FileNode, DirectoryNode]


def is_directory(node: Node) -> bool:
    """Return True if the node is a DirectoryNode."""
    return isinstance(node, DirectoryNode)


def create_root() -> DirectoryNode:
    """Create an empty document root."""
    return DirectoryNode(name=ROOT_NAME)


# -----------------------------------------------------------------------------
# SERIALIZATION
# -----------------------------------------------------------------------------

def node_to_dict(node: Node) -> Dict[str, Any]:
    """
    Convert a node (recursively) into its JSON-compatible dictionary.

    Args:
        node: Node to convert.

    Returns:
        Dict[str, Any]: ``{"name", "isDirectory", "children"}`` for
        directories, ``{"name", "isDirectory", "content"}`` for files.
    """
    if isinstance(node, DirectoryNode):
        return {
            "name": node.name,
            "isDirectory": True,
            "children": {name: node_to_dict(child) for name, child in node.children.items()},
        }

    return {"name": node.name, "isDirectory": False, "content": node.content}


def node_from_dict(data: Dict[str, Any]) -> Node:
    """
    Build a node (recursively) from its JSON dictionary.

    Child dictionary keys are authoritative for names, which keeps the
    sibling-uniqueness invariant intact on round-trip.

    Args:
        data: Dictionary produced by ``node_to_dict`` or a storage backend.

    Returns:
        Node: The reconstructed node.

    Raises:
        InvalidPathError: If the dictionary is not a valid node shape.
    """
    if not isinstance(data, dict) or "name" not in data:
        raise InvalidPathError("Malformed node document.")

    name = str(data["name"])
    if data.get("isDirectory"):
        raw_children = data.get("children") or {}
        if not isinstance(raw_children, dict):
            raise InvalidPathError(f"Malformed children of '{name}'.")

        directory = DirectoryNode(name=name)
        for child_name, child_data in raw_children.items():
            child = node_from_dict(child_data)
            child.name = child_name
            directory.children[child_name] = child
        return directory

    return FileNode(name=name, content=str(data.get("content") or ""))
