from __future__ import annotations

"""
Storage Provider Contract.

Abstract capability interface every persistence backend implements. All
methods are blocking; the store runs them on its worker pool.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from notetree.domain.node_models import Node
from notetree.domain.tree_models import Path


class StorageProvider(ABC):
    """
    Persistence backend for the document tree.

    Implementations raise the ``notetree.domain.errors`` hierarchy:
    NotFound, Duplicate, InvalidPath, InvalidCredentials and
    BackendConnectionError.
    """

    #: Short human readable description of where notes are kept.
    description: str = ""

    @abstractmethod
    def is_valid(self) -> bool:
        """Return True if the provider is ready for use."""

    @abstractmethod
    def logout(self) -> None:
        """Return the provider to its initial, unauthenticated state."""

    @abstractmethod
    def fetch_nodes(self) -> List[Node]:
        """Load all top-level nodes (with their subtrees)."""

    @abstractmethod
    def add_node(self, parent: Path, node: Node) -> Tuple[Path, Node]:
        """
        Create ``node`` under ``parent``.

        Returns:
            Tuple[Path, Node]: The confirmed parent path and the node as
            stored, which may differ from the requested one.
        """

    @abstractmethod
    def change_node_name(self, path: Path, new_name: str) -> Tuple[Path, str]:
        """
        Rename the node at ``path``.

        Returns:
            Tuple[Path, str]: The old path and the confirmed new name.
        """

    @abstractmethod
    def delete_node(self, path: Path) -> Path:
        """Delete the node at ``path``; returns the confirmed path."""

    @abstractmethod
    def set_page_content(self, path: Path, content: str) -> None:
        """Persist the content of the file at ``path``."""

    @abstractmethod
    def move_node(self, node_path: Path, new_parent_path: Path) -> Tuple[Path, Path]:
        """
        Move the node at ``node_path`` into ``new_parent_path``.

        Returns:
            Tuple[Path, Path]: The old and the new path of the node.
        """
