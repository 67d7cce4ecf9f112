from __future__ import annotations

"""
Labeled Tree Data Models.

Provides the generic recursive container used both for per-path flag
tracking (shadow trees) and for any other structure keyed by node names.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

# Root-relative sequence of sibling-unique names. The empty list is the root.
Path = List[str]


@dataclass
class Tree(Generic[T]):
    """
    A node with an optional payload and any number of named children.

    Attributes:
        children: Mapping of child name to child subtree.
        payload: Value attached to this node itself, or None when unset.
    """
    children: Dict[str, "Tree[T]"] = field(default_factory=dict)
    payload: Optional[T] = None
