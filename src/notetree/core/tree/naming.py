from __future__ import annotations

"""
Node Name Utilities.

Validation of user supplied names and deterministic generation of
collision-free sibling names.
"""

from typing import Iterable

from notetree.domain.constants import FORBIDDEN_NAME_CHARS


def is_valid_name(name: str) -> bool:
    """Return True if ``name`` is non-empty and has no forbidden characters."""
    if not name:
        return False
    return not any(c in FORBIDDEN_NAME_CHARS for c in name)


def get_collision_free_name(name: str, existing: Iterable[str]) -> str:
    """
    Derive a name that does not collide with any of ``existing``.

    ``name`` itself is tried first, then ``"{name} 2"``, ``"{name} 3"`` and
    so on. Comparison is exact and case-sensitive.

    Args:
        name: Desired name.
        existing: Names of the existing siblings.

    Returns:
        str: The first candidate not present in ``existing``.
    """
    taken = set(existing)
    candidate = name
    suffix = 2
    while candidate in taken:
        candidate = f"{name} {suffix}"
        suffix += 1
    return candidate
