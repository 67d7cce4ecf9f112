from __future__ import annotations

"""
Operation Result Models.

Defines the immutable objects and factory functions used to report the
outcome of store operations to the consumer layer without raising across
the boundary.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from notetree.domain.errors import NoteStoreError
from notetree.domain.tree_models import Path

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a single store operation.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Stable error identifier (NotFound, Duplicate, ...).
        path: Path the operation ended up addressing (e.g. the new path
            after a rename or move).
        data: Operation specific payload (inserted node, summary, ...).
    """
    ok: bool
    error: str = ""
    error_kind: str = ""
    path: Path = field(default_factory=list)
    data: Any = None


@dataclass(frozen=True)
class SaveManySummary:
    """
    Per-file outcome of a recursive multi-save.

    Attributes:
        saved: Paths whose content was persisted.
        failed: Pairs of path and error message for failed saves.
    """
    saved: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def all_saved(self) -> bool:
        return not self.failed

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_success_result(path: Optional[Path] = None, data: Any = None) -> OperationResult:
    """
    Create a successful result.

    Args:
        path: Path addressed by the completed operation.
        data: Optional operation payload.

    Returns:
        OperationResult: An immutable success result.
    """
    return OperationResult(ok=True, path=list(path or []), data=data)


def create_error_result(error: NoteStoreError, path: Optional[Path] = None) -> OperationResult:
    """
    Create a failed result from a store error.

    Args:
        error: The error that aborted the operation.
        path: Path the failed operation was addressing.

    Returns:
        OperationResult: An immutable error result.
    """
    return OperationResult(
        ok=False,
        error=str(error),
        error_kind=error.kind,
        path=list(path or []),
    )
