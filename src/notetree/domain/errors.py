from __future__ import annotations

"""
Document Store Error Taxonomy.

Every failure raised by the document tree or a storage provider derives
from ``NoteStoreError``. The ``kind`` attribute is the stable identifier
copied into result objects at the store boundary.
"""


class NoteStoreError(Exception):
    """Base class for all document store and provider errors."""

    kind: str = "Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        if self.message:
            return f"{self.kind}: {self.message}"
        return self.kind


class NotFoundError(NoteStoreError):
    """A path does not resolve to an existing node."""

    kind = "NotFound"


class InvalidPathError(NoteStoreError):
    """A path is structurally wrong for the requested operation."""

    kind = "InvalidPath"


class DuplicateError(NoteStoreError):
    """An operation would create two siblings with the same name."""

    kind = "Duplicate"


class InvalidNameError(NoteStoreError):
    """A node name contains forbidden characters or is empty."""

    kind = "InvalidName"


class InvalidCredentialsError(NoteStoreError):
    """The backend rejected the supplied credentials or token."""

    kind = "InvalidCredentials"


class BackendConnectionError(NoteStoreError):
    """The storage backend could not be reached."""

    kind = "ConnectionError"
