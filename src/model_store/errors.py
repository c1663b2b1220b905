"""
Error taxonomy for the model store.

Reads fail open toward absence (corrupt entries are evicted and reported as
missing); writes fail closed (backend errors propagate to the caller).
Nothing in this package retries automatically.
"""

from __future__ import annotations


class ModelStoreError(Exception):
    """Base class for all model store errors."""


class InvalidArtifactKey(ModelStoreError, ValueError):
    """A content hash or language code cannot be encoded into a file name."""


class BackendError(ModelStoreError):
    """A storage backend call failed."""

    def __init__(self, message: str, directory: str | None = None, name: str | None = None):
        super().__init__(message)
        self.directory = directory
        self.name = name


class BackendReadError(BackendError):
    """Existence check, read or listing failed."""


class BackendWriteError(BackendError):
    """Upsert failed."""


class CorruptArtifact(ModelStoreError):
    """Serialized model payload could not be parsed or validated."""


class CorruptArchive(ModelStoreError):
    """Archive is malformed, fails to decompress or lacks the expected entry."""


class PruneFailure(ModelStoreError):
    """A single deletion during retention enforcement failed.

    Recorded in a PruneReport rather than raised, so one failed deletion
    never aborts the others or the save that triggered them.
    """

    def __init__(self, name: str, reason: str):
        super().__init__(f"Failed to delete {name}: {reason}")
        self.name = name
        self.reason = reason


__all__ = [
    "BackendError",
    "BackendReadError",
    "BackendWriteError",
    "CorruptArchive",
    "CorruptArtifact",
    "InvalidArtifactKey",
    "ModelStoreError",
    "PruneFailure",
]
