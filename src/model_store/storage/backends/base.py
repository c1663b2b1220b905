"""Storage backend interface for the model store."""

from __future__ import annotations

import fnmatch
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SortOrder(BaseModel):
    """Ordering applied to a directory listing."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: Literal["modifiedOn", "name"] = Field(
        default="modifiedOn", description="Sort key: modification time or file name."
    )
    desc: bool = Field(default=False, description="Sort descending (newest/last first).")


class StorageBackend(ABC):
    """Abstract file storage the model store reads and writes through.

    Implementations should:
    - treat ``directory`` as a logical folder relative to their own root
    - make :meth:`upsert_file` replace existing content in a single step
    - return plain file names (not paths) from :meth:`directory_listing`

    The store performs no locking; concurrent writers to the same directory
    are not coordinated.
    """

    @abstractmethod
    async def file_exists(self, directory: str, name: str) -> bool:
        """Return True if *name* exists in *directory*."""

    @abstractmethod
    async def read_file_as_buffer(self, directory: str, name: str) -> bytes:
        """Return the full content of *name*."""

    @abstractmethod
    async def upsert_file(self, directory: str, name: str, content: bytes) -> None:
        """Create or replace *name* with *content*."""

    @abstractmethod
    async def delete_file(self, directory: str, name: str) -> None:
        """Delete *name* from *directory*."""

    @abstractmethod
    async def directory_listing(
        self,
        directory: str,
        pattern: str = "*",
        exclude: str | Sequence[str] | None = None,
        paths_to_omit: Sequence[str] | None = None,
        sort_order: SortOrder | None = None,
    ) -> list[str]:
        """List file names in *directory* matching the glob *pattern*.

        Args:
            directory: Logical directory to list
            pattern: Glob the names must match
            exclude: Glob(s) removing names from the result
            paths_to_omit: Exact names removed from the result
            sort_order: Ordering; backend order when omitted

        Returns:
            Matching names, ordered per *sort_order*
        """


def filter_names(
    names: Iterable[str],
    pattern: str = "*",
    exclude: str | Sequence[str] | None = None,
    paths_to_omit: Sequence[str] | None = None,
) -> list[str]:
    """Apply the glob/exclude/omit rules shared by all listings."""
    excludes = [exclude] if isinstance(exclude, str) else list(exclude or [])
    omitted = set(paths_to_omit or [])
    return [
        name
        for name in names
        if fnmatch.fnmatchcase(name, pattern)
        and name not in omitted
        and not any(fnmatch.fnmatchcase(name, ex) for ex in excludes)
    ]
