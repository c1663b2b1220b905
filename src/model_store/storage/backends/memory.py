"""In-memory backend, for tests and embedding without a filesystem."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass

from model_store.storage.backends.base import SortOrder, StorageBackend, filter_names


@dataclass
class _StoredFile:
    content: bytes
    modified_on: int


class MemoryBackend(StorageBackend):
    """Dict-backed storage.

    Modification times come from a logical clock that advances on every
    write, so "newest" is always well defined regardless of wall-clock
    resolution.
    """

    def __init__(self) -> None:
        self._files: dict[tuple[str, str], _StoredFile] = {}
        self._clock = itertools.count(1)

    @staticmethod
    def _key(directory: str, name: str) -> tuple[str, str]:
        return directory.rstrip("/"), name

    async def file_exists(self, directory: str, name: str) -> bool:
        return self._key(directory, name) in self._files

    async def read_file_as_buffer(self, directory: str, name: str) -> bytes:
        try:
            return self._files[self._key(directory, name)].content
        except KeyError:
            raise FileNotFoundError(f"{directory}/{name}") from None

    async def upsert_file(self, directory: str, name: str, content: bytes) -> None:
        self._files[self._key(directory, name)] = _StoredFile(bytes(content), next(self._clock))

    async def delete_file(self, directory: str, name: str) -> None:
        try:
            del self._files[self._key(directory, name)]
        except KeyError:
            raise FileNotFoundError(f"{directory}/{name}") from None

    async def directory_listing(
        self,
        directory: str,
        pattern: str = "*",
        exclude: str | Sequence[str] | None = None,
        paths_to_omit: Sequence[str] | None = None,
        sort_order: SortOrder | None = None,
    ) -> list[str]:
        wanted = directory.rstrip("/")
        entries = [(name, f.modified_on) for (d, name), f in self._files.items() if d == wanted]
        if sort_order is not None:
            if sort_order.column == "modifiedOn":
                entries.sort(key=lambda e: e[1], reverse=sort_order.desc)
            else:
                entries.sort(key=lambda e: e[0], reverse=sort_order.desc)
        return filter_names((name for name, _ in entries), pattern, exclude, paths_to_omit)
