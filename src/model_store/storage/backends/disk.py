"""
Local filesystem backend.

Files live at ``<root>/<directory>/<name>``.

SECURITY NOTE: Path traversal protection via directory containment checks.
"""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from collections.abc import Sequence
from pathlib import Path

from model_store.storage.backends.base import SortOrder, StorageBackend, filter_names

logger = logging.getLogger(__name__)


class DiskBackend(StorageBackend):
    """Storage backend over a local directory tree."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _ensure_path_containment(self, path: Path) -> None:
        """Ensure path stays within the backend root (prevent traversal)."""
        resolved = path.resolve()
        base_resolved = self.root.resolve()
        try:
            resolved.relative_to(base_resolved)
        except ValueError:
            raise ValueError(f"Path escapes backend root: {path}") from None

    def _dir_path(self, directory: str) -> Path:
        path = self.root / directory
        self._ensure_path_containment(path)
        return path

    def _file_path(self, directory: str, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"Invalid file name: {name!r}")
        path = self._dir_path(directory) / name
        self._ensure_path_containment(path)
        return path

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write atomically
        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            temp_path.write_bytes(content)
            os.replace(temp_path, path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def _list(self, directory: str, sort_order: SortOrder | None) -> list[str]:
        dir_path = self._dir_path(directory)
        if not dir_path.is_dir():
            return []

        entries: list[tuple[str, int]] = []
        for entry in os.scandir(dir_path):
            if entry.is_file() and not entry.name.endswith(".tmp"):
                entries.append((entry.name, entry.stat().st_mtime_ns))

        if sort_order is not None:
            if sort_order.column == "modifiedOn":
                entries.sort(key=lambda e: (e[1], e[0]), reverse=sort_order.desc)
            else:
                entries.sort(key=lambda e: e[0], reverse=sort_order.desc)
        return [name for name, _ in entries]

    async def file_exists(self, directory: str, name: str) -> bool:
        path = self._file_path(directory, name)
        return await asyncio.to_thread(path.is_file)

    async def read_file_as_buffer(self, directory: str, name: str) -> bytes:
        path = self._file_path(directory, name)
        return await asyncio.to_thread(path.read_bytes)

    async def upsert_file(self, directory: str, name: str, content: bytes) -> None:
        path = self._file_path(directory, name)
        await asyncio.to_thread(self._write, path, content)
        logger.debug("Wrote %d bytes to %s", len(content), path)

    async def delete_file(self, directory: str, name: str) -> None:
        path = self._file_path(directory, name)
        await asyncio.to_thread(path.unlink)
        logger.debug("Deleted %s", path)

    async def directory_listing(
        self,
        directory: str,
        pattern: str = "*",
        exclude: str | Sequence[str] | None = None,
        paths_to_omit: Sequence[str] | None = None,
        sort_order: SortOrder | None = None,
    ) -> list[str]:
        names = await asyncio.to_thread(self._list, directory, sort_order)
        return filter_names(names, pattern, exclude, paths_to_omit)
