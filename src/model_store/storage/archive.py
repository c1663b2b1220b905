"""
Single-entry archive format.

A model archive is a gzip-compressed tar holding exactly one regular file
(``model`` by default). Archives are built in portable mode: no owner,
no timestamps, fixed permissions, and no name or mtime in the gzip header,
so packing identical payloads yields identical bytes on any host.

Packing and unpacking are staged in a per-call temporary directory that is
removed on every exit path.
"""

from __future__ import annotations

import asyncio
import gzip
import tarfile
import tempfile
import zlib
from pathlib import Path

from model_store.config.settings import ARCHIVE_ENTRY_NAME
from model_store.errors import CorruptArchive

_ARCHIVE_FILE = "archive.tar.gz"
_ENTRY_MODE = 0o644


def _portable(info: tarfile.TarInfo) -> tarfile.TarInfo:
    """Strip host-specific metadata from a tar member."""
    info.uid = 0
    info.gid = 0
    info.uname = ""
    info.gname = ""
    info.mtime = 0
    info.mode = _ENTRY_MODE
    return info


def pack_archive(payload: bytes, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes:
    """Pack *payload* as the single entry *entry_name* of a gzip tar."""
    with tempfile.TemporaryDirectory(prefix="model-store-pack-") as tmp_dir:
        staging = Path(tmp_dir)
        entry_path = staging / entry_name
        entry_path.write_bytes(payload)

        archive_path = staging / _ARCHIVE_FILE
        with open(archive_path, "wb") as raw:
            # filename="" and mtime=0 keep the gzip header reproducible.
            with gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=0) as gz:
                with tarfile.open(fileobj=gz, mode="w", format=tarfile.USTAR_FORMAT) as tar:
                    tar.add(entry_path, arcname=entry_name, recursive=False, filter=_portable)

        return archive_path.read_bytes()


def unpack_archive(archive: bytes, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes:
    """Return the raw bytes of *entry_name* from a gzip tar.

    Raises:
        CorruptArchive: If the archive is malformed, fails to decompress,
            or lacks a regular file named *entry_name*.
    """
    with tempfile.TemporaryDirectory(prefix="model-store-unpack-") as tmp_dir:
        archive_path = Path(tmp_dir) / _ARCHIVE_FILE
        archive_path.write_bytes(archive)

        try:
            with tarfile.open(archive_path, mode="r:gz") as tar:
                try:
                    member = tar.getmember(entry_name)
                except KeyError:
                    raise CorruptArchive(f"Archive has no '{entry_name}' entry") from None
                if not member.isfile():
                    raise CorruptArchive(f"Archive entry '{entry_name}' is not a regular file")
                extracted = tar.extractfile(member)
                if extracted is None:
                    raise CorruptArchive(f"Archive entry '{entry_name}' could not be read")
                with extracted:
                    return extracted.read()
        except (tarfile.TarError, OSError, EOFError, zlib.error) as e:
            raise CorruptArchive(f"Unreadable archive: {e}") from e


async def pack_archive_async(payload: bytes, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes:
    """Run :func:`pack_archive` in a worker thread."""
    return await asyncio.to_thread(pack_archive, payload, entry_name)


async def unpack_archive_async(archive: bytes, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes:
    """Run :func:`unpack_archive` in a worker thread."""
    return await asyncio.to_thread(unpack_archive, archive, entry_name)


__all__ = [
    "pack_archive",
    "pack_archive_async",
    "unpack_archive",
    "unpack_archive_async",
]
