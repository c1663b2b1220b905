"""
Model Store.

Persists trained models as single-entry gzip tar archives addressed by
``(content_hash, language_code)``, returns the newest model of a language
and bounds how many models each language keeps.

Reads fail open: a missing model is ``None`` and a corrupt one is evicted and
reported as ``None``. Writes fail closed: backend write errors propagate.
Nothing here locks or retries; callers needing stronger guarantees serialize
writes per language themselves.
"""

from __future__ import annotations

import logging

from model_store.config.settings import StoreConfig, get_config
from model_store.errors import (
    BackendReadError,
    BackendWriteError,
    CorruptArchive,
    CorruptArtifact,
)
from model_store.protocol.types import NLUModel
from model_store.storage.archive import pack_archive_async, unpack_archive_async
from model_store.storage.backends.base import StorageBackend
from model_store.storage.codec import deserialize_model, serialize_model
from model_store.storage.naming import (
    content_hash_from_name,
    list_models_for_lang,
    make_file_name,
)
from model_store.storage.retention import PruneReport, prune_models

logger = logging.getLogger(__name__)


class ModelStore:
    """Versioned model artifact store over a :class:`StorageBackend`."""

    def __init__(self, backend: StorageBackend, config: StoreConfig | None = None) -> None:
        """Initialize the model store.

        Args:
            backend: Storage the archives are written to
            config: Store configuration. Defaults to the environment-derived config
        """
        self.backend = backend
        self.config = config or get_config()

    @property
    def directory(self) -> str:
        return self.config.models_dir

    def file_name(self, content_hash: str, language_code: str) -> str:
        """Storage name for a ``(content_hash, language_code)`` pair."""
        return make_file_name(content_hash, language_code, self.config.file_suffix)

    async def list_models(self, language_code: str) -> list[str]:
        """List artifact names for *language_code*, newest first."""
        return await list_models_for_lang(self.backend, language_code, self.config)

    async def prune(self, language_code: str, keep: int | None = None) -> PruneReport:
        """Enforce the retention bound for *language_code*."""
        return await prune_models(self.backend, language_code, self.config, keep=keep)

    async def save(self, model: NLUModel, content_hash: str) -> PruneReport:
        """
        Persist *model* under *content_hash*, then prune its language.

        Prune problems never fail the save: per-file failures are listed in
        the returned report, and a failed prune listing is logged and
        reported through ``PruneReport.error``.

        Raises:
            BackendWriteError: If the backend write fails
            InvalidArtifactKey: If the hash or language cannot form a file name
        """
        language_code = model.language_code
        name = self.file_name(content_hash, language_code)

        payload = serialize_model(model)
        archive = await pack_archive_async(payload, self.config.entry_name)

        try:
            await self.backend.upsert_file(self.directory, name, archive)
        except Exception as e:
            raise BackendWriteError(
                f"Failed to write model {name}: {e}", directory=self.directory, name=name
            ) from e
        logger.debug("Saved model %s (%d bytes)", name, len(archive))

        try:
            return await self.prune(language_code)
        except BackendReadError as e:
            logger.warning("Skipped pruning '%s' after save: %s", language_code, e)
            return PruneReport(language_code=language_code, error=str(e))

    async def get(self, content_hash: str, language_code: str) -> NLUModel | None:
        """
        Load the model stored for ``(content_hash, language_code)``.

        Returns:
            The model, or None if it does not exist or was corrupt. Corrupt
            entries are deleted from the backend.

        Raises:
            BackendReadError: If the existence check or the read fails
        """
        name = self.file_name(content_hash, language_code)

        try:
            if not await self.backend.file_exists(self.directory, name):
                logger.debug("No model stored as %s", name)
                return None
            archive = await self.backend.read_file_as_buffer(self.directory, name)
        except Exception as e:
            raise BackendReadError(
                f"Failed to read model {name}: {e}", directory=self.directory, name=name
            ) from e

        try:
            payload = await unpack_archive_async(archive, self.config.entry_name)
            return deserialize_model(payload)
        except (CorruptArchive, CorruptArtifact) as e:
            logger.warning("Evicting corrupt model %s: %s", name, e)
            await self._evict(name)
            return None

    async def get_latest(self, language_code: str) -> NLUModel | None:
        """Load the most recently saved model for *language_code*."""
        names = await self.list_models(language_code)
        if not names:
            return None
        return await self.get(content_hash_from_name(names[0]), language_code)

    async def _evict(self, name: str) -> None:
        try:
            await self.backend.delete_file(self.directory, name)
        except Exception as e:
            logger.warning("Failed to evict corrupt model %s: %s", name, e)
        else:
            logger.info("Evicted corrupt model %s", name)


async def save_model(
    backend: StorageBackend, model: NLUModel, content_hash: str
) -> PruneReport:
    """Save *model* with the default configuration."""
    return await ModelStore(backend).save(model, content_hash)


async def get_model(
    backend: StorageBackend, content_hash: str, language_code: str
) -> NLUModel | None:
    """Load a model with the default configuration."""
    return await ModelStore(backend).get(content_hash, language_code)


async def get_latest_model(backend: StorageBackend, language_code: str) -> NLUModel | None:
    """Load the newest model of a language with the default configuration."""
    return await ModelStore(backend).get_latest(language_code)


__all__ = [
    "ModelStore",
    "get_latest_model",
    "get_model",
    "save_model",
]
