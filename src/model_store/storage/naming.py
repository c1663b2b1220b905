"""
Artifact naming and language listings.

An artifact is stored as ``<content_hash>.<language_code>.model``. Neither
part may contain ``.``, a path separator or glob metacharacters, so every
``(content_hash, language_code)`` pair maps to exactly one name and the
language glob never matches another language's artifacts.
"""

from __future__ import annotations

import logging
import re

from model_store.config.settings import StoreConfig, get_config
from model_store.errors import BackendReadError, InvalidArtifactKey
from model_store.storage.backends.base import SortOrder, StorageBackend

logger = logging.getLogger(__name__)

_FORBIDDEN = re.compile(r"[./\\*?\[\]\s]")

NEWEST_FIRST = SortOrder(column="modifiedOn", desc=True)


def _validate_part(label: str, value: str) -> None:
    if not value:
        raise InvalidArtifactKey(f"{label} must be a non-empty string.")
    if _FORBIDDEN.search(value):
        raise InvalidArtifactKey(
            f"{label} {value!r} must not contain '.', path separators, whitespace "
            "or glob characters."
        )


def make_file_name(content_hash: str, language_code: str, suffix: str = "model") -> str:
    """Return the storage name for a ``(content_hash, language_code)`` pair."""
    _validate_part("Content hash", content_hash)
    _validate_part("Language code", language_code)
    return f"{content_hash}.{language_code}.{suffix}"


def language_pattern(language_code: str, suffix: str = "model") -> str:
    """Glob matching every artifact of *language_code*."""
    _validate_part("Language code", language_code)
    return f"*.{language_code}.{suffix}"


def content_hash_from_name(file_name: str) -> str:
    """Extract the content hash from an artifact name."""
    return file_name.split(".", 1)[0]


def _is_artifact_name(file_name: str, language_code: str, suffix: str) -> bool:
    ending = f".{language_code}.{suffix}"
    if not file_name.endswith(ending):
        return False
    content_hash = file_name[: -len(ending)]
    return bool(content_hash) and not _FORBIDDEN.search(content_hash)


async def list_models_for_lang(
    backend: StorageBackend,
    language_code: str,
    config: StoreConfig | None = None,
) -> list[str]:
    """List artifact names for *language_code*, newest first.

    Files matching the language glob whose content hash would not be
    accepted by :func:`make_file_name` are skipped.

    Raises:
        BackendReadError: If the backend listing fails.
    """
    config = config or get_config()
    pattern = language_pattern(language_code, config.file_suffix)
    try:
        names = await backend.directory_listing(
            config.models_dir, pattern, sort_order=NEWEST_FIRST
        )
    except Exception as e:
        raise BackendReadError(
            f"Failed to list models for '{language_code}': {e}", directory=config.models_dir
        ) from e
    # Foreign files can match the glob; only names the store could have written count
    models = []
    for name in names:
        if _is_artifact_name(name, language_code, config.file_suffix):
            models.append(name)
        else:
            logger.debug("Ignoring non-artifact file %s", name)
    logger.debug("Found %d model(s) for '%s'", len(models), language_code)
    return models
