"""
Model storage.

Codec, single-entry archive format, retention policy and the store tying
them together over an abstract backend.
"""

from model_store.storage.archive import (
    pack_archive,
    pack_archive_async,
    unpack_archive,
    unpack_archive_async,
)
from model_store.storage.backends import (
    DiskBackend,
    MemoryBackend,
    SortOrder,
    StorageBackend,
)
from model_store.storage.codec import deserialize_model, model_to_document, serialize_model
from model_store.storage.naming import (
    content_hash_from_name,
    language_pattern,
    list_models_for_lang,
    make_file_name,
)
from model_store.storage.retention import PruneReport, prune_models, select_models_to_prune
from model_store.storage.store import ModelStore, get_latest_model, get_model, save_model

__all__ = [
    # Store
    "ModelStore",
    "get_latest_model",
    "get_model",
    "list_models_for_lang",
    "prune_models",
    "save_model",
    # Retention
    "PruneReport",
    "select_models_to_prune",
    # Naming
    "content_hash_from_name",
    "language_pattern",
    "make_file_name",
    # Codec
    "deserialize_model",
    "model_to_document",
    "serialize_model",
    # Archive
    "pack_archive",
    "pack_archive_async",
    "unpack_archive",
    "unpack_archive_async",
    # Backends
    "DiskBackend",
    "MemoryBackend",
    "SortOrder",
    "StorageBackend",
]
