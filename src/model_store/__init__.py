"""nlu-model-store package."""

from .config.settings import MAX_MODELS_TO_KEEP, StoreConfig, get_config
from .errors import (
    BackendReadError,
    BackendWriteError,
    CorruptArchive,
    CorruptArtifact,
    InvalidArtifactKey,
    ModelStoreError,
    PruneFailure,
)
from .protocol.cache import EntityCache, LRUEntityCache, hydrate_entity_caches
from .protocol.types import ListEntity, ModelData, ModelInput, ModelOutput, NLUModel
from .storage.backends import DiskBackend, MemoryBackend, SortOrder, StorageBackend
from .storage.naming import list_models_for_lang
from .storage.retention import PruneReport, prune_models
from .storage.store import ModelStore, get_latest_model, get_model, save_model

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BackendReadError",
    "BackendWriteError",
    "CorruptArchive",
    "CorruptArtifact",
    "DiskBackend",
    "EntityCache",
    "InvalidArtifactKey",
    "LRUEntityCache",
    "ListEntity",
    "MAX_MODELS_TO_KEEP",
    "MemoryBackend",
    "ModelData",
    "ModelInput",
    "ModelOutput",
    "ModelStore",
    "ModelStoreError",
    "NLUModel",
    "PruneFailure",
    "PruneReport",
    "SortOrder",
    "StorageBackend",
    "StoreConfig",
    "get_config",
    "get_latest_model",
    "get_model",
    "hydrate_entity_caches",
    "list_models_for_lang",
    "prune_models",
    "save_model",
]
