"""Storage backends for the model store."""

from model_store.storage.backends.base import SortOrder, StorageBackend, filter_names
from model_store.storage.backends.disk import DiskBackend
from model_store.storage.backends.memory import MemoryBackend

__all__ = [
    "DiskBackend",
    "MemoryBackend",
    "SortOrder",
    "StorageBackend",
    "filter_names",
]
