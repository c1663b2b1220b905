"""Pytest configuration and shared fixtures for model store tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from model_store.config.settings import (
    ENV_MAX_MODELS,
    ENV_MODELS_DIR,
    StoreConfig,
    reset_config,
)
from model_store.protocol.cache import LRUEntityCache
from model_store.protocol.types import NLUModel
from model_store.storage.backends.base import SortOrder
from model_store.storage.backends.memory import MemoryBackend
from model_store.storage.store import ModelStore


class FlakyBackend(MemoryBackend):
    """Memory backend that fails selected operations."""

    def __init__(
        self,
        fail_deletes: Sequence[str] = (),
        fail_writes: bool = False,
        fail_reads: bool = False,
        fail_listing: bool = False,
    ) -> None:
        super().__init__()
        self.fail_deletes = set(fail_deletes)
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads
        self.fail_listing = fail_listing
        self.delete_calls: list[str] = []

    async def upsert_file(self, directory: str, name: str, content: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        await super().upsert_file(directory, name, content)

    async def read_file_as_buffer(self, directory: str, name: str) -> bytes:
        if self.fail_reads:
            raise OSError("read timeout")
        return await super().read_file_as_buffer(directory, name)

    async def delete_file(self, directory: str, name: str) -> None:
        self.delete_calls.append(name)
        if name in self.fail_deletes:
            raise PermissionError(f"cannot delete {name}")
        await super().delete_file(directory, name)

    async def directory_listing(
        self,
        directory: str,
        pattern: str = "*",
        exclude: str | Sequence[str] | None = None,
        paths_to_omit: Sequence[str] | None = None,
        sort_order: SortOrder | None = None,
    ) -> list[str]:
        if self.fail_listing:
            raise OSError("listing unavailable")
        return await super().directory_listing(
            directory, pattern, exclude, paths_to_omit, sort_order
        )


class CorruptibleBackend(MemoryBackend):
    """Memory backend whose stored bytes can be damaged in place."""

    def set_content(self, directory: str, name: str, content: bytes) -> None:
        """Overwrite content without advancing the clock."""
        self._files[self._key(directory, name)].content = content


def build_model(
    language_code: str = "en",
    slots_model: bytes = b"\x00\x01\xfeCRF\xff",
    cache_entries: dict[str, Any] | None = None,
) -> NLUModel:
    """Build a trained model with one cached list entity."""
    cache = LRUEntityCache(max_size=10)
    for key, value in (cache_entries or {"nyc": [{"start": 0, "end": 3}]}).items():
        cache.set(key, value)

    return NLUModel.model_validate(
        {
            "language_code": language_code,
            "hash": "training-hash",
            "started_at": "2024-01-01T10:00:00+00:00",
            "finished_at": "2024-01-01T10:05:00+00:00",
            "data": {
                "input": {
                    "training_session": {"status": "training", "progress": 0.5},
                    "intents": [{"name": "book_flight", "utterances": ["fly to nyc"]}],
                },
                "output": {
                    "list_entities": [
                        {
                            "name": "city",
                            "synonyms": {"nyc": ["new york"]},
                            "fuzzy": 0.8,
                            "cache": cache,
                        },
                        {"name": "airline", "synonyms": {}, "cache": None},
                    ],
                    "slots_model": slots_model,
                    "intents": [{"name": "book_flight", "vectors": [[0.1, 0.2]]}],
                    "ctx_model": {"weights": [1, 2, 3]},
                },
            },
        }
    )


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch):
    """Isolate tests from environment configuration."""
    monkeypatch.delenv(ENV_MODELS_DIR, raising=False)
    monkeypatch.delenv(ENV_MAX_MODELS, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def model_factory() -> Callable[..., NLUModel]:
    """Factory for sample models."""
    return build_model


@pytest.fixture
def memory_backend() -> MemoryBackend:
    """Create an empty in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def store_config() -> StoreConfig:
    """Default store configuration."""
    return StoreConfig()


@pytest.fixture
def store(memory_backend: MemoryBackend, store_config: StoreConfig) -> ModelStore:
    """Create a store over the in-memory backend."""
    return ModelStore(memory_backend, store_config)
