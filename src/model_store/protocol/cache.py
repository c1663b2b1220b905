"""
Entity cache capability.

The codec only depends on :class:`EntityCache`; anything with a ``dump()``
returning JSON-compatible records can be attached to a list entity.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

from model_store.protocol.types import NLUModel

CacheRecord = dict[str, Any]


@runtime_checkable
class EntityCache(Protocol):
    """Anything that can dump itself to an ordered list of records."""

    def dump(self) -> list[CacheRecord]: ...


class LRUEntityCache:
    """Bounded least-recently-used cache of entity extraction results.

    ``dump()`` emits records most recently used first, each shaped
    ``{"k": key, "v": value, "e": expires_at}`` where ``e`` is 0 for entries
    that never expire. ``load()`` replays such records so a dump/load pair
    reproduces the cache, recency order included.
    """

    def __init__(self, max_size: int = 1000, max_age: float | None = None) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.max_age = max_age
        self._entries: OrderedDict[str, tuple[Any, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, expires_at: float) -> bool:
        return expires_at != 0 and expires_at <= time.time()

    def set(self, key: str, value: Any) -> None:
        expires_at = time.time() + self.max_age if self.max_age else 0
        self._entries[key] = (value, expires_at)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        value, expires_at = entry
        if self._expired(expires_at):
            del self._entries[key]
            return default
        self._entries.move_to_end(key)
        return value

    def has(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._expired(entry[1])

    def dump(self) -> list[CacheRecord]:
        return [
            {"k": key, "v": value, "e": expires_at}
            for key, (value, expires_at) in reversed(self._entries.items())
            if not self._expired(expires_at)
        ]

    def load(self, records: Iterable[CacheRecord]) -> None:
        """Replace the cache content with *records* (most recent first)."""
        self._entries.clear()
        # Insert oldest first so the first record ends up most recently used.
        for record in reversed(list(records)):
            expires_at = record.get("e") or 0
            if self._expired(expires_at):
                continue
            self._entries[record["k"]] = (record.get("v"), expires_at)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)


def hydrate_entity_caches(
    model: NLUModel,
    factory: Callable[[], Any] = LRUEntityCache,
) -> NLUModel:
    """Turn dumped cache records on a deserialized model back into live caches.

    Returns a copy; *model* is left untouched. *factory* must build an object
    exposing ``load(records)``.
    """
    hydrated = model.model_copy(deep=True)
    for entity in hydrated.data.output.list_entities:
        cache = factory()
        records = entity.cache if isinstance(entity.cache, list) else []
        cache.load(records)
        entity.cache = cache
    return hydrated
