"""Protocol types and capabilities for the model store."""

from model_store.protocol.cache import (
    CacheRecord,
    EntityCache,
    LRUEntityCache,
    hydrate_entity_caches,
)
from model_store.protocol.types import (
    ListEntity,
    ModelData,
    ModelInput,
    ModelOutput,
    NLUModel,
)

__all__ = [
    "CacheRecord",
    "EntityCache",
    "LRUEntityCache",
    "ListEntity",
    "ModelData",
    "ModelInput",
    "ModelOutput",
    "NLUModel",
    "hydrate_entity_caches",
]
