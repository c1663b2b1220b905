"""
Model codec.

Converts an NLUModel into a portable JSON byte stream and back. Entity caches
are dumped to records, derived intents and the training session are dropped,
and the binary slots model is written as an explicit byte sequence.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from model_store.errors import CorruptArtifact
from model_store.protocol.cache import EntityCache
from model_store.protocol.types import NLUModel

# Fields never persisted: regenerable or session-bound.
_TRANSIENT_FIELDS: dict[str, Any] = {
    "data": {
        "output": {"intents": True, "list_entities": {"__all__": {"cache"}}},
        "input": {"training_session"},
    }
}


def _dump_cache(cache: Any) -> list[Any]:
    if cache is None:
        return []
    if isinstance(cache, list):
        return list(cache)
    if not isinstance(cache, EntityCache):
        raise TypeError(f"Entity cache {type(cache).__name__} does not implement dump()")
    return list(cache.dump())


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"type": "Buffer", "data": list(bytes(value))}
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def model_to_document(model: NLUModel) -> dict[str, Any]:
    """Build the persistable structure for *model* without touching it."""
    document = model.model_dump(exclude=_TRANSIENT_FIELDS)
    entities = document["data"]["output"]["list_entities"]
    for source, target in zip(model.data.output.list_entities, entities):
        target["cache"] = _dump_cache(source.cache)
    return document


def serialize_model(model: NLUModel) -> bytes:
    """Encode *model* as UTF-8 JSON bytes."""
    document = model_to_document(model)
    return json.dumps(document, default=_json_default, separators=(",", ":")).encode("utf-8")


def deserialize_model(data: bytes) -> NLUModel:
    """Decode bytes produced by :func:`serialize_model`.

    Entity caches come back as their dumped record lists; rebuilding live
    caches is left to the consumer (see ``hydrate_entity_caches``).

    Raises:
        CorruptArtifact: If the payload is not valid JSON or misses required fields.
    """
    try:
        document = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise CorruptArtifact(f"Model payload is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise CorruptArtifact(
            f"Model payload must be a JSON object, got {type(document).__name__}"
        )

    try:
        return NLUModel.model_validate(document)
    except (ValidationError, RecursionError) as e:
        raise CorruptArtifact(f"Model payload failed validation: {e}") from e


__all__ = ["deserialize_model", "model_to_document", "serialize_model"]
