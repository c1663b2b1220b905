"""
Protocol types for the model store.

Pydantic models describing a trained NLU model as it is handed to the store.
Every model allows extra fields so anything the training pipeline attaches
passes through persistence unchanged.
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_binary(value: Any) -> Any:
    """Rebuild a binary value from any of its portable encodings.

    Accepts raw bytes, the ``{"type": "Buffer", "data": [...]}`` object form,
    a plain list of byte values, or a base64 string. Anything else is returned
    untouched for pydantic to reject.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, dict) and value.get("type") == "Buffer":
        value = value.get("data")
    if isinstance(value, list):
        try:
            return bytes(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid byte sequence: {e}") from None
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from None
    return value


class ListEntity(BaseModel):
    """A list entity definition with its optional value cache."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Entity name.")
    cache: Any | None = Field(
        default=None,
        description=(
            "Live EntityCache before persistence; the dumped record list once "
            "read back from storage."
        ),
    )


class ModelOutput(BaseModel):
    """Training output: entities, slot tagger and derived intent data."""

    model_config = ConfigDict(extra="allow")

    list_entities: list[ListEntity] = Field(default_factory=list)
    slots_model: bytes = Field(..., description="Serialized slot tagger (binary).")
    intents: list[Any] | None = Field(
        default=None,
        description="Derived intent data. Regenerable, never persisted.",
    )

    @field_validator("slots_model", mode="before")
    @classmethod
    def _decode_slots_model(cls, value: Any) -> Any:
        return coerce_binary(value)


class ModelInput(BaseModel):
    """Training input. Only the session state is known to the store."""

    model_config = ConfigDict(extra="allow")

    training_session: Any | None = Field(
        default=None,
        description="Transient training session state, never persisted.",
    )


class ModelData(BaseModel):
    """Input/output pair of a training run."""

    model_config = ConfigDict(extra="allow")

    input: ModelInput = Field(default_factory=ModelInput)
    output: ModelOutput


class NLUModel(BaseModel):
    """A trained model for a single language."""

    model_config = ConfigDict(extra="allow")

    language_code: str = Field(..., min_length=1, description="Language the model targets.")
    hash: str | None = Field(default=None, description="Training input hash, if known.")
    started_at: datetime | None = None
    finished_at: datetime | None = None
    data: ModelData
