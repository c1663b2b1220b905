"""
Store configuration.

Settings can be passed directly or loaded from environment variables.

Environment Variables:
    MODEL_STORE_DIR: Logical directory holding model archives (default: ./models)
    MODEL_STORE_MAX_MODELS: Number of models retained per language (default: 2)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

MODELS_DIR = "./models"
MAX_MODELS_TO_KEEP = 2
ARCHIVE_ENTRY_NAME = "model"
MODEL_FILE_SUFFIX = "model"

# Environment variable names
ENV_MODELS_DIR = "MODEL_STORE_DIR"
ENV_MAX_MODELS = "MODEL_STORE_MAX_MODELS"


class StoreConfig(BaseModel):
    """Configuration for a ModelStore."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    models_dir: str = Field(
        default=MODELS_DIR,
        description="Directory (relative to the backend root) holding model archives",
    )
    max_models_to_keep: int = Field(
        default=MAX_MODELS_TO_KEEP,
        ge=1,
        description="Models retained per language after each save",
    )
    entry_name: str = Field(
        default=ARCHIVE_ENTRY_NAME,
        min_length=1,
        description="Name of the single entry inside each archive",
    )
    file_suffix: str = Field(
        default=MODEL_FILE_SUFFIX,
        min_length=1,
        description="Extension of model archive names",
    )

    @field_validator("entry_name", "file_suffix")
    @classmethod
    def _no_separators(cls, value: str) -> str:
        if "/" in value or "\\" in value or "." in value:
            raise ValueError(f"'{value}' must not contain '.' or path separators")
        return value

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Build a config from environment variables, falling back to defaults."""
        overrides: dict[str, object] = {}

        models_dir = os.environ.get(ENV_MODELS_DIR)
        if models_dir and models_dir.strip():
            overrides["models_dir"] = models_dir.strip()

        max_models = os.environ.get(ENV_MAX_MODELS)
        if max_models and max_models.strip():
            try:
                overrides["max_models_to_keep"] = int(max_models)
            except ValueError:
                raise ValueError(
                    f"{ENV_MAX_MODELS} must be an integer, got {max_models!r}"
                ) from None

        return cls(**overrides)


# Module-level default config singleton
_default_config: StoreConfig | None = None


def get_config() -> StoreConfig:
    """Get or create the process-wide config, loaded from the environment."""
    global _default_config
    if _default_config is None:
        _default_config = StoreConfig.from_env()
    return _default_config


def reset_config() -> None:
    """Reset the process-wide config (for testing)."""
    global _default_config
    _default_config = None
