"""Configuration module for the model store."""

from model_store.config.settings import (
    ARCHIVE_ENTRY_NAME,
    MAX_MODELS_TO_KEEP,
    MODELS_DIR,
    StoreConfig,
    get_config,
    reset_config,
)

__all__ = [
    "ARCHIVE_ENTRY_NAME",
    "MAX_MODELS_TO_KEEP",
    "MODELS_DIR",
    "StoreConfig",
    "get_config",
    "reset_config",
]
