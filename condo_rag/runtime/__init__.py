"""Runtime configuration."""

from .config_loader import (
    ConfigLoader,
    ConfigValidationError,
    EmbeddingConfig,
    RagSettings,
    StoreConfig,
    load_settings,
)

__all__ = [
    "ConfigLoader",
    "ConfigValidationError",
    "EmbeddingConfig",
    "RagSettings",
    "StoreConfig",
    "load_settings",
]
