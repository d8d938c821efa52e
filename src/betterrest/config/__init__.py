"""Configuration management."""

from betterrest.config.settings import (
    DefaultsConfig,
    InputLimits,
    ModelConfig,
    Settings,
    bundled_model_path,
    get_settings,
    reload_settings,
)

__all__ = [
    "DefaultsConfig",
    "InputLimits",
    "ModelConfig",
    "Settings",
    "bundled_model_path",
    "get_settings",
    "reload_settings",
]
