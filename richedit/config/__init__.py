"""Configuration module for Richedit."""

from richedit.config.settings import (
    CustomClass,
    EditorConfig,
    ImageConfig,
    RicheditSettings,
    get_settings,
    reload_settings,
)

__all__ = [
    "CustomClass",
    "EditorConfig",
    "ImageConfig",
    "RicheditSettings",
    "get_settings",
    "reload_settings",
]
