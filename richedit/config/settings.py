"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from richedit.config.constants import (
    BLOCK_TAGS,
    CONFIG_LOCATIONS,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_PARAGRAPH_SEPARATOR,
)


class ImageConfig(BaseModel):
    """Image normalization configuration."""

    max_width: int = Field(default=DEFAULT_MAX_WIDTH, ge=1)
    max_height: int = Field(default=DEFAULT_MAX_HEIGHT, ge=1)
    jpeg_quality: int = Field(default=DEFAULT_JPEG_QUALITY, ge=0, le=100)


class CustomClass(BaseModel):
    """A CSS class the toolbar can apply to the selected text."""

    name: str
    class_name: str
    tag: str | None = None  # None wraps in a span


class EditorConfig(BaseModel):
    """Editing surface configuration."""

    default_paragraph_separator: Literal["p", "div"] = DEFAULT_PARAGRAPH_SEPARATOR
    block_tags: list[str] = Field(default_factory=lambda: list(BLOCK_TAGS))
    custom_classes: list[CustomClass] = Field(default_factory=list)


class RicheditSettings(BaseSettings):
    """Main configuration class for Richedit."""

    model_config = SettingsConfigDict(
        env_prefix="RICHEDIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            # Later files win, so the working-directory file overrides the user one
            YamlConfigSettingsSource(settings_cls, yaml_file=list(reversed(CONFIG_LOCATIONS))),
            file_secret_settings,
        )

    # Sub-configurations
    image: ImageConfig = Field(default_factory=ImageConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR


@lru_cache
def get_settings() -> RicheditSettings:
    """Get cached settings instance."""
    return RicheditSettings()


def reload_settings() -> RicheditSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
