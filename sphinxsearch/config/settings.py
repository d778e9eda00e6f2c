"""
Settings - Search daemon configuration using Pydantic Settings.

Loads from environment variables, .env files, or a plain key-value mapping
using the property names ``sphinxHost``, ``sphinxPort``, ``sphinxIndexCommand``
and ``sphinxConfigFile``.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .errors import ConfigurationError

REQUIRED_KEYS = ("sphinxIndexCommand", "sphinxConfigFile")


class Settings(BaseSettings):
    """Application settings."""

    # searchd connection
    sphinx_host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("sphinxHost", "sphinx_host"),
    )
    sphinx_port: int = Field(
        default=9313,
        gt=0,
        validation_alias=AliasChoices("sphinxPort", "sphinx_port"),
    )
    sphinx_timeout: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("sphinxTimeout", "sphinx_timeout"),
    )

    # Indexing
    sphinx_index_command: str = Field(
        validation_alias=AliasChoices("sphinxIndexCommand", "sphinx_index_command"),
    )
    sphinx_config_file: str = Field(
        validation_alias=AliasChoices("sphinxConfigFile", "sphinx_config_file"),
    )
    sphinx_delta_index: str = Field(
        default="delta",
        validation_alias=AliasChoices("sphinxDeltaIndex", "sphinx_delta_index"),
    )

    # Search
    search_page_size: int = Field(
        default=100,
        gt=0,
        validation_alias=AliasChoices("sphinxPageSize", "sphinx_page_size"),
    )
    verbose: bool = Field(
        default=False,
        validation_alias=AliasChoices("sphinxVerbose", "sphinx_verbose"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )


class PropertySettings(Settings):
    """Settings read from an explicit property set only."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)


def load_settings(properties: Mapping[str, Any] | None = None) -> Settings:
    """
    Build settings, failing fast on missing required keys.

    Args:
        properties: Key-value property set, used on its own. When omitted,
            values come from the environment and ``.env``.

    Returns:
        Validated, immutable settings

    Raises:
        ConfigurationError: If ``sphinxIndexCommand`` or ``sphinxConfigFile``
            is absent, or any value fails validation
    """
    try:
        if properties is None:
            return Settings()
        return PropertySettings(**dict(properties))
    except ValidationError as e:
        missing = [
            str(err["loc"][0])
            for err in e.errors()
            if err["type"] == "missing" and err["loc"]
        ]
        if missing:
            raise ConfigurationError(
                f"One of {', '.join(repr(k) for k in REQUIRED_KEYS)} not set, cannot continue",
                details={"missing": missing},
            ) from e
        raise ConfigurationError(
            f"Invalid search configuration: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
