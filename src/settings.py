"""
Central application configuration.

Two sources feed the server:
- config.yml (server address and database credentials), loaded with PyYAML
  and validated with pydantic; these values become command-line defaults
- environment variables via pydantic-settings (CORS origin, log level)

Database engine tuning lives in `data.config.DatabaseSettings`.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """config.yml is missing, unreadable or malformed."""


class ServerSection(BaseModel):
    # YAML scalars such as `host: 8001` arrive as numbers
    model_config = ConfigDict(coerce_numbers_to_str=True)

    host: str = ""


class DatabaseSection(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    user: str = ""
    password: str = Field(default="", alias="pass")
    database: str = ""
    host: str = ""


class FileConfig(BaseModel):
    """Contents of config.yml."""

    server: ServerSection = Field(default_factory=ServerSection)
    database: DatabaseSection = Field(default_factory=DatabaseSection)


def load_config_file(path: str | Path = "config.yml") -> FileConfig:
    """
    Read and validate the YAML configuration file.

    Raises:
        ConfigError: If the file cannot be read or is not valid YAML
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    try:
        return FileConfig.model_validate(raw)
    except ValueError as e:
        raise ConfigError(f"{path}: {e}") from e


class ServerSettings(BaseSettings):
    """
    Runtime options for the HTTP server.

    Environment variables:
        CORS_ORIGIN - The single origin allowed in production (default: https://pokerogue.net)
        LOG_LEVEL   - Root log level when not in debug mode (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    cors_origin: str = Field(
        default="https://pokerogue.net",
        description="Origin permitted by the production CORS policy.",
    )
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return value


@lru_cache
def get_server_settings() -> ServerSettings:
    """Return cached server settings instance."""
    return ServerSettings()
