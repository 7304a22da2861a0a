"""
Configuration management for rancli.

Configuration is loaded from:
1. Environment variables (highest priority)
2. rancli.yaml file
3. Default values (lowest priority)
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rancli.exceptions import ConfigurationError

CONFIG_PATHS = [
    Path("rancli.yaml"),
    Path("config/rancli.yaml"),
    Path.home() / ".config" / "rancli" / "config.yaml",
]


class ServerSettings(BaseModel):
    """Connection settings for the RAN simulator and topology services."""

    url: str = "http://localhost:5150"
    token: str | None = None
    timeout: float = 30.0
    max_retries: int = Field(default=3, ge=0)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    json_format: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """Main settings class that combines all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="RANCLI_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def default_config_path() -> Path:
    """Return the file `config set` writes to when no config file exists yet."""
    return CONFIG_PATHS[0]


def find_config_path() -> Path | None:
    """Return the first existing config file, if any."""
    for candidate in CONFIG_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_yaml_config(path: Path | None = None) -> dict:
    """Load configuration from YAML file."""
    if path is None:
        path = find_config_path()

    if path and path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError("Invalid YAML in config file", path=str(path)) from e
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping", path=str(path))
        return data

    return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    yaml_config = load_yaml_config()

    # Init kwargs outrank env in pydantic-settings, so env is layered back on top.
    env_settings = Settings()
    merged = _deep_merge(yaml_config, env_settings.model_dump(exclude_unset=True))
    return Settings(**merged)


def reload_settings() -> Settings:
    """Force reload of settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()


def _deep_merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
