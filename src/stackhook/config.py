"""
Configuration management.

Uses Pydantic Settings for environment variable handling and validation.
A ``stackhook.yaml`` file, when present, provides defaults that
environment variables override.
"""

import json
import os
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

# Client libraries that log from inside a delivery; they must never reach the hook.
DEFAULT_EXCLUDED_LOGGERS = [
    "google.cloud",
    "google.auth",
    "google_auth_httplib2",
    "google.api_core.bidi",
    "urllib3",
    "stackhook",
]


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        config_path = os.environ.get("STACKHOOK_CONFIG_FILE")

    if config_path is None:
        possible_paths = [
            "stackhook.yaml",
            "config/stackhook.yaml",
        ]

        for path in possible_paths:
            if os.path.exists(path):
                config_path = path
                break
        else:
            return {}

    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}
    return {}


def _split_names(v: Any) -> Any:
    """Accept a JSON list or a comma-separated string for list-of-names fields."""
    if isinstance(v, str):
        try:
            parsed = json.loads(v)
        except json.JSONDecodeError:
            return [name.strip() for name in v.split(",") if name.strip()]
        if isinstance(parsed, list):
            return parsed
        return [str(parsed)]
    return v


class LoggingSettings(BaseSettings):
    """Local logging setup applied by ``bootstrap.install``."""

    level: str = Field(default="INFO", description="Root logger level")
    attach_root: bool = Field(default=True, description="Attach the hook to the root logger")
    excluded_loggers: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_LOGGERS),
        description="Loggers kept away from the hook",
    )

    @field_validator("excluded_loggers", mode="before")
    def parse_excluded_loggers(cls, v: Any) -> Any:
        return _split_names(v)

    @field_validator("level")
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    class Config:
        env_prefix = "STACKHOOK_LOGGING_"


class HookSettings(BaseSettings):
    """Main hook settings."""

    project: Optional[str] = Field(default=None, description="GCP project id")
    log_name: str = Field(default="stackhook", description="Destination log name")
    labels: Annotated[List[str], NoDecode] = Field(default_factory=list, description="Field names promoted to labels")
    synchronous: bool = Field(default=False, description="Write each entry synchronously")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("labels", mode="before")
    def parse_labels(cls, v: Any) -> Any:
        """Parse labels from a JSON or comma-separated string if needed."""
        return _split_names(v)

    class Config:
        env_prefix = "STACKHOOK_"
        case_sensitive = False


@lru_cache()
def get_settings() -> HookSettings:
    """Get cached settings instance with config file and env support."""
    config_data = load_config_file()

    # Config file provides defaults, env vars override
    if config_data:
        _set_env_from_config(config_data)

    return HookSettings()


def _set_env_from_config(config_data: Dict[str, Any]) -> None:
    """Set environment variables from config file if not already set."""
    mappings = {
        ("hook", "project"): "STACKHOOK_PROJECT",
        ("hook", "log_name"): "STACKHOOK_LOG_NAME",
        ("hook", "synchronous"): "STACKHOOK_SYNCHRONOUS",
        ("logging", "level"): "STACKHOOK_LOGGING_LEVEL",
        ("logging", "attach_root"): "STACKHOOK_LOGGING_ATTACH_ROOT",
    }

    for (section, key), env_var in mappings.items():
        if env_var not in os.environ:
            value = (config_data.get(section) or {}).get(key)
            if value is not None:
                os.environ[env_var] = str(value)

    # Lists travel as JSON strings
    list_mappings = {
        ("hook", "labels"): "STACKHOOK_LABELS",
        ("logging", "excluded_loggers"): "STACKHOOK_LOGGING_EXCLUDED_LOGGERS",
    }

    for (section, key), env_var in list_mappings.items():
        if env_var not in os.environ:
            value = (config_data.get(section) or {}).get(key)
            if value:
                os.environ[env_var] = json.dumps(value)


def reload_settings() -> HookSettings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
