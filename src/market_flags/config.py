"""Service configuration.

Values come from an optional YAML file (path in ``MARKET_FLAGS_CONFIG``)
with environment variables layered on top. The result is validated once at
startup and passed explicitly to the components that need it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError, ConfigErrorCodes

CONFIG_PATH_ENV = "MARKET_FLAGS_CONFIG"

# env var -> dotted config path
ENV_KEYS: dict[str, str] = {
    "ACCESS_CONTROL_ALLOW_ORIGIN": "access_control_allow_origin",
    "BUCKET_NAME": "storage.bucket_name",
    "DATA_FILENAME": "storage.data_filename",
    "STORAGE_BASE_URL": "storage.base_url",
    "FETCH_TIMEOUT_SECONDS": "storage.timeout_seconds",
    "HOST": "server.host",
    "PORT": "server.port",
    "LOG_LEVEL": "log.level",
    "LOG_FORMAT": "log.format",
}


class StorageSection(BaseModel):
    """Location of the flag dataset."""

    bucket_name: str = Field(min_length=1)
    data_filename: str = Field(min_length=1)
    base_url: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)


class ServerSection(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class LogSection(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


class ServiceConfig(BaseModel):
    """Full service configuration."""

    access_control_allow_origin: str
    storage: StorageSection
    server: ServerSection = Field(default_factory=ServerSection)
    log: LogSection = Field(default_factory=LogSection)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``override`` merged into ``base``.

    Nested dicts merge recursively; any other value in ``override`` replaces.
    """
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ConfigErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Config file must contain a mapping: {path}",
        )
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for env_key, key_path in ENV_KEYS.items():
        if env_key not in environ:
            continue
        parts = key_path.split(".")
        node = overrides
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = environ[env_key]
    return overrides


def load_config(
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> ServiceConfig:
    """Build a ServiceConfig from a YAML file and environment variables.

    environ: variables to read, defaults to ``os.environ``.
    config_path: YAML file; defaults to ``$MARKET_FLAGS_CONFIG`` when set.

    Raises:
        ConfigError: the file cannot be read or parsed, or a required value
            is missing or invalid.
    """
    if environ is None:
        environ = os.environ
    if config_path is None and environ.get(CONFIG_PATH_ENV):
        config_path = Path(environ[CONFIG_PATH_ENV])

    data: dict[str, Any] = {}
    if config_path is not None:
        data = _read_yaml(config_path)
    data = deep_merge(data, _env_overrides(environ))

    try:
        return ServiceConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
