"""Configuration loader -- reads config.yaml + .env, validates with Pydantic.

Resolves ${ENV_VAR} references in YAML values from environment variables.
Fails fast with a ConfigurationError if required config is missing.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.duration import parse_duration
from core.errors import ConfigurationError
from core.models.events import BUILTIN_PROPS, SYSTEM_PROPS

logger = logging.getLogger(__name__)

# Default home directory for config.yaml and .env
DEFAULT_HOME = Path.home() / ".component-metrics"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: Any) -> Any:
    """Recursively resolve ${ENV_VAR} references in config values."""
    if isinstance(value, str):
        def replacer(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                logger.warning("Environment variable %s not set", var_name)
                return match.group(0)  # leave unresolved
            return env_value
        return _ENV_VAR_RE.sub(replacer, value)
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Config models (Pydantic)
# ---------------------------------------------------------------------------

class MetricsConfig(BaseModel):
    """Tracker configuration. `valid_props` is required."""

    # Additional properties callers may attach to events
    valid_props: list[str]
    flush_interval: str = "10s"

    @field_validator("valid_props")
    @classmethod
    def _check_valid_props(cls, value: list[str]) -> list[str]:
        reserved = sorted(set(value) & SYSTEM_PROPS)
        if reserved:
            raise ValueError(f"valid_props may not include system fields: {reserved}")
        return value

    @field_validator("flush_interval")
    @classmethod
    def _check_flush_interval(cls, value: str) -> str:
        if parse_duration(value) <= timedelta(0):
            raise ValueError("flush_interval must be positive")
        return value

    @property
    def flush_interval_seconds(self) -> float:
        return parse_duration(self.flush_interval).total_seconds()

    @property
    def allowed_props(self) -> frozenset[str]:
        """Every key an event may carry: built-ins plus `valid_props`."""
        return BUILTIN_PROPS | frozenset(self.valid_props)


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    metrics: MetricsConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def build_metrics_config(config: MetricsConfig | dict | None) -> MetricsConfig:
    """Validate a tracker config given as a model or a plain mapping."""
    if isinstance(config, MetricsConfig):
        return config
    if config is None:
        raise ConfigurationError("Config missing required property valid_props")
    try:
        return MetricsConfig(**config)
    except PydanticValidationError as exc:
        raise ConfigurationError(_describe(exc)) from exc
    except TypeError as exc:
        raise ConfigurationError(f"Config must be a mapping, got {type(config).__name__}") from exc


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if error["type"] == "missing":
            parts.append(f"Config missing required property {location}")
        else:
            parts.append(f"Invalid config property {location}: {error['msg']}")
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_config(
    config_path: str | Path | None = None,
    env_path: str | Path | None = None,
) -> AppConfig:
    """Load configuration from YAML + .env files.

    1. Load .env into environment variables
    2. Load config.yaml and resolve ${ENV_VAR} references
    3. Validate against Pydantic models
    """
    home = Path(os.environ.get("COMPONENT_METRICS_HOME", str(DEFAULT_HOME))).expanduser()

    if env_path is None:
        env_path = home / ".env"
    if config_path is None:
        config_path = home / "config.yaml"

    env_path = Path(env_path)
    config_path = Path(config_path)

    # Load .env
    if env_path.exists():
        load_dotenv(env_path)
        logger.info("Loaded environment from %s", env_path)
    else:
        logger.debug("No .env file at %s", env_path)

    # Load config.yaml
    raw_config: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}
        logger.info("Loaded config from %s", config_path)
    else:
        logger.warning("No config file at %s", config_path)

    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")

    resolved = _resolve_env_vars(raw_config)

    try:
        return AppConfig(**resolved)
    except PydanticValidationError as exc:
        raise ConfigurationError(_describe(exc)) from exc
