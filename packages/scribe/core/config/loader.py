"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from scribe.core.config.models import AppConfig
from scribe.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

# Default app config path (can be overridden)
_DEFAULT_APP_CONFIG_PATH = Path("config.json")

ENV_STORAGE_ROOT = "SCRIBE_STORAGE_ROOT"
ENV_REDIS_URL = "SCRIBE_REDIS_URL"
ENV_LOG_LEVEL = "SCRIBE_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                # safe_load returns None for empty files
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file at the default location yields defaults; an explicitly
    requested file must exist. Environment overrides are applied last.

    Args:
        path: Path to app config file (.json, .yaml, or .yml).
              Defaults to config.json

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValidationError: If config is invalid
    """
    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH
        if not Path(path).exists():
            logger.debug(f"No config at {path}, using defaults")
            config = AppConfig()
        else:
            config = AppConfig.model_validate(load_config(path))
    else:
        config = AppConfig.model_validate(load_config(path))

    _load_env_vars_into_config(config)
    return config


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        structured=config.logging.structured,
    )


def _load_env_vars_into_config(config: AppConfig) -> None:
    """Apply SCRIBE_* environment overrides.

    This mutates the config object in place.
    """
    storage_root = os.getenv(ENV_STORAGE_ROOT)
    if storage_root:
        logger.debug(f"Loaded {ENV_STORAGE_ROOT} from environment")
        config.storage = config.storage.model_copy(update={"root_dir": storage_root})

    redis_url = os.getenv(ENV_REDIS_URL)
    if redis_url:
        logger.debug(f"Loaded {ENV_REDIS_URL} from environment")
        config.response_cache = config.response_cache.model_copy(update={"redis_url": redis_url})

    log_level = os.getenv(ENV_LOG_LEVEL)
    if log_level:
        level = log_level.strip().upper()
        if level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            config.logging = config.logging.model_copy(update={"level": level})
        else:
            logger.warning(f"Ignoring invalid {ENV_LOG_LEVEL}={log_level!r}")
