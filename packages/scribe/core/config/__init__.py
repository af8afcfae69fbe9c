"""Configuration management for Scribe."""

from scribe.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from scribe.core.config.models import (
    AppConfig,
    BlogSettings,
    ConfigBase,
    LoggingConfig,
    ResponseCacheSettings,
    StorageSettings,
)

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "load_app_config",
    "configure_logging",
    # Models
    "AppConfig",
    "BlogSettings",
    "ConfigBase",
    "LoggingConfig",
    "ResponseCacheSettings",
    "StorageSettings",
]
