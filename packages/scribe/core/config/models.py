"""Configuration models for Scribe."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field


class ConfigBase(BaseModel):
    """Base class for all Scribe configurations.

    Provides common functionality for loading from files with defaults.
    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path or use default path.

        Args:
            path: Path to config file, or None to use default

        Returns:
            Loaded config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        # AppConfig applies environment overrides and tolerates a missing default file
        if cls.__name__ == "AppConfig":
            from scribe.core.config.loader import load_app_config

            return load_app_config(path)  # type: ignore[return-value]

        from scribe.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class BlogSettings(BaseModel):
    """Blog-level presentation and comment settings."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="Scribe", description="Blog name")
    owner: str = Field(default="The Owner", description="Blog owner shown as post author")
    posts_per_page: int = Field(default=2, gt=0, description="Posts per listing page")
    comments_close_after_days: int = Field(
        default=7, ge=0, description="Days after publication during which comments are accepted"
    )


class StorageSettings(BaseModel):
    """Where post records, snapshots and uploaded files live."""

    model_config = ConfigDict(extra="ignore")

    backend: Literal["filesystem", "memory"] = Field(
        default="filesystem", description="Object store backend"
    )
    root_dir: str = Field(
        default="data", description="Root directory for the filesystem backend (env: SCRIBE_STORAGE_ROOT)"
    )
    posts_container: str = Field(default="posts", description="Container for post records")
    files_container: str = Field(default="files", description="Container for uploaded files")
    base_url: str | None = Field(
        default=None, description="Public URL prefix for uploaded files (file:// URIs if unset)"
    )
    list_page_size: int = Field(
        default=20, gt=0, description="Keys fetched per listing round while rebuilding"
    )
    rebuild_on_startup: bool = Field(
        default=False, description="Ignore the summary snapshot and rescan records on startup"
    )


class ResponseCacheSettings(BaseModel):
    """Distributed response cache settings."""

    model_config = ConfigDict(extra="ignore")

    backend: Literal["null", "memory", "redis"] = Field(
        default="null", description="Response cache backend"
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0", description="Redis URL (env: SCRIBE_REDIS_URL)"
    )
    instance_name: str = Field(default="", description="Key prefix shared by this deployment")
    ttl_seconds: int | None = Field(
        default=None, gt=0, description="Entry lifetime (None = no expiry)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log lines")


class AppConfig(ConfigBase):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")
    blog: BlogSettings = BlogSettings()
    storage: StorageSettings = StorageSettings()
    response_cache: ResponseCacheSettings = ResponseCacheSettings()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("config.json")
