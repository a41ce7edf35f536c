"""Configuration loader for the grnkdb catalog builder (Pydantic edition)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Iterable, Literal, Sequence

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

LOGGER = logging.getLogger(__name__)
DEFAULT_KNOWN_SOURCES: tuple[str, ...] = ("twitch", "youtube")
DEFAULT_CHANNEL_IDS: tuple[str, ...] = ("UCYJ61XIK64sp6ZFFS8sctxw",)


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded safely."""


class AppConfig(BaseSettings):
    """Strongly typed runtime configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        validate_default=True,
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias=AliasChoices("GRNKDB_ENVIRONMENT", "GRNKDB_ENV"),
    )
    log_path: Path = Field(
        default=Path("logs/grnkdb.log"),
        validation_alias=AliasChoices("GRNKDB_LOG_PATH", "LOG_PATH"),
    )

    # Filesystem layout
    data_dir: Path = Field(default=Path("data"), validation_alias="GRNKDB_DATA_DIR")
    catalog_path: Path = Field(default=Path("public/data.json"), validation_alias="GRNKDB_CATALOG_PATH")
    catalog_csv_path: Path = Field(default=Path("public/data.csv"), validation_alias="GRNKDB_CATALOG_CSV_PATH")

    # YouTube
    youtube_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GRNKDB_YOUTUBE_API_KEY", "YOUTUBE_API_KEY"),
    )
    youtube_channel_ids: Annotated[tuple[str, ...], NoDecode] = Field(
        DEFAULT_CHANNEL_IDS,
        validation_alias=AliasChoices("GRNKDB_YOUTUBE_CHANNEL_IDS", "YOUTUBE_CHANNEL_IDS"),
    )
    youtube_page_results: int = Field(50, ge=1, le=50, validation_alias="GRNKDB_YOUTUBE_PAGE_RESULTS")
    youtube_page_limit: int = Field(0, ge=0, validation_alias="GRNKDB_YOUTUBE_PAGE_LIMIT")

    # Conversion
    window_size: int = Field(100, validation_alias="GRNKDB_WINDOW_SIZE")
    window_step: int | None = Field(None, validation_alias="GRNKDB_WINDOW_STEP")
    known_sources: Annotated[tuple[str, ...], NoDecode] = Field(
        DEFAULT_KNOWN_SOURCES, validation_alias="GRNKDB_KNOWN_SOURCES"
    )

    # Steam store lookups
    steam_base_url: str = Field("https://store.steampowered.com/api/", validation_alias="GRNKDB_STEAM_BASE_URL")
    steam_retry_attempts: int = Field(5, ge=1, validation_alias="GRNKDB_STEAM_RETRY_ATTEMPTS")
    steam_retry_delay_seconds: float = Field(5.0, ge=0, validation_alias="GRNKDB_STEAM_RETRY_DELAY")
    steam_timeout_seconds: float = Field(20.0, gt=0, validation_alias="GRNKDB_STEAM_TIMEOUT")

    @field_validator("log_path", "data_dir", "catalog_path", "catalog_csv_path", mode="after")
    @classmethod
    def _expand_path(cls, value: Path) -> Path:
        expanded = value.expanduser()
        return expanded if expanded.is_absolute() else (Path.cwd() / expanded).resolve()

    @field_validator("youtube_channel_ids", "known_sources", mode="before")
    @classmethod
    def _split_list(cls, value: str | Sequence[str] | None) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            tokens = [part.strip() for part in value.replace("\n", ",").split(",") if part.strip()]
            return tuple(tokens)
        return tuple(value)

    @model_validator(mode="after")
    def _validate_window(self) -> "AppConfig":
        if self.window_size < 1:
            raise ConfigError(f"window_size must be positive, got {self.window_size}")
        if self.window_step is not None and not 1 <= self.window_step <= self.window_size:
            raise ConfigError(f"window_step must be between 1 and window_size, got {self.window_step}")
        if not self.known_sources:
            raise ConfigError("known_sources cannot be empty")
        return self

    def ensure_runtime_directories(self) -> None:
        """Create directories required for runtime operation."""
        _ensure_directories(
            (
                self.data_dir,
                self.catalog_path.parent,
                self.catalog_csv_path.parent,
                self.log_path.parent,
            )
        )

    @property
    def youtube_api_key_value(self) -> str | None:
        """Return the plaintext YouTube key stripped of whitespace."""
        if self.youtube_api_key is None:
            return None
        return self.youtube_api_key.get_secret_value().strip() or None


def _ensure_directories(paths: Iterable[Path]) -> None:
    for directory in paths:
        directory.mkdir(parents=True, exist_ok=True)


def load_config(env_path: Path | None = None, **overrides) -> AppConfig:
    """Load configuration from .env/environment with validation."""
    load_kwargs: dict[str, object] = dict(overrides)
    if env_path is not None:
        load_dotenv(env_path, override=False)
        load_kwargs["_env_file"] = str(env_path)
    else:
        load_dotenv(override=False)
    try:
        config = AppConfig(**load_kwargs)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    config.ensure_runtime_directories()

    LOGGER.info(
        "AppConfig loaded",
        extra={
            "event": "config.loaded",
            "environment": config.environment,
            "paths": {
                "data": str(config.data_dir),
                "catalog": str(config.catalog_path),
                "log": str(config.log_path),
            },
        },
    )
    return config
