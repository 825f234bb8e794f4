"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
StorageBackend = Literal["memory", "diskcache", "redis"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class StorageConfig(BaseModel):
    """Clip record storage (YAML section: storage.*)."""

    backend: StorageBackend = Field(
        default="diskcache",
        description="'memory' (process-local), 'diskcache' (SQLite) or 'redis'.",
    )
    directory: Path = Field(
        default=Path("./.data/careerclips"),
        validation_alias=AliasChoices("directory", "dir"),
        description="Diskcache SQLite directory.",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (only when backend=redis).",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel storage ops (semaphore limit).",
    )
    namespace: str = Field(
        default="careerclips",
        description="Key prefix shared by all records of this deployment.",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("max_concurrent")
    @classmethod
    def _validate_max_concurrent(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_concurrent must be > 0")
        return v


class ValidationConfig(BaseModel):
    """Link validation and revalidation tuning (YAML section: validation.*)."""

    max_redirects: int = Field(
        default=5,
        description="Max redirect hops followed before a probe fails.",
    )
    revalidation_window_days: float = Field(
        default=7.0,
        description="Age after which a verified clip is re-checked.",
    )
    background_revalidation: bool = Field(
        default=True,
        description="Revalidate stale clips in the background on read.",
    )
    revalidation_max_concurrent: int = Field(
        default=2,
        description="Max parallel background revalidations.",
    )

    @field_validator("max_redirects", "revalidation_max_concurrent")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    @field_validator("revalidation_window_days")
    @classmethod
    def _validate_window(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("revalidation_window_days must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/validation/logging/storage).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="careerclips", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP probing (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request probe timeout in seconds (each redirect hop).",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; CareerClips/1.0; +https://github.com/careerclips)",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent identifying probe traffic to remote operators.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    seed_on_startup: bool = Field(
        default=False,
        description="Seed default clips at startup when the store is empty.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "validation": self.validation.model_dump(),
            "storage": {
                "backend": self.storage.backend,
                "dir": str(self.storage.directory),
                "redis_url": self.storage.redis_url,
                "namespace": self.storage.namespace,
                "max_concurrent": self.storage.max_concurrent,
            },
            "seed_on_startup": self.seed_on_startup,
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read CAREERCLIPS_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - CAREERCLIPS_HTTP_TIMEOUT_SECONDS
    - CAREERCLIPS_STORAGE_BACKEND
    - CAREERCLIPS_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="CAREERCLIPS_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    storage_backend: Optional[StorageBackend] = None
    storage_dir: Optional[Path] = None
    storage_redis_url: Optional[str] = None
    storage_namespace: Optional[str] = None

    max_redirects: Optional[int] = None
    revalidation_window_days: Optional[float] = None
    background_revalidation: Optional[bool] = None
    revalidation_max_concurrent: Optional[int] = None

    seed_on_startup: Optional[bool] = None

    @field_validator("storage_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
