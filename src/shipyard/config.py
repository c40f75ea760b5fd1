"""Centralized configuration: Pydantic BaseSettings with dotenv support.

Environment variables use the ``SHIPYARD_`` prefix and ``__`` as the
nested delimiter (e.g. ``SHIPYARD_ENGINE__SOCKET_PATH``).

Priority (highest wins): init args > env vars > .env

Usage::

    from shipyard.config import get_settings

    s = get_settings()
    print(s.engine.socket_path)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class _StrictModel(BaseModel):
    """Base for all config sub-models; reject unknown keys so typos fail loudly."""

    model_config = {"extra": "forbid"}


class EngineConfig(_StrictModel):
    socket_path: str = "/var/run/docker.sock"
    base_url: str | None = None  # e.g. "http://127.0.0.1:2375"; overrides socket_path
    api_version: str = "v1.43"
    # Attach and wait requests live as long as the container does
    timeout_s: float | None = None

    @field_validator("api_version")
    @classmethod
    def normalize_api_version(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith("v"):
            v = f"v{v}"
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v


class LoggingConfig(_StrictModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHIPYARD_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    engine: EngineConfig = EngineConfig()
    logging: LoggingConfig = LoggingConfig()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
