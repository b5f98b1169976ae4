"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values come from the process environment first, then from `.env`.
    The database URL is deliberately optional here: its absence is reported
    when the connection pool is created at startup, not at import time.
    """

    # ========== Application ==========
    app_name: str = Field(default="client-registry", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode (echoes SQL)")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8080, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy async URL, e.g. sqlite+aiosqlite:///clients.db"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=0, description="Max overflow connections", ge=0)
    db_pool_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for a free pooled connection",
        gt=0
    )
    db_query_timeout: float = Field(
        default=10.0,
        description="Seconds a single statement may run",
        gt=0
    )

    # ========== Static Files ==========
    static_root: Path = Field(
        default=Path("static/root"),
        description="Directory served at the web root (index.html is the index page)"
    )
    images_dir: Path = Field(
        default=Path("static/images"),
        description="Directory served at /images with a directory listing"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default_factory=list,
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
