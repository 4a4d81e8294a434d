"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the product catalog service using
Pydantic Settings.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Computed properties for derived values
- Cached singleton access through get_settings()

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        database_url: SQLAlchemy database connection string
        default_page_size: Page size used when a listing omits one
        max_page_size: Largest page size accepted over HTTP
        exchange_rate_api_endpoint: Base URL of the exchange-rate provider
        exchange_rate_cache_ttl: Lifetime of cached rate tables in seconds
        exchange_rate_timeout: Provider request timeout in seconds
        cache_backend: "memory" or "redis"
        redis_url: Redis connection string (redis backend only)
        seed_sample_data: Populate a demo catalog on first start
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings()
        >>> settings.exchange_rate_cache_ttl
        86400
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Product Catalog API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/catalog.db",
        description="SQLAlchemy database connection string"
    )

    # =========================================================================
    # LISTING SETTINGS
    # =========================================================================
    default_page_size: int = Field(
        default=20,
        ge=1,
        description="Page size used when a listing request omits one"
    )

    max_page_size: int = Field(
        default=500,
        ge=1,
        description="Largest page size accepted over HTTP"
    )

    # =========================================================================
    # EXCHANGE RATE SETTINGS
    # =========================================================================
    exchange_rate_api_endpoint: str = Field(
        default="https://open.er-api.com/v6/latest",
        description="Provider base URL, the base currency is appended as a path segment"
    )

    exchange_rate_cache_ttl: int = Field(
        default=86400,
        ge=1,
        description="Lifetime of cached rate tables in seconds"
    )

    exchange_rate_timeout: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="Provider request timeout in seconds"
    )

    # =========================================================================
    # CACHE STORE SETTINGS
    # =========================================================================
    cache_backend: str = Field(
        default="memory",
        description="Cache store backend: memory or redis"
    )

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection string"
    )

    # =========================================================================
    # DATA SETTINGS
    # =========================================================================
    seed_sample_data: bool = Field(
        default=False,
        description="Populate a demo catalog when the database is empty"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown values fall back to "development".
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("cache_backend")
    @classmethod
    def validate_cache_backend(cls, value: str) -> str:
        """
        Validate the cache store backend name.

        Raises:
            ValueError: If the backend is not supported
        """
        normalized = value.lower().strip()
        supported = {"memory", "redis"}

        if normalized not in supported:
            raise ValueError(
                f"Unsupported cache backend: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return normalized

    @field_validator("exchange_rate_api_endpoint")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Drop a trailing slash so the currency path joins cleanly."""
        return value.rstrip("/")

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for non-SQLite or in-memory databases
        """
        if not self.database_url.startswith("sqlite:///"):
            return None

        db_path = self.database_url.replace("sqlite:///", "", 1)
        if not db_path or db_path == ":memory:":
            return None
        if db_path.startswith("./"):
            db_path = db_path[2:]
        return Path(db_path)

    def ensure_directories(self) -> None:
        """Create the SQLite database directory if one is configured."""
        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug("Required directories created/verified")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"cache_backend={self.cache_backend!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Uses lru_cache so that configuration is read once per process.

    Returns:
        Global Settings instance
    """
    settings = Settings()
    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
