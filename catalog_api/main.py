"""
==============================================================================
Product Catalog API - Application Entry Point
==============================================================================

FastAPI application serving catalog queries:
- Filtered, paginated product listings
- Single product reads
- Prices converted through a cached exchange-rate table

Usage:
------
    # Development
    uvicorn catalog_api.main:app --reload

    # Production
    uvicorn catalog_api.main:app --host 0.0.0.0 --port 8000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_api.api.router import api_router
from catalog_api.config import get_settings
from catalog_api.core.exceptions import register_exception_handlers
from catalog_api.currency.cache_store import CacheStore, create_cache_store
from catalog_api.currency.exchange_rates import ExchangeRateCache
from catalog_api.currency.rate_provider import ExchangeRateProvider
from catalog_api.db import get_database_manager, init_db


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Database initialization
    - Exchange-rate cache wiring (cache store + provider)
    - Middleware, router and exception handler setup
    """

    def __init__(self):
        self._settings = get_settings()
        self._provider: Optional[ExchangeRateProvider] = None
        self._cache_store: Optional[CacheStore] = None
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Product catalog queries with filtering, pagination and currency conversion",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup(app)
        yield
        self._shutdown()

    def _startup(self, app: FastAPI) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        init_db()

        self._cache_store = create_cache_store(self._settings)
        self._provider = ExchangeRateProvider.from_settings(self._settings)
        app.state.exchange_rates = ExchangeRateCache(
            self._cache_store,
            self._provider,
            ttl_seconds=self._settings.exchange_rate_cache_ttl,
        )
        logger.info(
            f"💱 Exchange rates: {self._settings.exchange_rate_api_endpoint} "
            f"(cache={self._settings.cache_backend}, ttl={self._settings.exchange_rate_cache_ttl}s)"
        )

        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        if self._provider is not None:
            self._provider.close()
        if self._cache_store is not None:
            self._cache_store.close()
        get_database_manager().dispose()
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
