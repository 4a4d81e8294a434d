"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection wiring for the catalog API.

The exchange-rate cache is created once in the application lifespan and
kept on app.state; everything else is built per request on top of the
request's database session.

    get_db ──────────────────────────────────────────▶ get_product_export_service
    get_db ───────────────┐
                          ├─▶ get_product_query_service
    get_exchange_rate_cache ─▶ get_currency_converter ─┘

Tests replace any of these through app.dependency_overrides.

==============================================================================
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from catalog_api.catalog.store import SqlProductStore
from catalog_api.config import Settings, get_settings
from catalog_api.core import exceptions
from catalog_api.currency.converter import CurrencyConverter
from catalog_api.currency.exchange_rates import ExchangeRateCache
from catalog_api.db.database import get_db
from catalog_api.services.product_export_service import ProductExportService
from catalog_api.services.product_query_service import ProductQueryService


# Module logger
logger = logging.getLogger(__name__)


def get_exchange_rate_cache(request: Request) -> ExchangeRateCache:
    """
    Shared exchange-rate cache from application state.

    Raises:
        AppException: INTERNAL_ERROR if the lifespan did not set it up
    """
    rate_cache = getattr(request.app.state, "exchange_rates", None)
    if rate_cache is None:
        logger.error("Exchange rate cache requested before application startup")
        raise exceptions.internal_error("Exchange rate cache not initialized")
    return rate_cache


def get_currency_converter(
    rate_cache: ExchangeRateCache = Depends(get_exchange_rate_cache),
) -> CurrencyConverter:
    """Currency converter over the shared rate cache."""
    return CurrencyConverter(rate_cache)


def get_product_query_service(
    db: Session = Depends(get_db),
    converter: CurrencyConverter = Depends(get_currency_converter),
    settings: Settings = Depends(get_settings),
) -> ProductQueryService:
    """Request-scoped product query façade."""
    return ProductQueryService(
        SqlProductStore(db),
        converter,
        default_page_size=settings.default_page_size,
    )


def get_product_export_service(db: Session = Depends(get_db)) -> ProductExportService:
    """Request-scoped full-catalog exporter."""
    return ProductExportService(SqlProductStore(db))


__all__ = [
    "get_db",
    "get_exchange_rate_cache",
    "get_currency_converter",
    "get_product_query_service",
    "get_product_export_service",
]
