"""
==============================================================================
Core Package
==============================================================================

Core infrastructure for the application.

Modules:
--------
- exceptions: AppException hierarchy and error factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from catalog_api.core import exceptions
    raise exceptions.product_not_found(42)

    from catalog_api.core.dependencies import get_product_query_service

==============================================================================
"""

from .exceptions import (
    AppException,
    CacheUnavailable,
    CurrencyNotSupported,
    InvalidArgument,
    NotFound,
    RateProviderError,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "CacheUnavailable",
    "CurrencyNotSupported",
    "InvalidArgument",
    "NotFound",
    "RateProviderError",
    "register_exception_handlers",
]
