"""
Application Exception Handling

AppException hierarchy for catalog errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Base application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Cache store unavailable", "CACHE_UNAVAILABLE", 503)

    Error Codes:
        Caller errors:
            - INVALID_ARGUMENT (400)
            - CURRENCY_NOT_SUPPORTED (400)
            - PRODUCT_NOT_FOUND (404)

        Dependency failures:
            - RATE_PROVIDER_ERROR (502)
            - CACHE_UNAVAILABLE (503)

        General:
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


class InvalidArgument(AppException):
    """Caller supplied a value outside the accepted domain."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_ARGUMENT", 400, details)


class NotFound(AppException):
    """Requested product does not exist."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PRODUCT_NOT_FOUND", 404, details)


class CurrencyNotSupported(AppException):
    """Target currency is missing from the provider's rate table."""

    def __init__(self, currency: str, base_currency: Optional[str] = None):
        details = {"currency": currency}
        if base_currency:
            details["base_currency"] = base_currency
        super().__init__(
            f"Currency: {currency} not found in exchange rates",
            "CURRENCY_NOT_SUPPORTED",
            400,
            details
        )
        self.currency = currency


class RateProviderError(AppException):
    """Exchange-rate provider unreachable or returned an unusable response."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "RATE_PROVIDER_ERROR", 502, details)


class CacheUnavailable(AppException):
    """Cache store backend failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CACHE_UNAVAILABLE", 503, details)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_argument(message: str, **details: Any) -> InvalidArgument:
    """Create invalid argument exception."""
    return InvalidArgument(message, details)


def invalid_sort_key(sort: str, allowed: list) -> InvalidArgument:
    """Create exception for a sort key outside the allow-list."""
    return InvalidArgument(
        f"Invalid sort key: {sort}. Allowed: {', '.join(allowed)}",
        {"sort": sort, "allowed": allowed}
    )


def invalid_currency_code(code: str) -> InvalidArgument:
    """Create exception for a malformed currency code."""
    return InvalidArgument(
        f"Invalid currency code: {code!r}",
        {"currency": code}
    )


def product_not_found(product_id: Optional[int] = None) -> NotFound:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id is not None else {}
    return NotFound(f"Product id: {product_id} not found", details)


def currency_not_supported(currency: str, base_currency: Optional[str] = None) -> CurrencyNotSupported:
    """Create currency not supported exception."""
    return CurrencyNotSupported(currency, base_currency)


def rate_provider_error(message: str, **details: Any) -> RateProviderError:
    """Create rate provider failure exception."""
    return RateProviderError(message, details)


def cache_unavailable(reason: str) -> CacheUnavailable:
    """Create cache store failure exception."""
    return CacheUnavailable("Cache store unavailable", {"reason": reason})


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
