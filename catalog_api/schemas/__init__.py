"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Response schemas using Pydantic.

This package provides:
- Common: Error and health response schemas
- Product: Product views, listing and statistics responses

==============================================================================
"""

from .common import ErrorBody, ErrorResponse, HealthResponse
from .product import (
    NameListResponse,
    ProductListResponse,
    ProductResponse,
    ProductStats,
    ProductStatsResponse,
    ProductView,
)

__all__ = [
    # Common
    "ErrorBody",
    "ErrorResponse",
    "HealthResponse",
    # Product
    "NameListResponse",
    "ProductListResponse",
    "ProductResponse",
    "ProductStats",
    "ProductStatsResponse",
    "ProductView",
]
