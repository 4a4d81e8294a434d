"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes implementing catalog business logic.

This package provides:
- ProductQueryService: Product listings, single reads and catalog metadata
- ProductExportService: Full-catalog JSON and XLSX export

Architecture Pattern: Service Layer
----------------------------------
Services sit between the API controllers and the data store; the store
owns SQL, the service owns filtering, paging and price conversion.

    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business Logic
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │  Product Store  │  ← Data Access (via ORM)
    └─────────────────┘

Usage:
------
    from catalog_api.services import ProductQueryService

    service = ProductQueryService(SqlProductStore(db), converter)
    products, pagination = service.list_products(FilterCriteria(page=2))

==============================================================================
"""

from .product_export_service import ProductExportService
from .product_query_service import ProductQueryService

__all__ = [
    "ProductExportService",
    "ProductQueryService",
]
