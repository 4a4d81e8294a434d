"""
==============================================================================
Product Query Service Module
==============================================================================

Read-side façade of the product catalog.

This module implements:
- ProductQueryService: Filtered, paginated listings and single-product
  reads with prices in a requested display currency
- Catalog statistics and category/attribute name listings

Listing Flow:
------------
    FilterCriteria
         │
         ├─▶ build_predicate(active_only=True)
         ├─▶ SortKey.parse (allow-list)
         ├─▶ store.count(predicate) ─▶ compute_pagination
         ├─▶ store.find(predicate, sort, offset, limit)
         └─▶ CurrencyConverter.convert per product (when a currency is set)

The count and the page read are two separate queries; no consistency is
promised between them.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from catalog_api.catalog.criteria import FilterCriteria, SortKey
from catalog_api.catalog.pagination import PaginationInfo, compute_pagination
from catalog_api.catalog.predicates import build_predicate
from catalog_api.catalog.store import SqlProductStore
from catalog_api.core import exceptions
from catalog_api.currency.converter import CurrencyConverter
from catalog_api.db.models import Product
from catalog_api.schemas.product import ProductStats, ProductView
from catalog_api.utils.validators import normalize_currency


# Module logger
logger = logging.getLogger(__name__)


class ProductQueryService:
    """
    Product query façade.

    Attributes:
        _store: Product data store
        _converter: Currency converter
        _default_page_size: Page size when criteria omit one

    Example:
        >>> service = ProductQueryService(SqlProductStore(db), converter)
        >>> products, pagination = service.list_products(
        ...     FilterCriteria(attributes={"Color": "Red"}, sort="price", currency="USD")
        ... )
        >>> product = service.get_product(42, target_currency="CZK")
    """

    def __init__(
        self,
        store: SqlProductStore,
        converter: CurrencyConverter,
        default_page_size: int = 20,
    ) -> None:
        self._store = store
        self._converter = converter
        self._default_page_size = default_page_size

    # =========================================================================
    # LISTING
    # =========================================================================

    def list_products(self, criteria: FilterCriteria) -> Tuple[List[ProductView], PaginationInfo]:
        """
        List active products matching the criteria.

        Args:
            criteria: Filters, page, sort and display currency

        Returns:
            Tuple of (products in sort order, pagination metadata)

        Raises:
            InvalidArgument: Bad sort key, page size or currency code
            CurrencyNotSupported: Display currency missing from rate table
            RateProviderError: Rates unavailable
        """
        sort = SortKey.parse(criteria.sort)
        target_currency = normalize_currency(criteria.currency)
        page_size = self._default_page_size if criteria.page_size is None else criteria.page_size

        predicate = build_predicate(
            search=criteria.search,
            attribute_filters=criteria.attributes,
            category_names=criteria.categories,
            active_only=True,
        )

        total = self._store.count(predicate)
        pagination = compute_pagination(total, criteria.page, page_size)

        products = []
        if pagination.items_on_current_page:
            products = self._store.find(
                predicate,
                sort=sort,
                offset=pagination.offset,
                limit=page_size,
            )

        logger.debug(
            f"Listed {len(products)} of {total} products "
            f"(page {pagination.current_page}/{pagination.total_pages}, sort={sort})"
        )

        return [self._to_view(product, target_currency) for product in products], pagination

    # =========================================================================
    # SINGLE PRODUCT
    # =========================================================================

    def get_product(self, product_id: int, target_currency: Optional[str] = None) -> ProductView:
        """
        Fetch one product by id.

        Raises:
            NotFound: If no product has this id
            InvalidArgument: Malformed currency code
            CurrencyNotSupported: Display currency missing from rate table
            RateProviderError: Rates unavailable
        """
        currency = normalize_currency(target_currency)

        product = self._store.get(product_id)
        if product is None:
            logger.info(f"Product not found: {product_id}")
            raise exceptions.product_not_found(product_id)

        return self._to_view(product, currency)

    # =========================================================================
    # CATALOG METADATA
    # =========================================================================

    def get_stats(self) -> ProductStats:
        """Total, active and inactive product counts."""
        counts = self._store.count_by_active()
        active = counts.get(True, 0)
        inactive = counts.get(False, 0)
        return ProductStats(total=active + inactive, active=active, inactive=inactive)

    def list_categories(self) -> List[str]:
        """All category names, sorted."""
        return self._store.category_names()

    def list_attributes(self) -> List[str]:
        """All attribute names, sorted."""
        return self._store.attribute_names()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _to_view(self, product: Product, target_currency: Optional[str]) -> ProductView:
        if target_currency is None:
            return ProductView.from_product(product)

        price = self._converter.convert(product.price, product.price_currency, target_currency)
        return ProductView.from_product(product, price=price, price_currency=target_currency)
