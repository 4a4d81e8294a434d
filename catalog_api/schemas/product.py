"""
==============================================================================
Product Schemas Module
==============================================================================

Plain response models for product reads.

==============================================================================
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer

from catalog_api.catalog.pagination import PaginationInfo
from catalog_api.db.models import Product


class ProductView(BaseModel):
    """
    Product as presented to callers.

    price/price_currency hold the converted amount when a display currency
    was requested, otherwise the stored values.
    """

    id: int
    name: str
    description: str
    price: Decimal
    price_currency: str
    active: bool
    added_time: datetime
    last_edit_time: datetime
    categories: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    icon: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    @classmethod
    def from_product(
        cls,
        product: Product,
        price: Optional[Decimal] = None,
        price_currency: Optional[str] = None,
    ) -> "ProductView":
        """Create a view from the ORM model, optionally overriding the price."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price if price is None else price,
            price_currency=price_currency or product.price_currency,
            active=product.active,
            added_time=product.added_time,
            last_edit_time=product.last_edit_time,
            categories=product.category_names,
            attributes=product.attribute_values,
            icon=product.icon.icon_file if product.icon else None,
            images=[image.image_file for image in product.images],
        )


class ProductListResponse(BaseModel):
    """Response for POST /products/list."""

    success: bool = Field(default=True)
    products: List[ProductView]
    pagination: PaginationInfo


class ProductResponse(BaseModel):
    """Response for GET /products/{id}."""

    success: bool = Field(default=True)
    product: ProductView


class ProductStats(BaseModel):
    """Catalog-wide product counts."""

    total: int = Field(ge=0)
    active: int = Field(ge=0)
    inactive: int = Field(ge=0)


class ProductStatsResponse(BaseModel):
    success: bool = Field(default=True)
    stats: ProductStats


class NameListResponse(BaseModel):
    """Sorted list of category or attribute names."""

    success: bool = Field(default=True)
    total: int = Field(ge=0)
    items: List[str]
