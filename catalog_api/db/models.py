"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM models for the product catalog.

This module defines:
- Product: Sellable item with a price in its own currency
- Attribute / ProductAttribute: Named attributes and per-product values
- Category / ProductCategory: Named categories and product membership
- ProductIcon / ProductImage: Asset file references

Database Schema:
---------------

    ┌──────────────────────────────┐
    │           products           │
    ├──────────────────────────────┤
    │ id (INTEGER, PK)             │
    │ name (VARCHAR)               │
    │ description (TEXT)           │
    │ price (NUMERIC(12,2), >= 0)  │
    │ price_currency (CHAR(3))     │
    │ active (BOOLEAN)             │
    │ added_time (DATETIME)        │
    │ last_edit_time (DATETIME)    │
    └──────────────┬───────────────┘
                   │
       ┌───────────┼─────────────────────┬───────────────────┐
       │ 1:N       │ 1:N                 │ 1:0..1            │ 1:N
       ▼           ▼                     ▼                   ▼
    product_    product_            product_icons      product_images
    attributes  categories
       │ N:1       │ N:1
       ▼           ▼
    attributes  categories
    (name UQ)   (name UQ)

=============================================================================
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship, Mapped

from catalog_api.db.database import Base


# =============================================================================
# PRODUCT MODEL
# =============================================================================

class Product(Base):
    """
    Product model.

    The price is stored in the product's own currency; conversion to a
    display currency happens at read time.

    Relationships:
        product_attributes: Attribute values of this product
        product_categories: Category memberships
        icon: Optional icon asset
        images: Image assets
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    # =========================================================================
    # COLUMNS
    # =========================================================================

    id: int = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Product identifier"
    )

    name: str = Column(
        String(80),
        nullable=False,
        index=True,
        doc="Product display name"
    )

    description: str = Column(
        Text,
        nullable=False,
        default="",
        doc="Product description"
    )

    price: Decimal = Column(
        Numeric(12, 2, asdecimal=True),
        nullable=False,
        doc="Price in price_currency"
    )

    price_currency: str = Column(
        String(3),
        nullable=False,
        default="EUR",
        doc="ISO 4217 currency code of the stored price"
    )

    active: bool = Column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
        doc="Visible in public listings"
    )

    added_time: datetime = Column(
        DateTime,
        default=func.now(),
        nullable=False,
        doc="Creation timestamp"
    )

    last_edit_time: datetime = Column(
        DateTime,
        default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Last modification timestamp"
    )

    # =========================================================================
    # RELATIONSHIPS
    # =========================================================================

    product_attributes: Mapped[List["ProductAttribute"]] = relationship(
        "ProductAttribute",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductAttribute.id",
    )

    product_categories: Mapped[List["ProductCategory"]] = relationship(
        "ProductCategory",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductCategory.id",
    )

    icon: Mapped[Optional["ProductIcon"]] = relationship(
        "ProductIcon",
        back_populates="product",
        uselist=False,
        cascade="all, delete-orphan",
    )

    images: Mapped[List["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.id",
    )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def category_names(self) -> List[str]:
        """Names of the categories this product belongs to."""
        return [pc.category.name for pc in self.product_categories]

    @property
    def attribute_values(self) -> dict:
        """Attribute name to stored value."""
        return {pa.attribute.name: pa.value for pa in self.product_attributes}

    def __repr__(self) -> str:
        return (
            f"Product(id={self.id!r}, name={self.name!r}, "
            f"price={self.price!r} {self.price_currency}, active={self.active})"
        )


# =============================================================================
# ATTRIBUTES
# =============================================================================

class Attribute(Base):
    """Named product attribute such as Color or Size."""

    __tablename__ = "attributes"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    name: str = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique attribute name"
    )

    product_attributes: Mapped[List["ProductAttribute"]] = relationship(
        "ProductAttribute",
        back_populates="attribute",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Attribute(id={self.id!r}, name={self.name!r})"


class ProductAttribute(Base):
    """
    Value of one attribute on one product.

    Values are stored as strings; value_type records how the value was
    entered (e.g. "string", "int") but filtering always compares strings.
    """

    __tablename__ = "product_attributes"
    __table_args__ = (
        UniqueConstraint("product_id", "attribute_id", name="uq_product_attribute"),
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    product_id: int = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    attribute_id: int = Column(
        Integer,
        ForeignKey("attributes.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    value: str = Column(String(255), nullable=False)

    value_type: str = Column(String(32), nullable=False, default="string")

    product: Mapped["Product"] = relationship("Product", back_populates="product_attributes")
    attribute: Mapped["Attribute"] = relationship("Attribute", back_populates="product_attributes")

    def __repr__(self) -> str:
        return (
            f"ProductAttribute(product_id={self.product_id!r}, "
            f"attribute_id={self.attribute_id!r}, value={self.value!r})"
        )


# =============================================================================
# CATEGORIES
# =============================================================================

class Category(Base):
    """Named product category."""

    __tablename__ = "categories"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    name: str = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique category name"
    )

    product_categories: Mapped[List["ProductCategory"]] = relationship(
        "ProductCategory",
        back_populates="category",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Category(id={self.id!r}, name={self.name!r})"


class ProductCategory(Base):
    """Membership of a product in a category."""

    __tablename__ = "product_categories"
    __table_args__ = (
        UniqueConstraint("product_id", "category_id", name="uq_product_category"),
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    product_id: int = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    category_id: int = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    product: Mapped["Product"] = relationship("Product", back_populates="product_categories")
    category: Mapped["Category"] = relationship("Category", back_populates="product_categories")


# =============================================================================
# ASSETS
# =============================================================================

class ProductIcon(Base):
    """Icon file reference, at most one per product."""

    __tablename__ = "product_icons"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    product_id: int = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )

    icon_file: str = Column(String(255), nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="icon")


class ProductImage(Base):
    """Image file reference."""

    __tablename__ = "product_images"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    product_id: int = Column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    image_file: str = Column(String(255), nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="images")
