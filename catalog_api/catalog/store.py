"""
==============================================================================
SQL Product Store Module
==============================================================================

Product data store backed by SQLAlchemy.

This module implements:
- PredicateCompiler: Translates predicate trees into SQL expressions
- SqlProductStore: Filtered, sorted, paginated product reads

Attribute Matching:
------------------
HasAllAttributes compiles to a grouped sub-select:

    SELECT pa.product_id
    FROM product_attributes pa JOIN attributes a ON a.id = pa.attribute_id
    WHERE (a.name = :n1 AND pa.value = :v1) OR (a.name = :n2 AND pa.value = :v2)
    GROUP BY pa.product_id
    HAVING COUNT(DISTINCT a.name) = 2

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy import and_, distinct, false, func, or_, select, true
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.functions import GenericFunction
from sqlalchemy.types import String

from catalog_api.catalog.criteria import SortKey
from catalog_api.catalog.predicates import (
    And,
    Contains,
    Equals,
    HasAllAttributes,
    InCategories,
    Or,
    Predicate,
)
from catalog_api.db.database import SQLITE_LOWER_FUNCTION
from catalog_api.db.models import (
    Attribute,
    Category,
    Product,
    ProductAttribute,
    ProductCategory,
)


# Module logger
logger = logging.getLogger(__name__)

# Largest value of a signed 64-bit integer primary key
MAX_PRODUCT_ID = 2 ** 63 - 1


class unicode_lower(GenericFunction):
    """
    Case folding that agrees with Python's str.lower() on every backend.

    Renders as lower() by default and as the connection-registered Python
    function on SQLite, whose own lower() leaves non-ASCII letters alone.
    """

    type = String()
    inherit_cache = True


@compiles(unicode_lower)
def _compile_unicode_lower(element, compiler, **kw):
    return f"lower({compiler.process(element.clauses, **kw)})"


@compiles(unicode_lower, "sqlite")
def _compile_unicode_lower_sqlite(element, compiler, **kw):
    return f"{SQLITE_LOWER_FUNCTION}({compiler.process(element.clauses, **kw)})"


class PredicateCompiler:
    """
    Compiles predicate trees into SQLAlchemy boolean expressions.

    Only fields listed in COLUMNS can be referenced; anything else is a
    programming error and raises ValueError.
    """

    COLUMNS: Dict[str, ColumnElement] = {
        "name": Product.name,
        "description": Product.description,
        "active": Product.active,
        "price_currency": Product.price_currency,
    }

    def compile(self, predicate: Predicate) -> ColumnElement:
        """
        Compile a predicate node.

        Args:
            predicate: Root of the predicate tree

        Returns:
            SQLAlchemy expression usable in a WHERE clause
        """
        if isinstance(predicate, And):
            if not predicate.children:
                return true()
            return and_(*(self.compile(child) for child in predicate.children))

        if isinstance(predicate, Or):
            if not predicate.children:
                return false()
            return or_(*(self.compile(child) for child in predicate.children))

        if isinstance(predicate, Contains):
            column = self._column(predicate.field)
            return unicode_lower(column).contains(predicate.text.lower(), autoescape=True)

        if isinstance(predicate, Equals):
            return self._column(predicate.field) == predicate.value

        if isinstance(predicate, HasAllAttributes):
            return self._has_all_attributes(predicate)

        if isinstance(predicate, InCategories):
            return self._in_categories(predicate)

        raise ValueError(f"Unsupported predicate node: {predicate!r}")

    def _column(self, field: str) -> ColumnElement:
        try:
            return self.COLUMNS[field]
        except KeyError:
            raise ValueError(f"Unknown product field: {field}") from None

    @staticmethod
    def _has_all_attributes(predicate: HasAllAttributes) -> ColumnElement:
        if not predicate.pairs:
            return true()

        pair_matches = [
            and_(Attribute.name == name, ProductAttribute.value == value)
            for name, value in predicate.pairs
        ]
        matching_products = (
            select(ProductAttribute.product_id)
            .join(Attribute, Attribute.id == ProductAttribute.attribute_id)
            .where(or_(*pair_matches))
            .group_by(ProductAttribute.product_id)
            .having(func.count(distinct(Attribute.name)) == len(predicate.pairs))
        )
        return Product.id.in_(matching_products)

    @staticmethod
    def _in_categories(predicate: InCategories) -> ColumnElement:
        if not predicate.names:
            return true()

        member_products = (
            select(ProductCategory.product_id)
            .join(Category, Category.id == ProductCategory.category_id)
            .where(Category.name.in_(sorted(predicate.names)))
        )
        return Product.id.in_(member_products)


class SqlProductStore:
    """
    Product data store over a SQLAlchemy session.

    Attributes:
        _db: Request-scoped database session
        _compiler: PredicateCompiler instance

    Example:
        >>> store = SqlProductStore(session)
        >>> where = build_predicate(search="lamp")
        >>> total = store.count(where)
        >>> page = store.find(where, SortKey.PRICE, offset=0, limit=20)
    """

    SORT_COLUMNS = {
        SortKey.NAME: Product.name,
        SortKey.PRICE: Product.price,
        SortKey.ADDED_TIME: Product.added_time,
    }

    def __init__(self, db: Session, compiler: Optional[PredicateCompiler] = None) -> None:
        self._db = db
        self._compiler = compiler or PredicateCompiler()

    def find(
        self,
        predicate: Predicate,
        sort: Optional[SortKey] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Product]:
        """
        Fetch products matching the predicate.

        Results are ordered by the sort column with the product id as
        tie-breaker, or by id alone (insertion order) when sort is None.

        Args:
            predicate: Filter tree
            sort: Allow-listed sort key
            offset: Rows to skip
            limit: Maximum rows, None for all

        Returns:
            List of Product models with relations eagerly loaded
        """
        statement = (
            select(Product)
            .where(self._compiler.compile(predicate))
            .options(
                selectinload(Product.product_attributes).selectinload(ProductAttribute.attribute),
                selectinload(Product.product_categories).selectinload(ProductCategory.category),
                selectinload(Product.icon),
                selectinload(Product.images),
            )
        )

        if sort is not None:
            statement = statement.order_by(self.SORT_COLUMNS[sort].asc(), Product.id.asc())
        else:
            statement = statement.order_by(Product.id.asc())

        if offset:
            statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)

        products = list(self._db.scalars(statement).all())
        logger.debug(f"Store find: offset={offset} limit={limit} sort={sort} -> {len(products)} rows")
        return products

    def count(self, predicate: Predicate) -> int:
        """Count all products matching the predicate, ignoring pagination."""
        statement = select(func.count(Product.id)).where(self._compiler.compile(predicate))
        return int(self._db.scalar(statement) or 0)

    def get(self, product_id: int) -> Optional[Product]:
        """Fetch one product by id, or None (also for ids no row can have)."""
        if not 1 <= product_id <= MAX_PRODUCT_ID:
            return None
        return self._db.get(Product, product_id)

    # =========================================================================
    # CATALOG METADATA
    # =========================================================================

    def count_by_active(self) -> Dict[bool, int]:
        """Product counts grouped by active flag."""
        rows = self._db.execute(
            select(Product.active, func.count(Product.id)).group_by(Product.active)
        ).all()
        return {bool(active): int(count) for active, count in rows}

    def category_names(self) -> List[str]:
        """All category names, sorted."""
        return list(self._db.scalars(select(Category.name).order_by(Category.name)).all())

    def attribute_names(self) -> List[str]:
        """All attribute names, sorted."""
        return list(self._db.scalars(select(Attribute.name).order_by(Attribute.name)).all())
