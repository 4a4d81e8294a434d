"""
==============================================================================
Database Initialization Module
==============================================================================

Database setup and demo catalog seeding.

Initialization Flow:
-------------------
1. Create all tables from ORM models
2. If SEED_SAMPLE_DATA is set, the environment is not production and the
   catalog is empty, insert the sample catalog
3. Verify the connection

Usage:
------
    from catalog_api.db import init_db, DatabaseInitializer

    init_db()

    initializer = DatabaseInitializer()
    initializer.create_tables()
    initializer.seed_sample_catalog()

==============================================================================
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog_api.config import get_settings
from catalog_api.db.database import DatabaseManager, get_database_manager
from catalog_api.db.models import (
    Attribute,
    Category,
    Product,
    ProductAttribute,
    ProductCategory,
    ProductIcon,
    ProductImage,
)


# Module logger
logger = logging.getLogger(__name__)


# =============================================================================
# SAMPLE CATALOG
# =============================================================================

SAMPLE_CATEGORIES = [
    "Electronics", "Home Appliances", "Garden", "Sports", "Clothing",
    "Shoes", "Kitchen", "Toys", "Books", "Office",
]

SAMPLE_ATTRIBUTE_VALUES: Dict[str, List[str]] = {
    "Color": ["Red", "Blue", "Black", "White", "Green"],
    "Size": ["S", "M", "L", "XL", "10", "42"],
    "Material": ["Cotton", "Steel", "Plastic", "Wood", "Leather"],
    "Brand": ["Samsung", "Bosch", "Nike", "Philips", "Lego"],
}

SAMPLE_PRODUCT_NAMES = [
    "Running Shoes", "Coffee Maker", "Desk Lamp", "Garden Hose", "Yoga Mat",
    "Wireless Headphones", "Toaster", "Office Chair", "Board Game", "Rain Jacket",
    "Blender", "Tennis Racket", "Notebook", "Vacuum Cleaner", "Backpack",
]

SAMPLE_IMAGES = ["test-image-1.jpg", "test-image-2.jpg", "test-image-3.jpg"]


class DatabaseInitializer:
    """
    Database initialization manager.

    Attributes:
        _db_manager: DatabaseManager instance
        _settings: Application settings
        _session: Optional externally managed session

    Example:
        >>> initializer = DatabaseInitializer()
        >>> initializer.initialize()
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        session: Optional[Session] = None
    ) -> None:
        self._db_manager = db_manager or get_database_manager()
        self._settings = get_settings()
        self._session = session

    def _get_session(self) -> Session:
        if self._session is not None:
            return self._session
        return self._db_manager.get_session()

    # =========================================================================
    # TABLE OPERATIONS
    # =========================================================================

    def create_tables(self) -> None:
        """Create all database tables that do not exist yet."""
        logger.info("Creating database tables...")
        self._db_manager.create_tables()
        logger.info("✅ Database tables created successfully")

    # =========================================================================
    # SAMPLE DATA
    # =========================================================================

    def catalog_is_empty(self) -> bool:
        """Check whether the products table has no rows."""
        session = self._get_session()
        try:
            return not session.scalar(select(func.count(Product.id)))
        finally:
            if self._session is None:
                session.close()

    def seed_sample_catalog(self, product_count: int = 60, seed: int = 42) -> int:
        """
        Insert a demo catalog.

        Every product gets two categories, a value for every sample
        attribute, an icon and three images. Generation is deterministic
        for a given seed.

        Args:
            product_count: Number of products to create
            seed: Random seed

        Returns:
            Number of products created
        """
        rng = random.Random(seed)
        session = self._get_session()

        try:
            categories = [Category(name=name) for name in SAMPLE_CATEGORIES]
            attributes = [Attribute(name=name) for name in SAMPLE_ATTRIBUTE_VALUES]
            session.add_all(categories + attributes)

            now = datetime.utcnow()
            for index in range(product_count):
                base_name = SAMPLE_PRODUCT_NAMES[index % len(SAMPLE_PRODUCT_NAMES)]
                added = now - timedelta(days=rng.randint(0, 365), minutes=index)

                product = Product(
                    name=f"{base_name} {index + 1}",
                    description=f"Sample {base_name.lower()} for catalog demos.",
                    price=Decimal(rng.randint(1000, 100000)) / 100,
                    price_currency=rng.choice(["EUR", "USD"]),
                    active=rng.random() > 0.1,
                    added_time=added,
                    last_edit_time=added,
                )

                for category in rng.sample(categories, 2):
                    product.product_categories.append(ProductCategory(category=category))

                for attribute in attributes:
                    product.product_attributes.append(ProductAttribute(
                        attribute=attribute,
                        value=rng.choice(SAMPLE_ATTRIBUTE_VALUES[attribute.name]),
                        value_type="string",
                    ))

                product.icon = ProductIcon(icon_file="/storage/icons/testing-icon.png")
                for image_file in SAMPLE_IMAGES:
                    product.images.append(ProductImage(image_file=f"/storage/images/{image_file}"))

                session.add(product)

            session.commit()
            logger.info(f"✅ Sample catalog created: {product_count} products")
            return product_count

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to seed sample catalog: {e}")
            raise
        finally:
            if self._session is None:
                session.close()

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def initialize(self) -> None:
        """
        Perform full database initialization.

        Creates tables, seeds the sample catalog when enabled and verifies
        the connection.
        """
        logger.info("=" * 60)
        logger.info("Initializing database...")
        logger.info("=" * 60)

        self.create_tables()

        if self._settings.seed_sample_data:
            if self._settings.is_production:
                logger.warning("⚠️ SEED_SAMPLE_DATA ignored in production")
            elif self.catalog_is_empty():
                self.seed_sample_catalog()
            else:
                logger.info("Catalog already populated, skipping sample data")

        if self._db_manager.verify_connection():
            logger.info("✅ Database connection verified")
        else:
            logger.warning("⚠️ Database connection check failed")

        logger.info("Database initialization complete")


def init_db() -> None:
    """Initialize the database using the global DatabaseManager."""
    DatabaseInitializer().initialize()
