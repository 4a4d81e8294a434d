"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy database infrastructure and ORM models.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory
├── models.py     - SQLAlchemy ORM model classes
└── init_db.py    - DatabaseInitializer for setup and sample data

Usage:
------
    from catalog_api.db import get_database_manager, Product

    session = get_database_manager().get_session()
    active = session.query(Product).filter(Product.active).count()

==============================================================================
"""

from .database import Base, DatabaseManager, get_database_manager, get_db
from .models import (
    Attribute,
    Category,
    Product,
    ProductAttribute,
    ProductCategory,
    ProductIcon,
    ProductImage,
)
from .init_db import DatabaseInitializer, init_db

__all__ = [
    # Database management
    "Base",
    "DatabaseManager",
    "get_database_manager",
    "get_db",
    # Models
    "Attribute",
    "Category",
    "Product",
    "ProductAttribute",
    "ProductCategory",
    "ProductIcon",
    "ProductImage",
    # Initialization
    "DatabaseInitializer",
    "init_db",
]
