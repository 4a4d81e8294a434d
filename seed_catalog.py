#!/usr/bin/env python3
"""
Seed Sample Catalog Script
Creates the tables and inserts the demo catalog into the configured database
"""

import argparse
import sys

from catalog_api.config import get_settings
from catalog_api.db import DatabaseInitializer


def seed_catalog(product_count: int, seed: int):
    """Insert the sample catalog if the products table is empty"""
    settings = get_settings()
    print(f"Database: {settings.database_url}")

    try:
        initializer = DatabaseInitializer()
        initializer.create_tables()

        if not initializer.catalog_is_empty():
            print("❌ ERROR: Catalog already contains products")
            print("Use an empty database to load the sample catalog")
            sys.exit(1)

        created = initializer.seed_sample_catalog(product_count=product_count, seed=seed)
        print(f"✅ SUCCESS: {created} sample products created!")

    except Exception as e:
        print(f"❌ ERROR: {e}")
        print("\nMake sure:")
        print("1. DATABASE_URL points to a writable database")
        print("2. You're in the correct directory")
        print("3. Database is not locked by another process")
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the product catalog with sample data")
    parser.add_argument("--products", type=int, default=60, help="Number of products to create")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    print("=" * 60)
    print("SEED SAMPLE CATALOG")
    print("=" * 60)
    print()
    seed_catalog(args.products, args.seed)
    print()
    print("=" * 60)
