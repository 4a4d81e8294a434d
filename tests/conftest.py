"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, sample catalog, exchange-rate and client fixtures.

The exchange-rate provider runs against an httpx.MockTransport that counts
calls, and the in-memory cache store runs on a fake clock, so TTL expiry
is tested without sleeping.

==============================================================================
"""

import json
import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Generator, List

# Settings are cached on first use; keep the app off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_api.main import app
from catalog_api.catalog.store import SqlProductStore
from catalog_api.core.dependencies import get_db, get_exchange_rate_cache
from catalog_api.currency.cache_store import InMemoryCacheStore
from catalog_api.currency.converter import CurrencyConverter
from catalog_api.currency.exchange_rates import ExchangeRateCache
from catalog_api.currency.rate_provider import ExchangeRateProvider
from catalog_api.db.database import Base, register_sqlite_functions
from catalog_api.db.models import (
    Attribute,
    Category,
    Product,
    ProductAttribute,
    ProductCategory,
    ProductIcon,
    ProductImage,
)
from catalog_api.services.product_query_service import ProductQueryService


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def on_test_connect(dbapi_connection, connection_record):
    register_sqlite_functions(dbapi_connection)


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

def _add_product(
    db: Session,
    name: str,
    description: str,
    price: str,
    currency: str,
    attributes: Dict[str, str],
    categories: List[Category],
    attribute_rows: Dict[str, Attribute],
    added_time: datetime,
    active: bool = True,
) -> Product:
    product = Product(
        name=name,
        description=description,
        price=Decimal(price),
        price_currency=currency,
        active=active,
        added_time=added_time,
        last_edit_time=added_time,
    )
    for attribute_name, value in attributes.items():
        product.product_attributes.append(
            ProductAttribute(attribute=attribute_rows[attribute_name], value=value)
        )
    for category in categories:
        product.product_categories.append(ProductCategory(category=category))
    product.icon = ProductIcon(icon_file=f"/storage/icons/{name.lower().replace(' ', '-')}.png")
    product.images.append(ProductImage(image_file="/storage/images/test-image-1.jpg"))
    db.add(product)
    return product


@pytest.fixture
def catalog(db: Session) -> Dict[str, Product]:
    """
    Small catalog keyed by product name.

    - Desk Lamp:     Color=Red, Size=10   Home     100.00 EUR
    - Garden Lamp:   Color=Red            Garden    50.00 EUR
    - Tennis Racket: Color=Blue, Size=10  Sports    80.00 USD
    - Old Lamp:      Color=Red, Size=10   Home      10.00 EUR (inactive)

    Inserted in this order, so ids follow it.
    """
    home, garden, sports = Category(name="Home"), Category(name="Garden"), Category(name="Sports")
    color, size = Attribute(name="Color"), Attribute(name="Size")
    db.add_all([home, garden, sports, color, size])
    attribute_rows = {"Color": color, "Size": size}

    start = datetime(2024, 1, 1, 12, 0, 0)
    products = {}
    for offset, (name, description, price, currency, attributes, categories, active) in enumerate([
        ("Desk Lamp", "Bright LED lamp for the office", "100.00", "EUR",
         {"Color": "Red", "Size": "10"}, [home], True),
        ("Garden Lamp", "Solar powered path light", "50.00", "EUR",
         {"Color": "Red"}, [garden], True),
        ("Tennis Racket", "Carbon frame, 100% graphite", "80.00", "USD",
         {"Color": "Blue", "Size": "10"}, [sports], True),
        ("Old Lamp", "Discontinued lamp", "10.00", "EUR",
         {"Color": "Red", "Size": "10"}, [home], False),
    ]):
        products[name] = _add_product(
            db, name, description, price, currency, attributes, categories,
            attribute_rows, added_time=start - timedelta(days=offset), active=active,
        )
        # Flush per product so ids follow insertion order
        db.flush()

    db.commit()
    return products


# ============================================================================
# EXCHANGE RATE FIXTURES
# ============================================================================

RATE_TABLES = {
    "EUR": {"EUR": 1, "USD": 1.1, "CZK": 25.0},
    "USD": {"USD": 1, "EUR": 0.9, "CZK": 22.75},
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRateApi:
    """
    MockTransport handler mimicking the exchange-rate API.

    Records every requested base currency in `calls`. Replace `tables` or
    set `status_code`/`raw_body` to simulate provider failures.
    """

    def __init__(self):
        self.calls: List[str] = []
        self.tables = {base: dict(rates) for base, rates in RATE_TABLES.items()}
        self.status_code = 200
        self.raw_body = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        base = request.url.path.rsplit("/", 1)[-1]
        self.calls.append(base)

        if self.raw_body is not None:
            return httpx.Response(self.status_code, text=self.raw_body)

        if base not in self.tables:
            return httpx.Response(
                404 if self.status_code == 200 else self.status_code,
                json={"result": "error", "error-type": "unsupported-code"},
            )

        return httpx.Response(
            self.status_code,
            text=json.dumps({
                "result": "success",
                "base_code": base,
                "time_last_update_unix": 1735689601,
                "rates": self.tables[base],
            }),
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_api() -> FakeRateApi:
    return FakeRateApi()


@pytest.fixture
def rate_provider(rate_api: FakeRateApi) -> Generator[ExchangeRateProvider, None, None]:
    """Provider wired to the fake rate API."""
    provider = ExchangeRateProvider(
        "https://rates.test/v6/latest",
        timeout=5.0,
        client=httpx.Client(transport=httpx.MockTransport(rate_api)),
    )
    yield provider
    provider.close()


@pytest.fixture
def cache_store(clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def rate_cache(cache_store: InMemoryCacheStore, rate_provider: ExchangeRateProvider) -> ExchangeRateCache:
    return ExchangeRateCache(cache_store, rate_provider, ttl_seconds=3600)


@pytest.fixture
def converter(rate_cache: ExchangeRateCache) -> CurrencyConverter:
    return CurrencyConverter(rate_cache)


# ============================================================================
# SERVICE FIXTURES
# ============================================================================

@pytest.fixture
def store(db: Session) -> SqlProductStore:
    return SqlProductStore(db)


@pytest.fixture
def service(store: SqlProductStore, converter: CurrencyConverter) -> ProductQueryService:
    return ProductQueryService(store, converter, default_page_size=20)


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def client(db: Session, rate_cache: ExchangeRateCache) -> Generator[TestClient, None, None]:
    """Create test client with database and exchange-rate overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_exchange_rate_cache] = lambda: rate_cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
