"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints.

==============================================================================
"""

from io import BytesIO
from unittest import mock

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from sqlalchemy.exc import OperationalError

from catalog_api.main import app
from catalog_api.config import get_settings
from catalog_api.core.dependencies import get_db, get_exchange_rate_cache


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"
        assert data["components"]["exchange_rates"] == "healthy"

    def test_readiness(self, client: TestClient):
        """Test readiness reports a reachable database."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json() == {"ready": True, "database": "healthy"}

    def test_not_ready_when_database_unreachable(self, client: TestClient):
        broken_db = mock.Mock()
        broken_db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        app.dependency_overrides[get_db] = lambda: broken_db

        response = client.get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json() == {"ready": False, "database": "unhealthy"}

    def test_liveness(self, client: TestClient):
        """Test liveness check."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True


class TestListProductsEndpoint:
    """Tests for POST /products/list."""

    def test_list_all_active(self, client: TestClient, catalog):
        response = client.post("/api/v1/products/list", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [p["name"] for p in data["products"]] == ["Desk Lamp", "Garden Lamp", "Tennis Racket"]
        assert data["pagination"] == {
            "total_items": 3,
            "current_page": 1,
            "page_size": 20,
            "total_pages": 1,
            "items_on_current_page": 3,
            "is_next_page_exists": False,
            "is_previous_page_exists": False,
        }

    def test_attribute_filters(self, client: TestClient, catalog):
        response = client.post(
            "/api/v1/products/list",
            json={"attributes": {"Color": "Red", "Size": "10"}}
        )
        assert response.status_code == 200
        assert [p["name"] for p in response.json()["products"]] == ["Desk Lamp"]

    def test_category_filters(self, client: TestClient, catalog):
        response = client.post(
            "/api/v1/products/list",
            json={"categories": ["Garden", "Sports"], "sort": "name"}
        )
        assert [p["name"] for p in response.json()["products"]] == ["Garden Lamp", "Tennis Racket"]

    def test_paging(self, client: TestClient, catalog):
        response = client.post("/api/v1/products/list", json={"page": 2, "page_size": 2})
        data = response.json()
        assert [p["name"] for p in data["products"]] == ["Tennis Racket"]
        assert data["pagination"]["is_previous_page_exists"] is True

    def test_converted_prices(self, client: TestClient, catalog, rate_api):
        response = client.post("/api/v1/products/list", json={"currency": "USD", "search": "lamp"})
        assert response.status_code == 200
        products = response.json()["products"]
        assert [(p["price"], p["price_currency"]) for p in products] == [(110.0, "USD"), (55.0, "USD")]
        assert rate_api.calls == ["EUR"]

    def test_invalid_sort(self, client: TestClient, catalog):
        response = client.post("/api/v1/products/list", json={"sort": "unknown_field"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_ARGUMENT"
        assert error["details"]["sort"] == "unknown_field"

    def test_page_size_above_limit(self, client: TestClient, catalog):
        limit = get_settings().max_page_size
        response = client.post("/api/v1/products/list", json={"page_size": limit + 1})
        assert response.status_code == 400

    def test_zero_page_size(self, client: TestClient, catalog):
        response = client.post("/api/v1/products/list", json={"page_size": 0})
        assert response.status_code == 400

    def test_unsupported_currency(self, client: TestClient, catalog):
        response = client.post("/api/v1/products/list", json={"currency": "JPY"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CURRENCY_NOT_SUPPORTED"

    def test_provider_failure(self, client: TestClient, catalog, rate_api):
        rate_api.status_code = 500
        response = client.post("/api/v1/products/list", json={"currency": "USD"})
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "RATE_PROVIDER_ERROR"


class TestGetProductEndpoint:
    """Tests for GET /products/{id}."""

    def test_get_product(self, client: TestClient, catalog):
        product = catalog["Desk Lamp"]
        response = client.get(f"/api/v1/products/{product.id}")
        assert response.status_code == 200
        data = response.json()["product"]
        assert data["id"] == product.id
        assert data["price"] == 100.0
        assert data["price_currency"] == "EUR"
        assert data["attributes"] == {"Color": "Red", "Size": "10"}

    def test_get_product_converted(self, client: TestClient, catalog):
        product = catalog["Desk Lamp"]
        response = client.get(f"/api/v1/products/{product.id}", params={"currency": "czk"})
        data = response.json()["product"]
        assert data["price"] == 2500.0
        assert data["price_currency"] == "CZK"

    def test_get_product_not_found(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/9999")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    @pytest.mark.parametrize("product_id", [0, -1, 2 ** 63, 2 ** 70])
    def test_out_of_range_id_not_found(self, client: TestClient, catalog, product_id: int):
        response = client.get(f"/api/v1/products/{product_id}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_malformed_currency(self, client: TestClient, catalog):
        product = catalog["Desk Lamp"]
        response = client.get(f"/api/v1/products/{product.id}", params={"currency": "EURO"})
        assert response.status_code == 400


class TestCatalogMetadataEndpoints:
    """Tests for stats, categories and attributes."""

    def test_stats(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/stats")
        assert response.status_code == 200
        assert response.json()["stats"] == {"total": 4, "active": 3, "inactive": 1}

    def test_categories(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/categories")
        assert response.json() == {"success": True, "total": 3, "items": ["Garden", "Home", "Sports"]}

    def test_attributes(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/attributes")
        assert response.json()["items"] == ["Color", "Size"]


class TestExchangeRateWiring:
    """Tests for the lifespan-provided rate cache."""

    def test_startup_sets_rate_cache(self, db):
        with TestClient(app) as test_client:
            assert test_client.app.state.exchange_rates is not None

    def test_missing_rate_cache_is_internal_error(self, client: TestClient, catalog):
        app.dependency_overrides.pop(get_exchange_rate_cache)
        client.app.state.exchange_rates = None
        product = catalog["Desk Lamp"]
        response = client.get(f"/api/v1/products/{product.id}")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"

    def test_shutdown_closes_cache_store(self, db, monkeypatch):
        cache_store = mock.Mock()
        monkeypatch.setattr("catalog_api.main.create_cache_store", lambda settings: cache_store)

        with TestClient(app):
            cache_store.close.assert_not_called()

        cache_store.close.assert_called_once_with()


class TestExportEndpoints:
    """Tests for GET /products/export/*."""

    def test_export_json(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/export/json")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment;filename="products-')
        assert disposition.endswith('.json"')

        rows = response.json()
        assert [row["name"] for row in rows] == ["Desk Lamp", "Garden Lamp", "Tennis Racket", "Old Lamp"]
        assert rows[0]["attributes"] == "Color: Red, Size: 10"
        assert rows[3]["active"] is False

    def test_export_xls(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/export/xls")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert response.headers["content-disposition"].endswith('.xlsx"')

        sheet = load_workbook(BytesIO(response.content)).active
        assert sheet.max_row == 5
        assert sheet.cell(row=2, column=2).value == "Desk Lamp"

    def test_export_empty_catalog(self, client: TestClient):
        response = client.get("/api/v1/products/export/json")
        assert response.status_code == 200
        assert response.json() == []

    def test_export_does_not_shadow_product_route(self, client: TestClient, catalog):
        response = client.get("/api/v1/products/export")
        assert response.status_code == 422
