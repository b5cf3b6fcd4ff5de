"""End-to-end tests for the storefront API.

Tests the full request/response cycle from data files on disk: store
loading through the settings, recommendation generation, reloading and
the error responses when the data files are missing.
"""

import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import src.api.routes.products as products_module
from src.api.config import Settings, get_settings
from src.api.main import app
from src.recommender.models import CatalogItem, Order, OrderLine
from src.recommender.stores import save_catalog_json, save_orders_csv

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

# Create test client
client = TestClient(app)


@pytest.fixture
def data_files(tmp_path) -> Generator[Settings, None, None]:
    """Write catalog and order files and point the API at them."""
    items = [
        CatalogItem(_id="1", name="Red Shirt", category="Men",
                    description="cotton shirt", colors=["Red"], price=999),
        CatalogItem(_id="2", name="Red Shirt", category="Men",
                    description="cotton shirt", colors=["Red"], price=1099),
        CatalogItem(_id="3", name="Blue Pants", category="Men",
                    description="denim pants", colors=["Blue"]),
        CatalogItem(_id="4", name="Floral Dress", category="Women",
                    description="light summer dress", colors=["Pink", "White"]),
        CatalogItem(_id="5", name="Leather Belt", category="Accessories",
                    description="brown leather belt", colors=["Brown"]),
    ]
    now = datetime(2024, 6, 1)
    orders = [
        Order("o1", "delivered", now, [OrderLine("1"), OrderLine("3")]),
        Order("o2", "shipped", now - timedelta(days=1), [OrderLine("3"), OrderLine("1"), OrderLine("5")]),
        Order("o3", "pending", now - timedelta(days=2), [OrderLine("1", quantity=4), OrderLine("3")]),
        Order("o4", "cancelled", now, [OrderLine("1"), OrderLine("4")]),
        Order("o5", "cancelled", now, [OrderLine("1"), OrderLine("4")]),
        Order("o6", "delivered", now, [OrderLine("1"), OrderLine("99")]),
    ]

    catalog_path = tmp_path / "catalog.json"
    orders_path = tmp_path / "orders.csv"
    save_catalog_json(items, str(catalog_path))
    save_orders_csv(orders, str(orders_path))

    settings = Settings(catalog_path=str(catalog_path), orders_path=str(orders_path))
    app.dependency_overrides[get_settings] = lambda: settings
    products_module._service_cache = None

    yield settings

    app.dependency_overrides.clear()
    products_module._service_cache = None


def test_e2e_recommendations_from_files(data_files):
    """Test similar products served from the catalog file."""
    response = client.get("/products/1/recommendations")

    assert response.status_code == 200, response.text
    data = response.json()

    assert [p["id"] for p in data][:2] == ["2", "3"]
    assert len(data) == 4
    assert "1" not in [p["id"] for p in data]
    assert data[0]["price"] == 1099
    for product in data:
        assert product["score"] == pytest.approx(sum(product["breakdown"].values()))


def test_e2e_also_bought_from_files(data_files):
    """Test that cancelled orders and unknown products do not count."""
    response = client.get("/products/1/also-bought")

    assert response.status_code == 200, response.text
    assert [p["id"] for p in response.json()] == ["3", "5"]


def test_e2e_reload_picks_up_new_catalog(data_files):
    client.get("/products")
    save_catalog_json(
        [CatalogItem(_id="9", name="Cap", category="Accessories", description="cap")],
        data_files.catalog_path,
    )

    assert [p["id"] for p in client.get("/products").json()][0] == "1"

    response = client.post("/products/reload-data")
    assert response.status_code == 200
    assert [p["id"] for p in client.get("/products").json()] == ["9"]


def test_e2e_missing_data_returns_503(tmp_path):
    settings = Settings(
        catalog_path=str(tmp_path / "missing.json"),
        orders_path=str(tmp_path / "missing.csv"),
    )
    app.dependency_overrides[get_settings] = lambda: settings
    products_module._service_cache = None

    try:
        response = client.get("/products/1/recommendations")

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "StoreUnavailableError"
        assert data["details"]["store"] == "catalog"
    finally:
        app.dependency_overrides.clear()
        products_module._service_cache = None
