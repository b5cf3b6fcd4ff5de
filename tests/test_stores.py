"""Tests for the catalog and order stores."""

import json
from datetime import datetime, timedelta
from pathlib import Path

import pandas as pd
import pytest

from src.recommender.exceptions import StoreUnavailableError
from src.recommender.models import CatalogItem, Order, OrderLine, transform_item
from src.recommender.stores import (
    InMemoryCatalogStore,
    InMemoryOrderStore,
    load_catalog_json,
    load_orders_csv,
)


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Write a catalog JSON file with three products."""
    documents = [
        {
            "_id": "p1",
            "name": "Classic Oxford Shirt",
            "description": "Premium cotton oxford shirt.",
            "price": 2499,
            "category": "Men",
            "colors": ["Blue", "White"],
            "sizes": ["S", "M"],
            "stock": 25,
            "inStock": True,
            "featured": True,
            "rating": 4.6,
            "reviews": 28,
        },
        {
            "_id": "p2",
            "name": "Slim Fit Chinos",
            "description": "Comfortable stretch chinos in beige.",
            "price": 1999,
            "originalPrice": 2499,
            "category": "Men",
            "colors": ["Beige"],
        },
        {
            "_id": "p3",
            "name": "Floral Dress",
            "description": "Light summer dress.",
            "category": "Women",
            "colors": [],
        },
    ]
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(documents))
    return path


@pytest.fixture
def orders_file(tmp_path: Path) -> Path:
    """Write an order-lines CSV."""
    df = pd.DataFrame(
        [
            ("o1", "delivered", "2024-03-01T10:00:00", "p1", 1),
            ("o1", "delivered", "2024-03-01T10:00:00", "p2", 2),
            ("o2", "cancelled", "2024-03-05T10:00:00", "p1", 1),
            ("o2", "cancelled", "2024-03-05T10:00:00", "p3", 1),
            ("o3", "shipped", "2024-03-03T10:00:00", "p3", 1),
            ("o3", "shipped", "2024-03-03T10:00:00", "p1", 1),
            ("o3", "shipped", "2024-03-03T10:00:00", "gone", 1),
        ],
        columns=["order_id", "status", "created_at", "product_id", "quantity"],
    )
    path = tmp_path / "orders.csv"
    df.to_csv(path, index=False)
    return path


def test_load_catalog_keeps_file_order(catalog_file):
    items = load_catalog_json(str(catalog_file))

    assert [item.id for item in items] == ["p1", "p2", "p3"]
    assert items[0].colors == ["Blue", "White"]
    assert items[1].original_price == 2499
    assert items[2].price is None


def test_load_catalog_missing_file_raises(tmp_path):
    with pytest.raises(StoreUnavailableError) as exc_info:
        load_catalog_json(str(tmp_path / "missing.json"))

    assert exc_info.value.status_code == 503


def test_load_catalog_invalid_document_raises(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"_id": "p1", "category": "Men"}]))

    with pytest.raises(StoreUnavailableError):
        load_catalog_json(str(path))


def test_catalog_store_lookups(catalog_file):
    store = InMemoryCatalogStore.from_json(str(catalog_file))

    assert store.get_by_id("p2").name == "Slim Fit Chinos"
    assert store.get_by_id("nope") is None
    assert [item.id for item in store.get_all_except("p2")] == ["p1", "p3"]
    assert len(store.list_all()) == 3


def test_catalog_store_rejects_duplicate_ids():
    item = CatalogItem(_id="1", name="x", category="y", description="z")

    with pytest.raises(ValueError, match="Duplicate"):
        InMemoryCatalogStore([item, item])


def test_load_orders_groups_lines(orders_file):
    orders = load_orders_csv(str(orders_file))
    by_id = {order.order_id: order for order in orders}

    assert set(by_id) == {"o1", "o2", "o3"}
    assert [line.product_id for line in by_id["o3"].lines] == ["p3", "p1", "gone"]
    assert by_id["o1"].lines[1].quantity == 2
    assert by_id["o2"].status == "cancelled"


def test_load_orders_missing_columns_raises(tmp_path):
    path = tmp_path / "orders.csv"
    pd.DataFrame({"order_id": ["o1"], "product_id": ["p1"]}).to_csv(path, index=False)

    with pytest.raises(StoreUnavailableError, match="missing required columns"):
        load_orders_csv(str(path))


def test_load_orders_bad_quantity_raises(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text(
        "order_id,status,created_at,product_id,quantity\n"
        "o1,delivered,2024-01-01,A,abc\n"
    )

    with pytest.raises(StoreUnavailableError) as exc_info:
        load_orders_csv(str(path))

    assert exc_info.value.status_code == 503
    assert exc_info.value.details["store"] == "order"


def test_load_orders_bad_timestamp_raises(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text(
        "order_id,status,created_at,product_id,quantity\n"
        "o1,delivered,,A,1\n"
    )

    with pytest.raises(StoreUnavailableError):
        load_orders_csv(str(path))


def test_load_orders_missing_file_raises(tmp_path):
    with pytest.raises(StoreUnavailableError):
        load_orders_csv(str(tmp_path / "missing.csv"))


def test_find_containing_item(catalog_file, orders_file):
    """Test newest-first order, cancelled exclusion and line resolution."""
    catalog = InMemoryCatalogStore.from_json(str(catalog_file))
    store = InMemoryOrderStore.from_csv(str(orders_file), catalog)

    orders = store.find_containing_item("p1")

    assert [order.order_id for order in orders] == ["o3", "o1"]
    lines = orders[0].lines
    assert lines[0].product.id == "p3"
    assert lines[2].product is None


def test_find_containing_item_limit_and_status(catalog_file, orders_file):
    catalog = InMemoryCatalogStore.from_json(str(catalog_file))
    store = InMemoryOrderStore.from_csv(str(orders_file), catalog)

    assert [o.order_id for o in store.find_containing_item("p1", limit=1)] == ["o3"]
    assert [
        o.order_id for o in store.find_containing_item("p1", exclude_status="shipped")
    ] == ["o2", "o1"]
    assert store.find_containing_item("p9") == []


def test_find_containing_item_default_limit_is_ten():
    """Test that only the ten most recent qualifying orders come back."""
    start = datetime(2024, 1, 1)
    orders = [
        Order(f"o{day}", "delivered", start + timedelta(days=day), [OrderLine("p1")])
        for day in range(11)
    ]
    store = InMemoryOrderStore(orders, InMemoryCatalogStore([]))

    found = store.find_containing_item("p1")

    assert len(found) == 10
    assert found[0].order_id == "o10"
    assert "o0" not in [order.order_id for order in found]


def test_transform_item_exposes_id(catalog_file):
    item = load_catalog_json(str(catalog_file))[0]

    public = transform_item(item)

    assert public["id"] == "p1"
    assert "_id" not in public
    assert public["inStock"] is True
    assert public["colors"] == ["Blue", "White"]
