"""Catalog and order stores for the recommender.

This module defines the read interfaces the recommenders consume and
in-memory implementations loaded from data files: the catalog as a JSON
array of product documents and the order history as a CSV with one row per
order line.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import numpy as np
import pandas as pd

from src.recommender.exceptions import StoreUnavailableError
from src.recommender.models import CatalogItem, Order, OrderLine

# Configure module logger
logger = logging.getLogger(__name__)

# Data file defaults
DEFAULT_CATALOG_PATH = "data/catalog.json"
DEFAULT_ORDERS_PATH = "data/orders.csv"
ORDER_COLUMNS = ["order_id", "status", "created_at", "product_id", "quantity"]
REQUIRED_ORDER_COLUMNS = {"order_id", "status", "created_at", "product_id"}


class CatalogStore(Protocol):
    """Read access to the product catalog."""

    def get_by_id(self, item_id: str) -> Optional[CatalogItem]:
        ...

    def get_all_except(self, item_id: str) -> List[CatalogItem]:
        ...

    def list_all(self) -> List[CatalogItem]:
        ...


class OrderStore(Protocol):
    """Read access to the order history."""

    def find_containing_item(
        self,
        item_id: str,
        exclude_status: str = "cancelled",
        limit: int = 10,
    ) -> List[Order]:
        ...


class InMemoryCatalogStore:
    """Catalog store over a list of items held in memory.

    Items keep their insertion order, which is the order recommenders use
    to break ties.
    """

    def __init__(self, items: List[CatalogItem]):
        self._items = list(items)
        self._by_id: Dict[str, CatalogItem] = {}
        for item in self._items:
            if item.id in self._by_id:
                raise ValueError(f"Duplicate product id in catalog: {item.id}")
            self._by_id[item.id] = item

    def __len__(self) -> int:
        return len(self._items)

    def get_by_id(self, item_id: str) -> Optional[CatalogItem]:
        return self._by_id.get(str(item_id))

    def get_all_except(self, item_id: str) -> List[CatalogItem]:
        return [item for item in self._items if item.id != str(item_id)]

    def list_all(self) -> List[CatalogItem]:
        return list(self._items)

    @classmethod
    def from_json(cls, json_path: str) -> "InMemoryCatalogStore":
        return cls(load_catalog_json(json_path))


class InMemoryOrderStore:
    """Order store over orders held in memory.

    Line items are resolved against the catalog store at query time, so a
    line pointing at a product the catalog no longer has comes back with
    ``product=None``.
    """

    def __init__(self, orders: List[Order], catalog: CatalogStore):
        self._orders = list(orders)
        self._catalog = catalog

    def __len__(self) -> int:
        return len(self._orders)

    def _resolve(self, order: Order) -> Order:
        lines = [
            replace(line, product=self._catalog.get_by_id(line.product_id))
            for line in order.lines
        ]
        return replace(order, lines=lines)

    def find_containing_item(
        self,
        item_id: str,
        exclude_status: str = "cancelled",
        limit: int = 10,
    ) -> List[Order]:
        """Get the most recent orders that contain a product.

        Args:
            item_id: Product that must appear in the order.
            exclude_status: Orders with this status are left out.
            limit: Maximum number of orders to return.

        Returns:
            Orders newest first, with line items resolved to catalog items.
        """
        item_id = str(item_id)
        matching = [
            order
            for order in self._orders
            if order.status != exclude_status and order.contains(item_id)
        ]
        matching.sort(key=lambda order: order.created_at, reverse=True)
        return [self._resolve(order) for order in matching[:limit]]

    @classmethod
    def from_csv(cls, csv_path: str, catalog: CatalogStore) -> "InMemoryOrderStore":
        return cls(load_orders_csv(csv_path), catalog)


def _drop_missing(record: Dict[str, Any]) -> Dict[str, Any]:
    """Remove fields that are null or that pandas filled with NaN."""
    return {
        key: value
        for key, value in record.items()
        if value is not None and not (isinstance(value, float) and np.isnan(value))
    }


def load_catalog_json(json_path: str) -> List[CatalogItem]:
    """Load catalog items from a JSON array of product documents.

    Args:
        json_path: Path to the JSON file.

    Returns:
        Catalog items in file order.

    Raises:
        StoreUnavailableError: If the file is missing or cannot be parsed.
    """
    json_file = Path(json_path)
    if not json_file.exists():
        raise StoreUnavailableError(
            "catalog", FileNotFoundError(f"Catalog file not found: {json_path}")
        )

    logger.info(f"Loading catalog from {json_path}")
    try:
        df = pd.read_json(json_file, orient="records", dtype=False, convert_dates=False)
        items = [
            CatalogItem.model_validate(_drop_missing(record))
            for record in df.to_dict(orient="records")
        ]
    except (OSError, ValueError) as e:
        logger.error(f"Failed to parse catalog {json_path}: {e}")
        raise StoreUnavailableError("catalog", e) from e

    logger.info(f"Loaded {len(items)} catalog items")
    return items


def load_orders_csv(csv_path: str) -> List[Order]:
    """Load orders from a CSV with one row per order line.

    Expected columns are ``order_id``, ``status``, ``created_at`` and
    ``product_id``, plus an optional ``quantity`` (default 1). Rows of the
    same order keep their file order as the order's line order.

    Raises:
        StoreUnavailableError: If the file is missing, unreadable, lacks
            required columns or has malformed timestamps or quantities.
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise StoreUnavailableError(
            "order", FileNotFoundError(f"Orders file not found: {csv_path}")
        )

    logger.info(f"Loading orders from {csv_path}")
    try:
        df = pd.read_csv(
            csv_file,
            dtype={"order_id": str, "status": str, "product_id": str},
        )
        if not REQUIRED_ORDER_COLUMNS.issubset(df.columns):
            missing = REQUIRED_ORDER_COLUMNS - set(df.columns)
            raise ValueError(f"CSV missing required columns: {missing}")
        df["created_at"] = pd.to_datetime(df["created_at"])
        if df["created_at"].isna().any():
            raise ValueError("CSV has rows without a created_at timestamp")

        if "quantity" not in df.columns:
            df["quantity"] = 1
        df["quantity"] = pd.to_numeric(df["quantity"], errors="raise").fillna(1).astype(int)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to parse orders {csv_path}: {e}")
        raise StoreUnavailableError("order", e) from e

    orders = []
    for order_id, rows in df.groupby("order_id", sort=False):
        first = rows.iloc[0]
        lines = [
            OrderLine(product_id=str(row.product_id), quantity=int(row.quantity))
            for row in rows.itertuples(index=False)
        ]
        orders.append(
            Order(
                order_id=str(order_id),
                status=str(first["status"]),
                created_at=first["created_at"].to_pydatetime(),
                lines=lines,
            )
        )

    logger.info(f"Loaded {len(orders)} orders ({len(df)} order lines)")
    return orders


def save_catalog_json(items: List[CatalogItem], json_path: str) -> None:
    """Write catalog items as a JSON array of product documents."""
    output_path = Path(json_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = [item.model_dump(by_alias=True, exclude_none=True) for item in items]
    pd.DataFrame(records).to_json(output_path, orient="records", indent=2)
    logger.info(f"Saved {len(items)} catalog items to {json_path}")


def save_orders_csv(orders: List[Order], csv_path: str) -> None:
    """Write orders as one CSV row per order line."""
    output_path = Path(csv_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = [
        {
            "order_id": order.order_id,
            "status": order.status,
            "created_at": order.created_at.isoformat(),
            "product_id": line.product_id,
            "quantity": line.quantity,
        }
        for order in orders
        for line in order.lines
    ]
    pd.DataFrame(rows, columns=ORDER_COLUMNS).to_csv(output_path, index=False)
    logger.info(f"Saved {len(orders)} orders to {csv_path}")
