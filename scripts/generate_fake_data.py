"""Generate a fake product catalog and order history for development.

Writes a catalog JSON of clothing products and an order-lines CSV with
simulated orders, some of them cancelled, that the API can serve.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_catalog
        items = generate_fake_catalog(num_products=40)
"""

import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

import pandas as pd

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.models import CatalogItem, Order, OrderLine
from src.recommender.stores import save_catalog_json, save_orders_csv

# Default configuration constants
DEFAULT_NUM_PRODUCTS = 40
DEFAULT_NUM_ORDERS = 200
DEFAULT_MAX_LINES = 4
DEFAULT_DAYS_BACK = 90
DEFAULT_CANCEL_RATE = 0.1
SECONDS_PER_DAY = 86400

CATEGORIES = ["Men", "Women", "Kids", "Accessories"]
GARMENTS = {
    "Men": ["Shirt", "Chinos", "Jacket", "T-Shirt", "Kurta", "Blazer"],
    "Women": ["Dress", "Blouse", "Saree", "Skirt", "Cardigan", "Jeans"],
    "Kids": ["Hoodie", "Shorts", "Romper", "Sweater", "Joggers"],
    "Accessories": ["Scarf", "Belt", "Cap", "Tote Bag", "Wallet"],
}
ADJECTIVES = ["Classic", "Slim Fit", "Premium", "Vintage", "Organic", "Festive", "Casual"]
MATERIALS = ["cotton", "linen", "silk", "denim", "wool", "leather", "polyester"]
OCCASIONS = ["everyday wear", "formal occasions", "weekend outings", "festive events", "travel"]
COLORS = ["Red", "Blue", "White", "Black", "Grey", "Beige", "Navy", "Green", "Pink"]
SIZES = ["S", "M", "L", "XL"]
ORDER_STATUSES = ["pending", "confirmed", "shipped", "delivered"]


def generate_fake_catalog(
    num_products: int = DEFAULT_NUM_PRODUCTS,
    seed: Optional[int] = None,
) -> List[CatalogItem]:
    """Generate catalog items with random names, descriptions and colors.

    Args:
        num_products: Number of products. Must be positive.
        seed: Random seed for reproducibility.

    Returns:
        Catalog items with ids "1" to str(num_products).

    Raises:
        ValueError: If num_products is not positive.
    """
    if num_products <= 0:
        raise ValueError("num_products must be positive")

    rng = random.Random(seed)
    items = []

    for product_id in range(1, num_products + 1):
        category = rng.choice(CATEGORIES)
        garment = rng.choice(GARMENTS[category])
        material = rng.choice(MATERIALS)
        price = rng.randrange(499, 4999, 50)

        items.append(
            CatalogItem(
                _id=str(product_id),
                name=f"{rng.choice(ADJECTIVES)} {garment}",
                category=category,
                description=(
                    f"{material.capitalize()} {garment.lower()} "
                    f"made for {rng.choice(OCCASIONS)}."
                ),
                colors=rng.sample(COLORS, rng.randint(1, 3)),
                price=price,
                sizes=SIZES if category != "Accessories" else [],
                stock=rng.randint(0, 50),
                featured=rng.random() < 0.2,
                rating=round(rng.uniform(3.5, 5.0), 1),
                reviews=rng.randint(0, 60),
            )
        )

    return items


def generate_fake_orders(
    product_ids: List[str],
    num_orders: int = DEFAULT_NUM_ORDERS,
    max_lines: int = DEFAULT_MAX_LINES,
    cancel_rate: float = DEFAULT_CANCEL_RATE,
    end_date: Optional[datetime] = None,
    seed: Optional[int] = None,
) -> List[Order]:
    """Generate orders over a set of products.

    Orders hold 1 to ``max_lines`` distinct products and get a random
    timestamp within the last 90 days. About ``cancel_rate`` of them are
    cancelled.

    Raises:
        ValueError: If there are no products or num_orders is not positive.
    """
    if not product_ids:
        raise ValueError("product_ids must not be empty")
    if num_orders <= 0:
        raise ValueError("num_orders must be positive")

    rng = random.Random(seed)
    if end_date is None:
        end_date = datetime.now()
    start_date = end_date - timedelta(days=DEFAULT_DAYS_BACK)

    orders = []
    for order_number in range(1, num_orders + 1):
        n_lines = rng.randint(1, min(max_lines, len(product_ids)))
        lines = [
            OrderLine(product_id=product_id, quantity=rng.randint(1, 3))
            for product_id in rng.sample(product_ids, n_lines)
        ]
        status = (
            "cancelled" if rng.random() < cancel_rate else rng.choice(ORDER_STATUSES)
        )
        created_at = start_date + timedelta(
            days=rng.randrange(DEFAULT_DAYS_BACK),
            seconds=rng.randrange(SECONDS_PER_DAY),
        )
        orders.append(
            Order(
                order_id=f"ORD-{order_number:05d}",
                status=status,
                created_at=created_at,
                lines=lines,
            )
        )

    orders.sort(key=lambda order: order.created_at)
    return orders


def main() -> None:
    """Generate default data and save it under data/."""
    print(
        f"Generating {DEFAULT_NUM_PRODUCTS} products and "
        f"{DEFAULT_NUM_ORDERS} orders..."
    )

    try:
        items = generate_fake_catalog(seed=42)
        orders = generate_fake_orders([item.id for item in items], seed=42)
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    data_dir = project_root / "data"
    catalog_path = data_dir / "catalog.json"
    orders_path = data_dir / "orders.csv"

    save_catalog_json(items, str(catalog_path))
    save_orders_csv(orders, str(orders_path))

    lines = pd.read_csv(orders_path)
    print(f"\nData generated successfully!")
    print(f"Catalog saved to: {catalog_path}")
    print(f"Orders saved to: {orders_path}")
    print(f"\nOrder summary:")
    print(f"  Orders: {lines['order_id'].nunique()}")
    print(f"  Order lines: {len(lines)}")
    print(f"  Orders by status:")
    print(lines.drop_duplicates("order_id")["status"].value_counts().to_string())


if __name__ == "__main__":
    main()
