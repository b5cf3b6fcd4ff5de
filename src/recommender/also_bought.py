"""Co-purchase ("also bought") recommendations.

Ranks products by how often they appear in the same recent orders as a
target product.
"""

import logging
from typing import Dict, Iterable, List

from src.recommender.models import CatalogItem, Order

# Configure module logger
logger = logging.getLogger(__name__)

# Default parameters
DEFAULT_TOP_N = 4
DEFAULT_ORDER_LIMIT = 10
CANCELLED_STATUS = "cancelled"


def count_co_occurrences(
    target_id: str,
    orders: Iterable[Order],
    excluded_status: str = CANCELLED_STATUS,
) -> Dict[str, int]:
    """Tally how often other products appear next to the target.

    Every order line other than the target adds 1 to its product's tally,
    so a product listed twice in one order counts twice. Quantities are
    ignored. Lines whose product reference did not resolve are skipped.
    Orders with the excluded status never count.

    Returns:
        Product id to tally, in first-encounter order.
    """
    tallies: Dict[str, int] = {}
    skipped = 0

    for order in orders:
        if order.status == excluded_status:
            logger.debug(f"Ignoring {excluded_status} order {order.order_id}")
            continue

        for line in order.lines:
            if line.product is None:
                skipped += 1
                continue

            product_id = line.product.id
            if product_id == target_id:
                continue
            tallies[product_id] = tallies.get(product_id, 0) + 1

    if skipped:
        logger.info(
            "Skipped unresolved order lines",
            extra={"target_id": target_id, "skipped_lines": skipped},
        )

    return tallies


def rank_also_bought(
    target_id: str,
    orders: Iterable[Order],
    top_n: int = DEFAULT_TOP_N,
    excluded_status: str = CANCELLED_STATUS,
) -> List[CatalogItem]:
    """Get products most often bought together with the target.

    Args:
        target_id: Product to find companions for.
        orders: Recent orders containing the target, most recent first.
        top_n: Maximum number of products to return.
        excluded_status: Order status that never counts.

    Returns:
        Resolved catalog items ranked by tally, highest first. Ties keep
        the order in which the products were first seen. Empty when no
        order qualifies.
    """
    orders = list(orders)
    if not orders:
        return []

    products: Dict[str, CatalogItem] = {}
    for order in orders:
        for line in order.lines:
            if line.product is not None:
                products.setdefault(line.product.id, line.product)

    tallies = count_co_occurrences(target_id, orders, excluded_status)
    ranked = sorted(tallies.items(), key=lambda entry: entry[1], reverse=True)

    return [products[product_id] for product_id, _ in ranked[:top_n]]
