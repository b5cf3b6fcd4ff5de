"""CLI script for getting product recommendations.

Useful for testing and evaluation. Loads the catalog and order files and
prints the similar products or also-bought products for one product.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.exceptions import StorefrontError
from src.recommender.service import RecommendationService, RecommenderConfig
from src.recommender.stores import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_ORDERS_PATH,
    InMemoryCatalogStore,
    InMemoryOrderStore,
)

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def build_service(catalog_path: str, orders_path: str, top_n: int) -> RecommendationService:
    catalog = InMemoryCatalogStore.from_json(catalog_path)
    orders = InMemoryOrderStore.from_csv(orders_path, catalog)
    return RecommendationService(catalog, orders, RecommenderConfig(top_n=top_n))


def print_similar(service: RecommendationService, item_id: str, explain: bool) -> None:
    target = service.get_item(item_id)
    recommendations = service.get_recommendations(item_id)

    print(f"\nProducts similar to {target.id} ({target.name}):")
    if not recommendations:
        print("  (none)")
    for rank, rec in enumerate(recommendations, start=1):
        print(f"  {rank}. [{rec.item.id}] {rec.item.name}  score={rec.score:.4f}")
        if explain:
            for channel, value in rec.breakdown.to_dict().items():
                print(f"       {channel:<12} {value:.4f}")


def print_also_bought(service: RecommendationService, item_id: str) -> None:
    products = service.get_also_bought(item_id)

    print(f"\nCustomers who bought {item_id} also bought:")
    if not products:
        print("  (no qualifying orders)")
    for rank, product in enumerate(products, start=1):
        print(f"  {rank}. [{product.id}] {product.name}")


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Get product recommendations for a product",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/recommend_cli.py 7
  python scripts/recommend_cli.py 7 --explain
  python scripts/recommend_cli.py 7 --mode also-bought
        """
    )

    parser.add_argument(
        "item_id",
        type=str,
        help="Product ID to get recommendations for"
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=["similar", "also-bought", "both"],
        default="similar",
        help="similar (TF-IDF), also-bought (co-purchase) or both (default: similar)"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=4,
        help="Number of recommendations to return (default: 4)"
    )

    parser.add_argument(
        "--catalog",
        type=str,
        default=DEFAULT_CATALOG_PATH,
        help=f"Catalog JSON file (default: {DEFAULT_CATALOG_PATH})"
    )

    parser.add_argument(
        "--orders",
        type=str,
        default=DEFAULT_ORDERS_PATH,
        help=f"Order lines CSV file (default: {DEFAULT_ORDERS_PATH})"
    )

    parser.add_argument(
        "--explain",
        action="store_true",
        help="Show per-channel score breakdown for similar products"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        service = build_service(args.catalog, args.orders, args.top_n)
        if args.mode in ("similar", "both"):
            print_similar(service, args.item_id, args.explain)
        if args.mode in ("also-bought", "both"):
            print_also_bought(service, args.item_id)
    except StorefrontError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    print()


if __name__ == "__main__":
    main()
