"""Recommendation service.

Entry point for the two recommendation operations. Reads the target and the
comparison population from the stores on every call, so nothing derived from
the catalog or the order history outlives a request.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.recommender.also_bought import (
    CANCELLED_STATUS,
    DEFAULT_ORDER_LIMIT,
    rank_also_bought,
)
from src.recommender.exceptions import (
    ItemNotFoundError,
    RecommendationError,
    StorefrontError,
    StoreUnavailableError,
)
from src.recommender.models import CatalogItem, Recommendation
from src.recommender.similarity import DEFAULT_TOP_N, SimilarityRecommender
from src.recommender.stores import CatalogStore, OrderStore

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class RecommenderConfig:
    """Tuning knobs for both recommendation operations.

    Attributes:
        top_n: Maximum number of items either operation returns.
        order_limit: Number of most recent orders inspected for also-bought.
        excluded_status: Order status that never counts as a co-purchase.
        channel_weights: Per-channel multipliers for similarity scores.
            Missing channels use 1.0.
    """

    top_n: int = DEFAULT_TOP_N
    order_limit: int = DEFAULT_ORDER_LIMIT
    excluded_status: str = CANCELLED_STATUS
    channel_weights: Dict[str, float] = field(default_factory=dict)


class RecommendationService:
    """Serves similar-product and also-bought recommendations."""

    def __init__(
        self,
        catalog_store: CatalogStore,
        order_store: OrderStore,
        config: Optional[RecommenderConfig] = None,
    ):
        self.catalog_store = catalog_store
        self.order_store = order_store
        self.config = config or RecommenderConfig()
        self.similarity = SimilarityRecommender(
            top_n=self.config.top_n,
            channel_weights=self.config.channel_weights,
        )

    def get_item(self, item_id: str) -> CatalogItem:
        """Look up a catalog item.

        Raises:
            ItemNotFoundError: If the id does not resolve.
            StoreUnavailableError: If the catalog store fails.
        """
        item = self._read_store("catalog", self.catalog_store.get_by_id, item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def _read_store(self, store: str, func, *args):
        """Call a store method, reporting any failure as the store being down."""
        try:
            return func(*args)
        except StorefrontError:
            raise
        except Exception as e:
            logger.error(
                "Store read failed",
                extra={
                    "store": store,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise StoreUnavailableError(store, e) from e

    def get_recommendations(self, item_id: str) -> List[Recommendation]:
        """Get the products most similar to a product.

        Args:
            item_id: Target product id.

        Returns:
            Up to ``top_n`` recommendations with score and per-channel
            breakdown, highest score first.

        Raises:
            ItemNotFoundError: If the target does not exist.
            StoreUnavailableError: If the catalog store fails.
            RecommendationError: If scoring fails unexpectedly.
        """
        start_time = time.time()

        target = self.get_item(item_id)
        candidates = self._read_store(
            "catalog", self.catalog_store.get_all_except, target.id
        )

        try:
            recommendations = self.similarity.recommend(target, candidates)
        except Exception as e:
            logger.error(
                "Similarity recommendation failed",
                extra={
                    "item_id": item_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise RecommendationError(item_id, e) from e

        logger.info(
            "Similarity recommendations generated",
            extra={
                "item_id": item_id,
                "num_candidates": len(candidates),
                "num_recommendations": len(recommendations),
                "total_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return recommendations

    def get_also_bought(self, item_id: str) -> List[CatalogItem]:
        """Get products frequently bought together with a product.

        An unknown product or one with no qualifying orders yields an empty
        list rather than an error.

        Raises:
            StoreUnavailableError: If the order store fails.
            RecommendationError: If ranking fails unexpectedly.
        """
        start_time = time.time()

        orders = self._read_store(
            "order",
            self.order_store.find_containing_item,
            item_id,
            self.config.excluded_status,
            self.config.order_limit,
        )

        try:
            products = rank_also_bought(
                item_id,
                orders,
                top_n=self.config.top_n,
                excluded_status=self.config.excluded_status,
            )
        except Exception as e:
            logger.error(
                "Also-bought recommendation failed",
                extra={
                    "item_id": item_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise RecommendationError(item_id, e) from e

        logger.info(
            "Also-bought recommendations generated",
            extra={
                "item_id": item_id,
                "num_orders": len(orders),
                "num_recommendations": len(products),
                "total_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return products
