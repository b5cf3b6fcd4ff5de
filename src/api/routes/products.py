"""Product and recommendation endpoints for the storefront API.

This module serves the product catalog and the two recommendation lists
shown on a product page: similar products (TF-IDF over name, category,
description and colors) and products frequently bought together.
"""

import logging
import time
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from src.api.config import Settings, get_settings
from src.api.metrics import metrics_service
from src.recommender.models import transform_item
from src.recommender.service import RecommendationService
from src.recommender.stores import InMemoryCatalogStore, InMemoryOrderStore

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/products",
    tags=["products"],
)

# Cache for the loaded stores and the service built on them
_service_cache: Optional[RecommendationService] = None


class ProductResponse(BaseModel):
    """Public product shape.

    Identity is exposed as ``id``; storefront fields the catalog documents
    carry (price, images, stock and so on) pass through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Product ID")
    name: str
    category: str
    description: str
    colors: List[str] = Field(default_factory=list)


class ScoreBreakdownResponse(BaseModel):
    """Per-channel similarity scores."""

    name: float
    category: float
    description: float
    colors: float


class RecommendedProductResponse(ProductResponse):
    """Product with its similarity score and per-channel breakdown."""

    score: float = Field(..., description="Sum of the breakdown scores")
    breakdown: ScoreBreakdownResponse


def load_service(settings: Settings) -> RecommendationService:
    """Build the recommendation service from the configured data files.

    Raises:
        StoreUnavailableError: If the catalog or order file cannot be read.
    """
    logger.info(
        "Loading stores",
        extra={
            "catalog_path": settings.catalog_path,
            "orders_path": settings.orders_path,
        },
    )
    catalog = InMemoryCatalogStore.from_json(settings.catalog_path)
    orders = InMemoryOrderStore.from_csv(settings.orders_path, catalog)

    logger.info(
        "Stores loaded",
        extra={"num_products": len(catalog), "num_orders": len(orders)},
    )
    return RecommendationService(catalog, orders, settings.recommender_config())


def get_recommendation_service(
    settings: Settings = Depends(get_settings),
) -> RecommendationService:
    """Get the recommendation service, loading the stores on first use."""
    global _service_cache

    if _service_cache is None:
        _service_cache = load_service(settings)
    return _service_cache


def _timed(operation: str, func, *args):
    """Run a service call and record its latency."""
    start_time = time.time()
    failed = False
    try:
        return func(*args)
    except Exception:
        failed = True
        raise
    finally:
        latency_ms = (time.time() - start_time) * 1000
        metrics_service.record(operation, latency_ms, error=failed)


@router.get("", response_model=List[ProductResponse])
def list_products(
    service: RecommendationService = Depends(get_recommendation_service),
) -> List[Dict]:
    """List all catalog products."""
    return [transform_item(item) for item in service.catalog_store.list_all()]


@router.post("/reload-data")
def reload_data(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    """Reload the catalog and order files.

    Drops the cached stores and loads them again, so edits to the data files
    show up without restarting the server.
    """
    global _service_cache

    logger.info("Reloading catalog and order data...")
    _service_cache = None
    _service_cache = load_service(settings)
    return {"status": "Data reloaded successfully"}


@router.get("/{item_id}", response_model=ProductResponse)
def get_product(
    item_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> Dict:
    """Get a single product.

    Raises:
        ItemNotFoundError: If the product does not exist (404).
    """
    return transform_item(service.get_item(item_id))


@router.get("/{item_id}/recommendations", response_model=List[RecommendedProductResponse])
def get_recommendations(
    item_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> List[Dict]:
    """Get products similar to a product.

    Every product in the catalog other than the target is scored on name,
    category, description and colors; the response holds the top matches
    with their total score and per-channel breakdown.

    Example:
        GET /products/42/recommendations
    """
    logger.info(f"Generating similar products for {item_id}")
    recommendations = _timed("recommendations", service.get_recommendations, item_id)
    return [rec.to_dict() for rec in recommendations]


@router.get("/{item_id}/also-bought", response_model=List[ProductResponse])
def get_also_bought(
    item_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> List[Dict]:
    """Get products customers bought together with a product.

    Looks at the most recent non-cancelled orders containing the product.
    Returns an empty list when there are none.
    """
    logger.info(f"Generating also-bought products for {item_id}")
    products = _timed("also_bought", service.get_also_bought, item_id)
    return [transform_item(product) for product in products]
