"""Storefront recommender: product recommendations for an e-commerce storefront.

This package provides a backend service that recommends products similar to
a given product (TF-IDF over product text) and products frequently bought
together with it (co-purchase counts over recent orders).

Modules:
    api: FastAPI application and REST API endpoints
    recommender: Scoring, ranking and the catalog/order stores
"""

__version__ = "0.1.0"
