"""FastAPI application module for the storefront recommender.

This module contains the FastAPI application, route handlers, and API
endpoints for serving products and their recommendations.
"""
