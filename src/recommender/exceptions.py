"""Custom exceptions for the storefront recommender.

Defines specific exception types for better error handling and reporting.
Each exception carries the HTTP status code the API layer responds with.
"""

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """Base exception for storefront recommender errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ItemNotFoundError(StorefrontError):
    """Raised when a catalog item id does not resolve."""

    def __init__(self, item_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"Product {item_id} not found"
        super().__init__(
            message=message,
            status_code=404,
            details=details or {"item_id": item_id},
        )


class StoreUnavailableError(StorefrontError):
    """Raised when the catalog or order store cannot be read."""

    def __init__(self, store: str, error: Exception):
        message = f"{store} store unavailable: {str(error)}"
        super().__init__(
            message=message,
            status_code=503,
            details={
                "store": store,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class RecommendationError(StorefrontError):
    """Raised when recommendation generation fails."""

    def __init__(self, item_id: str, error: Exception):
        message = f"Failed to generate recommendations for product {item_id}: {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "item_id": item_id,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
