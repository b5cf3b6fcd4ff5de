"""FastAPI application main module.

This module defines the FastAPI application instance, registers the error
handlers and middleware, and serves the health check and metrics endpoints
for the storefront recommendation service.
"""

import logging
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.config import get_settings
from src.api.logging_config import RequestLoggingMiddleware, setup_logging
from src.api.metrics import metrics_service
from src.api.routes import products
from src.recommender.exceptions import StorefrontError

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title=settings.app_name,
    description="Similar-product and also-bought recommendations for the storefront",
    version="0.1.0",
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(products.router)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Render recommender errors as JSON with their status code."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        exc.message,
        extra={
            "path": str(request.url.path),
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns:
        Dictionary with status key set to "ok".

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/metrics")
def get_metrics() -> Dict:
    """Call counts and latency per recommendation operation."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import sys
    from pathlib import Path

    import uvicorn

    # Add project root to Python path for imports
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
