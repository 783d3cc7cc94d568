"""
Health check route.

This endpoint is PUBLIC (no authentication required) and provides a simple
status check for load balancers, monitoring, and deployment verification.
It does not touch the database or Gemini.
"""

from fastapi import APIRouter

from backend.schemas.health import HealthResponse
from backend.utils.logging import get_logger

logger = get_logger(__name__)

# Mounted at root level in main.py
router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint (no authentication required). "
        "Returns a simple status indicator for monitoring and load balancing."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "invoice-analytics-backend"
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse()
