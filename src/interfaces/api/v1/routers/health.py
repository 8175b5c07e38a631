"""
Health check endpoint for API monitoring.

This module provides a simple health check endpoint that can be used
by load balancers and monitoring systems to verify API availability.
"""

from fastapi import APIRouter

from src.interfaces.api.v1.schemas import HealthResponse
from src.shared.utils import now_utc

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Check the health status of the API.

    Returns:
        HealthResponse: Status and the server time in UTC
    """
    return HealthResponse(status="ok", timestamp=now_utc())
