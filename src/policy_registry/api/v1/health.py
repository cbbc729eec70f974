"""Health check endpoints for monitoring system status."""

import time

from beartype import beartype
from fastapi import APIRouter, Depends, Response, status

from ...core.database import Database
from ...core.logging_utils import get_logger
from ...schemas.common import HealthStatus
from ..dependencies import get_db

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
@beartype
async def health_check() -> HealthStatus:
    """Liveness probe; does not touch the database."""
    return HealthStatus(status="healthy")


@router.get("/health/ready")
@beartype
async def readiness_check(
    response: Response,
    db: Database = Depends(get_db),
) -> HealthStatus:
    """Readiness probe; round-trips a query through the pool."""
    start = time.perf_counter()
    result = await db.health_check()
    elapsed_ms = (time.perf_counter() - start) * 1000

    if result.is_err() or not result.unwrap():
        message = (
            result.unwrap_err()
            if result.is_err()
            else "Database returned an unexpected value"
        )
        logger.error("Readiness check failed: %s", message)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthStatus(
            status="unhealthy", response_time_ms=elapsed_ms, message=message
        )

    return HealthStatus(status="healthy", response_time_ms=elapsed_ms)
