"""Health endpoint for load balancers and deploy checks."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session
from schemas.envelope import ApiResponse
from schemas.health import HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ApiResponse[HealthStatus])
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[HealthStatus]:
    """
    Report whether the API can reach its database.

    Answers 200 while the process is up. An unreachable database is reported
    as status "degraded" rather than as an error response.
    """
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        return ApiResponse(data=HealthStatus(status="degraded", database="unhealthy"))
    return ApiResponse(data=HealthStatus(status="healthy", database="healthy"))
