"""Version endpoint - lightweight staleness check for client caches."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_site_user_id
from schemas.envelope import ApiResponse
from schemas.version import VersionSnapshot
from services import version_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/version", tags=["version"])


@router.get("", response_model=ApiResponse[VersionSnapshot])
async def get_versions(
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[VersionSnapshot]:
    """
    Get the last modification time of profile, todos and config.

    Values are epoch milliseconds encoded as strings, "0" when the resource has
    no record. Clients compare them with their cached version stamps and refetch
    the full resource only on mismatch.
    """
    try:
        snapshot = await version_service.get_versions(db, user_id)
    except SQLAlchemyError as e:
        logger.exception("Failed to compute version snapshot")
        raise HTTPException(status_code=500, detail="Failed to get versions") from e
    return ApiResponse(data=snapshot)
