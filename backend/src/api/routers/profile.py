"""Profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_site_user_id
from schemas.envelope import ApiResponse
from schemas.profile import ProfileResponse, ProfileUpdate, SkillsUpdate, TimelineUpdate
from services import profile_service

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ApiResponse[ProfileResponse])
async def get_profile(
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[ProfileResponse]:
    """
    Get the site profile.

    Creates the default profile if none exists.
    """
    profile = await profile_service.get_or_create_profile(db, user_id)
    return ApiResponse(data=ProfileResponse.model_validate(profile))


@router.put("", response_model=ApiResponse[ProfileResponse])
async def update_profile(
    data: ProfileUpdate,
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[ProfileResponse]:
    """Update profile fields. Fields not provided are left unchanged."""
    profile = await profile_service.update_profile(db, user_id, data)
    return ApiResponse(data=ProfileResponse.model_validate(profile))


@router.put("/timeline", response_model=ApiResponse[ProfileResponse])
async def update_timeline(
    data: TimelineUpdate,
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[ProfileResponse]:
    """Replace the profile timeline."""
    profile = await profile_service.update_timeline(db, user_id, data.timeline)
    return ApiResponse(data=ProfileResponse.model_validate(profile))


@router.put("/skills", response_model=ApiResponse[ProfileResponse])
async def update_skills(
    data: SkillsUpdate,
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[ProfileResponse]:
    """Replace the skills list."""
    profile = await profile_service.update_skills(db, user_id, data.skills)
    return ApiResponse(data=ProfileResponse.model_validate(profile))


@router.post("/reset", response_model=ApiResponse[ProfileResponse])
async def reset_profile(
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[ProfileResponse]:
    """Restore the default profile."""
    profile = await profile_service.reset_profile(db, user_id)
    return ApiResponse(data=ProfileResponse.model_validate(profile))
