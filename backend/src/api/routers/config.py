"""Site configuration endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_site_user_id
from schemas.envelope import ApiResponse
from schemas.user_config import GithubTokenUpdate, UserConfigResponse
from services import config_service

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("", response_model=ApiResponse[UserConfigResponse])
async def get_config(
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserConfigResponse]:
    """
    Get the site configuration.

    Creates an empty configuration if none exists.
    """
    config = await config_service.get_or_create_config(db, user_id)
    return ApiResponse(data=UserConfigResponse.model_validate(config))


@router.post("/github-token", response_model=ApiResponse[UserConfigResponse])
async def update_github_token(
    data: GithubTokenUpdate,
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserConfigResponse]:
    """Set the site-level GitHub token used for repository listing."""
    config = await config_service.set_github_token(db, user_id, data.token)
    return ApiResponse(data=UserConfigResponse.model_validate(config))


@router.delete("/github-token", response_model=ApiResponse[UserConfigResponse])
async def delete_github_token(
    user_id: str = Depends(get_site_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserConfigResponse]:
    """Remove the site-level GitHub token."""
    config = await config_service.clear_github_token(db, user_id)
    return ApiResponse(data=UserConfigResponse.model_validate(config))
