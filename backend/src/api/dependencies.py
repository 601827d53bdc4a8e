"""FastAPI dependencies for injection."""
from fastapi import Depends

from core.config import Settings, get_settings
from db.session import get_async_session


def get_site_user_id(settings: Settings = Depends(get_settings)) -> str:
    """Owner key of the single-record resources (profile, config)."""
    return settings.site_user_id


__all__ = [
    "get_async_session",
    "get_settings",
    "get_site_user_id",
]
