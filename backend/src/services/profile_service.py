"""Service layer for profile operations."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.profile import Profile
from schemas.profile import ProfileUpdate, TimelineEntry

DEFAULT_PROFILE: dict[str, Any] = {
    "name": "Site Owner",
    "avatar": "",
    "bio": "",
    "location": "",
    "email": "",
    "github": "",
    "qq": "",
    "wechat": "",
    "website": "",
    "company": "",
    "position": "",
    "github_username": "",
    "status": {"text": "Coding...", "emoji": "💻"},
    "skills": [],
    "timeline": [],
}


def _apply_defaults(profile: Profile) -> None:
    for field, value in DEFAULT_PROFILE.items():
        # Copy mutable defaults so records never share list/dict instances
        setattr(profile, field, value.copy() if isinstance(value, dict | list) else value)


async def get_profile(db: AsyncSession, user_id: str) -> Profile | None:
    """Get the user's profile, returns None if not exists."""
    query = select(Profile).where(Profile.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_or_create_profile(db: AsyncSession, user_id: str) -> Profile:
    """Get the user's profile, creating the default profile if not exists."""
    profile = await get_profile(db, user_id)
    if profile is None:
        profile = Profile(user_id=user_id)
        _apply_defaults(profile)
        db.add(profile)
        await db.flush()
        await db.refresh(profile)
    return profile


async def update_profile(db: AsyncSession, user_id: str, data: ProfileUpdate) -> Profile:
    """Update only the provided profile fields."""
    profile = await get_or_create_profile(db, user_id)
    updates = data.model_dump(exclude_unset=True, mode="json")
    for field, value in updates.items():
        setattr(profile, field, value)
    profile.updated_at = utc_now()
    await db.flush()
    await db.refresh(profile)
    return profile


async def update_timeline(
    db: AsyncSession, user_id: str, timeline: list[TimelineEntry],
) -> Profile:
    """Replace the profile timeline."""
    profile = await get_or_create_profile(db, user_id)
    profile.timeline = [entry.model_dump() for entry in timeline]
    profile.updated_at = utc_now()
    await db.flush()
    await db.refresh(profile)
    return profile


async def update_skills(db: AsyncSession, user_id: str, skills: list[str]) -> Profile:
    """Replace the skills list."""
    profile = await get_or_create_profile(db, user_id)
    profile.skills = list(skills)
    profile.updated_at = utc_now()
    await db.flush()
    await db.refresh(profile)
    return profile


async def reset_profile(db: AsyncSession, user_id: str) -> Profile:
    """Restore every profile field to its default value."""
    profile = await get_or_create_profile(db, user_id)
    _apply_defaults(profile)
    profile.updated_at = utc_now()
    await db.flush()
    await db.refresh(profile)
    return profile
