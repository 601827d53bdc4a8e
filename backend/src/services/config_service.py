"""Service layer for site configuration operations."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.user_config import UserConfig


async def get_config(db: AsyncSession, user_id: str) -> UserConfig | None:
    """Get the site configuration, returns None if not exists."""
    query = select(UserConfig).where(UserConfig.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_or_create_config(db: AsyncSession, user_id: str) -> UserConfig:
    """Get the site configuration, creating an empty one if not exists."""
    config = await get_config(db, user_id)
    if config is None:
        config = UserConfig(user_id=user_id, github_token=None, preferences={})
        db.add(config)
        await db.flush()
        await db.refresh(config)
    return config


async def set_github_token(db: AsyncSession, user_id: str, token: str) -> UserConfig:
    """Store the site-level GitHub token."""
    config = await get_or_create_config(db, user_id)
    config.github_token = token.strip()
    config.updated_at = utc_now()
    await db.flush()
    await db.refresh(config)
    return config


async def clear_github_token(db: AsyncSession, user_id: str) -> UserConfig:
    """Remove the site-level GitHub token."""
    config = await get_or_create_config(db, user_id)
    config.github_token = None
    config.updated_at = utc_now()
    await db.flush()
    await db.refresh(config)
    return config
