"""
Version snapshot of the tracked resources.

Clients cache profile, todos and config locally and call GET /api/version to find
out whether their copy is stale. The snapshot is recomputed from storage on every
request and never persisted.
"""
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.profile import Profile
from models.todo import Todo
from models.user_config import UserConfig
from schemas.version import VersionSnapshot


def epoch_ms(dt: datetime | None) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Naive datetimes are assumed to be UTC (SQLite drops the offset of
    TIMESTAMP WITH TIME ZONE columns). None converts to 0.
    """
    if dt is None:
        return 0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


async def get_versions(db: AsyncSession, user_id: str) -> VersionSnapshot:
    """
    Compute the current version stamp of each resource.

    - profile/config: updated_at of the user's single record
    - todos: the most recent updated_at across all items

    Storage errors propagate to the caller.
    """
    profile_updated = await db.scalar(
        select(Profile.updated_at).where(Profile.user_id == user_id),
    )
    todos_updated = await db.scalar(select(func.max(Todo.updated_at)))
    config_updated = await db.scalar(
        select(UserConfig.updated_at).where(UserConfig.user_id == user_id),
    )

    return VersionSnapshot(
        profile=str(epoch_ms(profile_updated)),
        todos=str(epoch_ms(todos_updated)),
        config=str(epoch_ms(config_updated)),
    )
