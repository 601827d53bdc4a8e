"""Tests for the version snapshot service."""
from datetime import UTC, datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from schemas.todo import TodoCreate, TodoUpdate
from services import config_service, profile_service, todo_service
from services.version_service import epoch_ms, get_versions

USER_ID = "default"


class TestEpochMs:
    """Tests for datetime to epoch milliseconds conversion."""

    def test_none_is_zero(self) -> None:
        assert epoch_ms(None) == 0

    def test_aware_datetime(self) -> None:
        dt = datetime(2024, 1, 1, 0, 0, 0, 123000, tzinfo=UTC)
        assert epoch_ms(dt) == 1704067200123

    def test_naive_datetime_is_utc(self) -> None:
        """Naive values (as returned by SQLite) are read as UTC."""
        naive = datetime(2024, 1, 1, 0, 0, 0, 123000)
        assert epoch_ms(naive) == 1704067200123

    def test_other_offset(self) -> None:
        dt = datetime(2024, 1, 1, 2, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert epoch_ms(dt) == 1704067200000


async def test__get_versions__empty(db_session: AsyncSession) -> None:
    """No records gives "0" for every resource."""
    snapshot = await get_versions(db_session, USER_ID)

    assert snapshot.profile == "0"
    assert snapshot.todos == "0"
    assert snapshot.config == "0"


async def test__get_versions__profile_and_config(db_session: AsyncSession) -> None:
    """Single-record resources report their record's updated_at."""
    profile = await profile_service.get_or_create_profile(db_session, USER_ID)
    config = await config_service.get_or_create_config(db_session, USER_ID)

    snapshot = await get_versions(db_session, USER_ID)

    assert snapshot.profile == str(epoch_ms(profile.updated_at))
    assert snapshot.config == str(epoch_ms(config.updated_at))


async def test__get_versions__scoped_to_user(db_session: AsyncSession) -> None:
    """Another owner's profile does not count."""
    await profile_service.get_or_create_profile(db_session, "someone-else")

    snapshot = await get_versions(db_session, USER_ID)

    assert snapshot.profile == "0"


async def test__get_versions__todos_uses_latest_update(db_session: AsyncSession) -> None:
    """The todos stamp moves when an older todo is updated."""
    first = await todo_service.create_todo(db_session, TodoCreate(text="first"))
    await todo_service.create_todo(db_session, TodoCreate(text="second"))
    first = await todo_service.update_todo(db_session, first.id, TodoUpdate(completed=True))

    snapshot = await get_versions(db_session, USER_ID)

    assert snapshot.todos == str(epoch_ms(first.updated_at))
