"""Seed script to populate the local dev database with a sample profile and todos.

Usage:
    PYTHONPATH=backend/src python backend/scripts/seed_data.py populate
    PYTHONPATH=backend/src python backend/scripts/seed_data.py populate --force
    PYTHONPATH=backend/src python backend/scripts/seed_data.py clear
"""

import argparse
import asyncio

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import get_settings
from models import Profile, Todo, UserConfig
from schemas.profile import ProfileUpdate
from services import config_service, profile_service

PROFILE = {
    'name': 'Ada Example',
    'bio': 'Backend developer who likes small tools and long walks.',
    'location': 'Berlin',
    'email': 'ada@example.com',
    'github': 'https://github.com/octocat',
    'website': 'https://example.com',
    'company': 'Example GmbH',
    'position': 'Software Engineer',
    'github_username': 'octocat',
    'status': {'text': 'Shipping', 'emoji': '🚀'},
    'skills': ['Python', 'FastAPI', 'PostgreSQL', 'Vue'],
    'timeline': [
        {
            'year': '2024',
            'title': 'Software Engineer',
            'company': 'Example GmbH',
            'description': 'APIs and data pipelines.',
        },
        {
            'year': '2020',
            'title': 'B.Sc. Computer Science',
            'company': 'Example University',
            'description': '',
        },
    ],
}

TODOS = [
    {'text': 'Write the release notes', 'priority': 'high', 'category': 'Work'},
    {'text': 'Review open pull requests', 'priority': 'medium', 'category': 'Work'},
    {'text': 'Finish the SQLAlchemy chapter', 'priority': 'medium', 'category': 'Study'},
    {'text': 'Book dentist appointment', 'priority': 'low', 'category': 'Life'},
    {'text': 'Water the plants', 'priority': 'low', 'category': 'Life', 'completed': True},
]


async def create_profile(session: AsyncSession, user_id: str) -> None:
    """Create the sample profile."""
    await profile_service.update_profile(session, user_id, ProfileUpdate(**PROFILE))
    print(f'  Created profile "{PROFILE["name"]}" for user {user_id}')


async def create_config(session: AsyncSession, user_id: str) -> None:
    """Create an empty site configuration."""
    await config_service.get_or_create_config(session, user_id)
    print(f'  Created config for user {user_id}')


async def create_todos(session: AsyncSession) -> None:
    """Create the sample todos."""
    for data in TODOS:
        session.add(Todo(**data))
    await session.flush()
    completed = sum(1 for data in TODOS if data.get('completed'))
    print(f'  Created {len(TODOS)} todos ({completed} completed)')


async def clear_data(session: AsyncSession, user_id: str) -> None:
    """Clear the profile, configuration and all todos."""
    todo_count = (await session.execute(select(func.count()).select_from(Todo))).scalar()

    await session.execute(delete(Profile).where(Profile.user_id == user_id))
    await session.execute(delete(UserConfig).where(UserConfig.user_id == user_id))
    await session.execute(delete(Todo))
    await session.flush()

    print(f'  Deleted profile, config and {todo_count} todos')
    print('Clear complete.')


async def populate(force: bool = False) -> None:
    """Populate the database with seed data."""
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        try:
            todo_count = (await session.execute(select(func.count()).select_from(Todo))).scalar()
            if todo_count and todo_count > 0:
                if force:
                    print('Existing data found, clearing first (--force)...')
                    await clear_data(session, settings.site_user_id)
                else:
                    print(f'Data already exists ({todo_count} todos). Use --force to clear and re-seed.')
                    return

            print('Populating seed data...')
            await create_profile(session, settings.site_user_id)
            await create_config(session, settings.site_user_id)
            await create_todos(session)
            await session.commit()
            print('Seed data created successfully.')
        except Exception:
            await session.rollback()
            raise
        finally:
            await engine.dispose()


async def clear() -> None:
    """Clear all seeded data."""
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        try:
            await clear_data(session, settings.site_user_id)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await engine.dispose()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description='Seed the dev database with test data.')
    subparsers = parser.add_subparsers(dest='command', required=True)

    populate_parser = subparsers.add_parser('populate', help='Populate database with test data')
    populate_parser.add_argument(
        '--force', action='store_true',
        help='Clear existing data before populating',
    )

    subparsers.add_parser('clear', help='Remove all seeded data')

    args = parser.parse_args()

    if args.command == 'populate':
        asyncio.run(populate(force=args.force))
    elif args.command == 'clear':
        asyncio.run(clear())


if __name__ == '__main__':
    main()
