"""Service layer for todo operations."""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.todo import Todo
from schemas.todo import TodoCreate, TodoUpdate
from services.exceptions import NotFoundError


async def list_todos(db: AsyncSession) -> list[Todo]:
    """Get all todos, newest first."""
    query = select(Todo).order_by(Todo.created_at.desc(), Todo.id.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_todo(db: AsyncSession, todo_id: int) -> Todo:
    """Get a todo by id, raising NotFoundError if it does not exist."""
    todo = await db.get(Todo, todo_id)
    if todo is None:
        raise NotFoundError("Todo", todo_id)
    return todo


async def create_todo(db: AsyncSession, data: TodoCreate) -> Todo:
    """Create a new todo."""
    todo = Todo(**data.model_dump())
    db.add(todo)
    await db.flush()
    await db.refresh(todo)
    return todo


async def update_todo(db: AsyncSession, todo_id: int, data: TodoUpdate) -> Todo:
    """Update only the provided todo fields."""
    todo = await get_todo(db, todo_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(todo, field, value)
    todo.updated_at = utc_now()
    await db.flush()
    await db.refresh(todo)
    return todo


async def delete_todo(db: AsyncSession, todo_id: int) -> None:
    """Delete a todo."""
    todo = await get_todo(db, todo_id)
    await db.delete(todo)
    await db.flush()


async def delete_completed_todos(db: AsyncSession) -> int:
    """Delete every completed todo in a single statement. Returns the deleted count."""
    result = await db.execute(delete(Todo).where(Todo.completed.is_(True)))
    await db.flush()
    return result.rowcount or 0
