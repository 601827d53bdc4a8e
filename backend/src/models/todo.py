"""Todo model for the site's todo list."""
from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin


class Todo(Base, TimestampMixin):
    """Todo item - the list is shared site-wide, not owned by a user."""

    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(primary_key=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    priority: Mapped[str] = mapped_column(String(10), default="medium", nullable=False)
    category: Mapped[str] = mapped_column(String(50), default="", nullable=False)
