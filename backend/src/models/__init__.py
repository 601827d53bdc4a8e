"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.profile import Profile
from models.todo import Todo
from models.user_config import UserConfig

__all__ = [
    "Base",
    "Profile",
    "TimestampMixin",
    "Todo",
    "UserConfig",
]
