from .base import ResourceStore
from .config import ConfigStore
from .profile import ProfileStore
from .projects import ProjectStore
from .todos import TodoStore

__all__ = [
    "ConfigStore",
    "ProfileStore",
    "ProjectStore",
    "ResourceStore",
    "TodoStore",
]
