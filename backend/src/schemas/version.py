"""Pydantic schemas for the version endpoint."""
from pydantic import BaseModel


class VersionSnapshot(BaseModel):
    """
    Last modification time of each tracked resource.

    Values are decimal strings of epoch milliseconds; "0" means the resource has
    no record yet. Clients compare them for equality only.
    """

    profile: str = "0"
    todos: str = "0"
    config: str = "0"
