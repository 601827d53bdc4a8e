"""Pydantic schemas for todo endpoints."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["high", "medium", "low"]


class TodoCreate(BaseModel):
    """Schema for creating a todo."""

    text: str = Field(min_length=1, max_length=1000)
    completed: bool = False
    priority: Priority = "medium"
    category: str = Field(default="", max_length=50)


class TodoUpdate(BaseModel):
    """Schema for updating a todo. Only provided fields are changed."""

    text: str | None = Field(default=None, min_length=1, max_length=1000)
    completed: bool | None = None
    priority: Priority | None = None
    category: str | None = Field(default=None, max_length=50)


class TodoResponse(BaseModel):
    """Schema for todo responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    completed: bool
    priority: Priority
    category: str
    created_at: datetime
    updated_at: datetime


class DeleteCompletedResponse(BaseModel):
    """Result of bulk-deleting completed todos."""

    deleted_count: int
