"""Pydantic schemas for site configuration endpoints."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GithubTokenUpdate(BaseModel):
    """Schema for setting the site-level GitHub token."""

    token: str = Field(min_length=1)


class UserConfigResponse(BaseModel):
    """Schema for configuration responses."""

    model_config = ConfigDict(from_attributes=True)

    github_token: str | None
    preferences: dict[str, Any]
    updated_at: datetime
