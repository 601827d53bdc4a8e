"""Pydantic schemas for profile endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileStatus(BaseModel):
    """Short status line shown next to the avatar."""

    text: str = ""
    emoji: str = ""


class TimelineEntry(BaseModel):
    """A single entry of the profile timeline (job, degree, ...)."""

    year: str
    title: str
    company: str = ""
    description: str = ""


class ProfileUpdate(BaseModel):
    """Schema for updating profile fields. Only provided fields are changed."""

    name: str | None = Field(default=None, max_length=200)
    avatar: str | None = None
    bio: str | None = None
    location: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=255)
    github: str | None = None
    qq: str | None = None
    wechat: str | None = None
    website: str | None = None
    company: str | None = Field(default=None, max_length=200)
    position: str | None = Field(default=None, max_length=200)
    github_username: str | None = Field(default=None, max_length=100)
    status: ProfileStatus | None = None
    skills: list[str] | None = None
    timeline: list[TimelineEntry] | None = None


class TimelineUpdate(BaseModel):
    """Schema for replacing the whole timeline."""

    timeline: list[TimelineEntry]


class SkillsUpdate(BaseModel):
    """Schema for replacing the skills list."""

    skills: list[str]


class ProfileResponse(BaseModel):
    """Schema for profile responses."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    avatar: str
    bio: str
    location: str
    email: str
    github: str
    qq: str
    wechat: str
    website: str
    company: str
    position: str
    github_username: str
    status: ProfileStatus
    skills: list[str]
    timeline: list[TimelineEntry]
    updated_at: datetime
