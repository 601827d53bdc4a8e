"""Pydantic schemas for the health endpoint."""
from typing import Literal

from pydantic import BaseModel


class HealthStatus(BaseModel):
    """Overall service state and the state of the database it depends on."""

    status: Literal["healthy", "degraded"]
    database: Literal["healthy", "unhealthy"]
