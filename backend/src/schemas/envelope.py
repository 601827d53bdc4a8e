"""Response envelope shared by every /api endpoint."""
from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Successful response wrapper.

    Example:
        {"success": true, "data": {...}}
    """

    success: bool = True
    data: DataT


class ErrorResponse(BaseModel):
    """Error response wrapper rendered by the app-level exception handlers."""

    success: bool = False
    message: str
