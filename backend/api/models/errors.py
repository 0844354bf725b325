"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format, produced from AirModeError.to_dict()."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationErrorResponse(BaseModel):
    """Request schema validation error response format."""

    error: str = "VALIDATION_ERROR"
    message: str = "Request validation failed"
    details: list[dict[str, Any]]
