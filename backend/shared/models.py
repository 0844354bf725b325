"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller.

    Populated from verified session token claims and made available
    to route handlers via dependency injection. The subject identifier
    is the identity provider's union ID.
    """

    subject_id: str = Field(..., description="External subject identifier (union ID)")
    open_id: Optional[str] = Field(None, description="Secondary provider identifier")
    provider: str = Field(default="huawei", description="Identity provider")
    scope: str = Field(default="", description="Granted scope")
    issued_at: Optional[datetime] = Field(None, description="Token issue time")
    expires_at: Optional[datetime] = Field(None, description="Token expiry time")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
