"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SessionClaims(BaseModel):
    """
    Decoded application session token payload.

    Custom claims beyond the known ones are preserved.
    """

    model_config = ConfigDict(extra="allow")

    sub: Optional[str] = Field(None, description="Subject (union ID)")
    union_id: Optional[str] = Field(None, description="Identity provider union ID")
    open_id: str = Field(default="", description="Identity provider open ID")
    provider: str = Field(default="huawei", description="Identity provider")
    scope: str = Field(default="", description="Granted scope")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")

    @property
    def subject_id(self) -> Optional[str]:
        return self.union_id or self.sub


class IdentityInfo(BaseModel):
    """Identity resolved from the provider's token-info endpoint."""

    union_id: Optional[str] = None
    open_id: Optional[str] = None
    scope: Optional[str] = None


class User(BaseModel):
    """An application user anchored by the provider's union ID."""

    id: str = Field(..., description="User ID (UUID)")
    union_id: str = Field(..., description="External subject identifier")
    open_id: Optional[str] = Field(None, description="Secondary provider identifier")
    provider: str = Field(default="huawei", description="Identity provider")
    nickname: Optional[str] = Field(None, description="Display nickname")
    last_arrival_airport_id: Optional[int] = Field(
        None,
        description="Airport the user last arrived at",
    )


class LoginRequest(BaseModel):
    """Authorization code from the client SDK."""

    code: str = Field(..., min_length=1, description="Authorization code")


class TokenResponse(BaseModel):
    """Response carrying a freshly issued session token."""

    success: bool = True
    message: str
    token: str


class VerifyResponse(BaseModel):
    success: bool = True
    message: str = "Token is valid"


class NicknameUpdateRequest(BaseModel):
    nickname: str = Field(..., description="New nickname (max 32 characters)")


class NicknameResponse(BaseModel):
    success: bool = True
    nickname: str


class InitDepartureRequest(BaseModel):
    """
    Initial location for a user without flight history.

    Latitude and longitude are informational; the airport is resolved by code.
    """

    code: str = Field(..., description="Airport code")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
