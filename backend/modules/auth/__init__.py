"""
Authentication module.

Handles identity provider login, session tokens, and the user directory.

Public API:
- IAuthService: Interface for auth operations
- IUserRepository: Storage contract for users
- TokenService: Session token issue/verify/refresh
- User, SessionClaims: Models
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService, IUserRepository, IIdentityProvider
from .models import User, SessionClaims, IdentityInfo
from .tokens import TokenService
from .exceptions import (
    MissingTokenError,
    InvalidTokenError,
    MalformedTokenError,
    UnsupportedAlgorithmError,
    InvalidSignatureError,
    MalformedPayloadError,
    ExpiredTokenError,
    UserNotFoundError,
    InvalidNicknameError,
    LastArrivalAirportNotFoundError,
    DepartureAlreadyInitializedError,
    IdentityProviderError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IUserRepository",
    "IIdentityProvider",
    # Models
    "User",
    "SessionClaims",
    "IdentityInfo",
    # Tokens
    "TokenService",
    # Exceptions
    "MissingTokenError",
    "InvalidTokenError",
    "MalformedTokenError",
    "UnsupportedAlgorithmError",
    "InvalidSignatureError",
    "MalformedPayloadError",
    "ExpiredTokenError",
    "UserNotFoundError",
    "InvalidNicknameError",
    "LastArrivalAirportNotFoundError",
    "DepartureAlreadyInitializedError",
    "IdentityProviderError",
]
