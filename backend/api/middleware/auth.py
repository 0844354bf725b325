"""
Session token authentication.

Extracts the bearer token and validates it through the auth service.
Failures raise AuthenticationError subclasses, which the application's
exception handler turns into 401 responses.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_auth_service
from modules.auth.interfaces import IAuthService
from modules.auth.exceptions import MissingTokenError
from shared.models import AuthenticatedUser

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Dependency returning the raw bearer token.

    Used by endpoints that work on the token itself (verify, refresh).
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError("Missing authorization header")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    auth: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"subject": user.subject_id}
    """
    return await auth.validate_token(token)
