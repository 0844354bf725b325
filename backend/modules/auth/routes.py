"""
Auth API endpoints.

Login through the identity provider, session token verify/refresh, and
the current user's nickname and location.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_bearer_token, get_current_user
from api.dependencies import get_auth_service
from shared.models import AuthenticatedUser
from modules.airports.models import Airport

from .interfaces import IAuthService
from .models import (
    LoginRequest,
    TokenResponse,
    VerifyResponse,
    NicknameUpdateRequest,
    NicknameResponse,
    InitDepartureRequest,
)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Exchange an identity provider authorization code for a session token.

    Creates the user on first login.
    """
    token = await service.login(request.code)
    return TokenResponse(message="Login successful", token=token)


@router.get("/verify", response_model=VerifyResponse)
async def verify_token(
    token: str = Depends(get_bearer_token),
    service: IAuthService = Depends(get_auth_service),
) -> VerifyResponse:
    service.verify_session_token(token)
    return VerifyResponse()


@router.get("/refresh", response_model=TokenResponse)
async def refresh_token(
    token: str = Depends(get_bearer_token),
    service: IAuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Re-issue a still-valid session token with a fresh expiry.

    Expired tokens cannot be refreshed; log in again instead.
    """
    return TokenResponse(
        message="Token refreshed",
        token=service.refresh_session_token(token),
    )


@router.get("/nickname", response_model=NicknameResponse)
async def get_nickname(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> NicknameResponse:
    return NicknameResponse(nickname=await service.get_nickname(user.subject_id))


@router.post("/nickname", response_model=NicknameResponse)
async def update_nickname(
    request: NicknameUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> NicknameResponse:
    """Set the nickname. It is trimmed and must be 1-32 characters."""
    nickname = await service.update_nickname(user.subject_id, request.nickname)
    return NicknameResponse(nickname=nickname)


@router.get("/last-airport", response_model=Airport)
async def get_last_airport(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> Airport:
    """
    Get the airport the user last arrived at.

    Returns 404 when the user has not completed a flight or set an
    initial departure airport yet.
    """
    return await service.get_last_arrival_airport(user.subject_id)


@router.post("/init-departure", response_model=Airport)
async def init_departure(
    request: InitDepartureRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> Airport:
    """
    Set the user's starting airport.

    Only allowed once, before any last arrival airport is recorded.
    """
    return await service.init_departure_airport(user.subject_id, request.code)
