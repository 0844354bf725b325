"""
Authentication service implementation.

Logs users in through the identity provider, issues and verifies the
application's own session tokens, and manages the user directory
(nickname and last known airport).
"""

import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Optional, Any, Mapping

import pydantic

from shared.models import AuthenticatedUser
from modules.airports.interfaces import IAirportRepository
from modules.airports.models import Airport
from modules.airports.exceptions import AirportNotFoundError

from .interfaces import IAuthService, IUserRepository, IIdentityProvider
from .models import User, SessionClaims
from .tokens import TokenService
from .exceptions import (
    MalformedPayloadError,
    UserNotFoundError,
    InvalidNicknameError,
    LastArrivalAirportNotFoundError,
    DepartureAlreadyInitializedError,
    IdentityProviderError,
)

logger = logging.getLogger(__name__)

NICKNAME_MAX_LENGTH = 32
NICKNAME_SUFFIX_LENGTH = 6
_NICKNAME_ALPHABET = string.ascii_letters + string.digits


def generate_nickname(prefix: str) -> str:
    """Default nickname: prefix followed by six random letters and digits."""
    suffix = "".join(secrets.choice(_NICKNAME_ALPHABET) for _ in range(NICKNAME_SUFFIX_LENGTH))
    return f"{prefix}{suffix}"


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Args:
        tokens: Session token signer/verifier
        users: User storage
        airports: Airport lookups for the user's location
        identity: Upstream identity provider client
        nickname_prefix: Prefix of generated default nicknames
    """

    def __init__(
        self,
        tokens: TokenService,
        users: IUserRepository,
        airports: IAirportRepository,
        identity: IIdentityProvider,
        nickname_prefix: str = "飞友",
        provider: str = "huawei",
    ):
        self._tokens = tokens
        self._users = users
        self._airports = airports
        self._identity = identity
        self._nickname_prefix = nickname_prefix
        self._provider = provider

    # -------------------------------------------------------------------------
    # Login and session tokens
    # -------------------------------------------------------------------------

    async def login(self, code: str) -> str:
        """
        Log in with an authorization code and return a session token.

        The user is found or created by union ID. A changed open ID is
        written back on every login.
        """
        exchange = await self._identity.exchange_code(code)
        info = await self._identity.get_token_info(exchange["access_token"])

        if not info.union_id:
            raise IdentityProviderError(
                "Identity provider returned no union_id; cannot identify user",
                provider=self._provider,
            )

        user = self._users.get_by_union_id(info.union_id)
        if user is None:
            user = self._users.create(
                union_id=info.union_id,
                open_id=info.open_id,
                provider=self._provider,
                nickname=generate_nickname(self._nickname_prefix),
            )
        if info.open_id and user.open_id != info.open_id:
            user = self._users.update(user.id, open_id=info.open_id) or user

        token = self.issue_session_token(
            {
                "sub": info.union_id,
                "union_id": info.union_id,
                "open_id": info.open_id or "",
                "provider": self._provider,
                "scope": info.scope or exchange.get("scope") or "",
            }
        )
        logger.info("User logged in: union_id=%s nickname=%s", user.union_id, user.nickname)
        return token

    def issue_session_token(self, claims: Mapping[str, Any]) -> str:
        return self._tokens.issue(claims)

    def verify_session_token(self, token: Optional[str]) -> dict[str, Any]:
        return self._tokens.verify(token)

    def refresh_session_token(self, token: Optional[str]) -> str:
        return self._tokens.refresh(token)

    async def validate_token(self, token: Optional[str]) -> AuthenticatedUser:
        """Verify a session token and map its claims to the caller."""
        payload = self._tokens.verify(token)

        try:
            claims = SessionClaims(**payload)
        except pydantic.ValidationError as e:
            raise MalformedPayloadError(f"Token claims are invalid: {e.error_count()} error(s)") from e

        if not claims.subject_id:
            raise MalformedPayloadError("Token has no subject identifier")

        return AuthenticatedUser(
            subject_id=claims.subject_id,
            open_id=claims.open_id or None,
            provider=claims.provider,
            scope=claims.scope,
            issued_at=datetime.fromtimestamp(claims.iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims.exp, tz=timezone.utc),
        )

    # -------------------------------------------------------------------------
    # User directory
    # -------------------------------------------------------------------------

    async def resolve_user(self, subject_id: str) -> User:
        user = self._users.get_by_union_id(subject_id)
        if user is None:
            raise UserNotFoundError(subject_id)
        return user

    async def get_nickname(self, subject_id: str) -> str:
        user = await self.resolve_user(subject_id)
        return user.nickname or ""

    async def update_nickname(self, subject_id: str, nickname: str) -> str:
        """
        Replace the user's nickname.

        Raises:
            InvalidNicknameError: Empty after trimming, or longer than 32 characters
        """
        new_nickname = (nickname or "").strip()
        if not new_nickname:
            raise InvalidNicknameError("Nickname must not be empty", NICKNAME_MAX_LENGTH)
        if len(new_nickname) > NICKNAME_MAX_LENGTH:
            raise InvalidNicknameError("Nickname is too long", NICKNAME_MAX_LENGTH)

        user = await self.resolve_user(subject_id)
        updated = self._users.update(user.id, nickname=new_nickname)
        if updated is None:
            raise UserNotFoundError(subject_id)
        return updated.nickname or ""

    async def get_last_arrival_airport(self, subject_id: str) -> Airport:
        user = await self.resolve_user(subject_id)
        if user.last_arrival_airport_id is None:
            raise LastArrivalAirportNotFoundError(subject_id)

        airport = self._airports.get_by_id(user.last_arrival_airport_id)
        if airport is None:
            raise LastArrivalAirportNotFoundError(subject_id)
        return airport

    async def init_departure_airport(self, subject_id: str, code: str) -> Airport:
        """
        Set the user's starting location before any flight has arrived.

        Only allowed while the last arrival airport is unset.

        Raises:
            DepartureAlreadyInitializedError: If a last arrival airport exists
            AirportNotFoundError: If the code does not resolve
        """
        user = await self.resolve_user(subject_id)
        if user.last_arrival_airport_id is not None:
            raise DepartureAlreadyInitializedError(user.last_arrival_airport_id)

        code = (code or "").strip()
        airport = self._airports.get_by_code(code) if code else None
        if airport is None:
            raise AirportNotFoundError(code)

        self._users.update(user.id, last_arrival_airport_id=airport.id)
        return airport
