"""
Authentication module interfaces.

Other modules should depend on IAuthService and IUserRepository, not the
concrete implementations. This enables testing with mocks or the in-memory
storage backend.
"""

from typing import Protocol, Optional, Any, Mapping, runtime_checkable

from shared.models import AuthenticatedUser
from modules.airports.models import Airport
from .models import User, IdentityInfo


@runtime_checkable
class IUserRepository(Protocol):
    """Storage contract for users."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_by_union_id(self, union_id: str) -> Optional[User]:
        ...

    def create(
        self,
        union_id: str,
        open_id: Optional[str],
        provider: str,
        nickname: str,
    ) -> User:
        """
        Create a user keyed by union ID.

        If a user with the union ID already exists, returns it unchanged.
        """
        ...

    def update(self, user_id: str, **fields: Any) -> Optional[User]:
        ...


@runtime_checkable
class IIdentityProvider(Protocol):
    """Upstream identity provider used by login."""

    async def exchange_code(self, code: str) -> dict[str, Any]:
        ...

    async def get_token_info(self, access_token: str) -> IdentityInfo:
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication and user directory operations.

    This protocol defines the contract that the auth module exposes
    to the API layer and the flights module.
    """

    async def login(self, code: str) -> str:
        """
        Log in with an identity provider authorization code.

        Args:
            code: Authorization code from the client SDK

        Returns:
            A freshly issued session token

        Raises:
            IdentityProviderError: If the provider fails or returns no union ID
        """
        ...

    def issue_session_token(self, claims: Mapping[str, Any]) -> str:
        ...

    def verify_session_token(self, token: Optional[str]) -> dict[str, Any]:
        """
        Raises:
            AuthenticationError: If the token is missing, invalid or expired
        """
        ...

    def refresh_session_token(self, token: Optional[str]) -> str:
        ...

    async def validate_token(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Verify a session token and return the caller.

        Raises:
            AuthenticationError: If the token is missing, invalid or expired
        """
        ...

    async def resolve_user(self, subject_id: str) -> User:
        """
        Raises:
            UserNotFoundError: If no user has the subject ID
        """
        ...

    async def get_nickname(self, subject_id: str) -> str:
        ...

    async def update_nickname(self, subject_id: str, nickname: str) -> str:
        ...

    async def get_last_arrival_airport(self, subject_id: str) -> Airport:
        ...

    async def init_departure_airport(self, subject_id: str, code: str) -> Airport:
        ...
