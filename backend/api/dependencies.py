"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The storage backend is chosen by the STORAGE_BACKEND setting: "supabase"
builds the Supabase repositories, "memory" builds in-process ones.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, IUserRepository, IIdentityProvider
    from modules.auth.tokens import TokenService
    from modules.airports.interfaces import IAirportService, IAirportRepository
    from modules.flights.interfaces import IFlightService, IFlightRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._user_repository: "IUserRepository | None" = None
        self._airport_repository: "IAirportRepository | None" = None
        self._flight_repository: "IFlightRepository | None" = None
        self._token_service: "TokenService | None" = None
        self._identity_provider: "IIdentityProvider | None" = None
        self._auth_service: "IAuthService | None" = None
        self._airport_service: "IAirportService | None" = None
        self._flight_service: "IFlightService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def uses_memory(self) -> bool:
        return self.settings.storage_backend == "memory"

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    @property
    def user_repository(self) -> "IUserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            if self.uses_memory:
                from modules.auth.repository import InMemoryUserRepository
                self._user_repository = InMemoryUserRepository()
            else:
                from modules.auth.repository import SupabaseUserRepository
                from shared.database import get_supabase_client
                self._user_repository = SupabaseUserRepository(get_supabase_client())
        return self._user_repository

    @property
    def airport_repository(self) -> "IAirportRepository":
        """Get the airport repository instance."""
        if self._airport_repository is None:
            if self.uses_memory:
                from modules.airports.repository import InMemoryAirportRepository
                self._airport_repository = InMemoryAirportRepository(self._seed_airports())
            else:
                from modules.airports.repository import SupabaseAirportRepository
                from shared.database import get_supabase_client
                self._airport_repository = SupabaseAirportRepository(get_supabase_client())
        return self._airport_repository

    @property
    def flight_repository(self) -> "IFlightRepository":
        """Get the flight record repository instance."""
        if self._flight_repository is None:
            if self.uses_memory:
                from modules.flights.repository import InMemoryFlightRepository
                self._flight_repository = InMemoryFlightRepository()
            else:
                from modules.flights.repository import SupabaseFlightRepository
                from shared.database import get_supabase_client
                self._flight_repository = SupabaseFlightRepository(get_supabase_client())
        return self._flight_repository

    def _seed_airports(self) -> list:
        if not self.settings.airports_seed_dir:
            return []
        from modules.airports.importer import load_airport_dir, to_airports
        return to_airports(load_airport_dir(Path(self.settings.airports_seed_dir)))

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @property
    def tokens(self) -> "TokenService":
        """Get the session token service."""
        if self._token_service is None:
            from modules.auth.tokens import TokenService
            self._token_service = TokenService.from_settings(self.settings)
        return self._token_service

    @property
    def identity(self) -> "IIdentityProvider":
        """Get the identity provider client."""
        if self._identity_provider is None:
            from modules.auth.identity import HuaweiIdentityClient
            self._identity_provider = HuaweiIdentityClient.from_settings(self.settings)
        return self._identity_provider

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                tokens=self.tokens,
                users=self.user_repository,
                airports=self.airport_repository,
                identity=self.identity,
                nickname_prefix=self.settings.default_nickname_prefix,
                provider=self.settings.identity_provider,
            )
        return self._auth_service

    @property
    def airports(self) -> "IAirportService":
        """Get the airport service instance."""
        if self._airport_service is None:
            from modules.airports.service import AirportService
            self._airport_service = AirportService(self.airport_repository)
        return self._airport_service

    @property
    def flights(self) -> "IFlightService":
        """Get the flight service instance."""
        if self._flight_service is None:
            from modules.flights.service import FlightService
            self._flight_service = FlightService(
                flights=self.flight_repository,
                airports=self.airport_repository,
                users=self.user_repository,
            )
        return self._flight_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._user_repository = None
        self._airport_repository = None
        self._flight_repository = None
        self._token_service = None
        self._identity_provider = None
        self._auth_service = None
        self._airport_service = None
        self._flight_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-built container (tests wire in-memory repositories this way)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_airport_service() -> "IAirportService":
    """FastAPI dependency for airport service."""
    return get_container().airports


def get_flight_service() -> "IFlightService":
    """FastAPI dependency for flight service."""
    return get_container().flights
