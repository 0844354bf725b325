"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Everything runs against the in-memory storage backend; Supabase calls are
covered separately with MagicMock clients in the repository tests.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import ServiceContainer, set_container, reset_container
from shared.config import Settings
from modules.airports.models import Airport
from modules.airports.repository import InMemoryAirportRepository
from modules.auth.models import IdentityInfo, User
from modules.auth.repository import InMemoryUserRepository
from modules.auth.service import AuthService
from modules.auth.tokens import TokenService
from modules.flights.repository import InMemoryFlightRepository
from modules.flights.service import FlightService


# Test HMAC secret (only for testing), long enough for HS256
TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"

# 2025-06-18 (a Wednesday) 12:00:00 UTC
FIXED_NOW = datetime(2025, 6, 18, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock returning Unix seconds."""

    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeIdentityProvider:
    """Identity provider double returning a fixed identity."""

    def __init__(
        self,
        union_id: Optional[str] = "union-1",
        open_id: Optional[str] = "open-1",
        scope: Optional[str] = "openid profile",
    ):
        self.info = IdentityInfo(union_id=union_id, open_id=open_id, scope=scope)
        self.codes: list[str] = []

    async def exchange_code(self, code: str) -> dict[str, Any]:
        self.codes.append(code)
        return {"access_token": f"access-{code}", "scope": "exchange-scope"}

    async def get_token_info(self, access_token: str) -> IdentityInfo:
        return self.info


def make_airport(
    airport_id: int,
    code: str,
    latitude: float,
    longitude: float,
    name: Optional[str] = None,
    city: Optional[str] = None,
) -> Airport:
    return Airport(
        id=airport_id,
        code=code,
        name=name or f"{code} International Airport",
        city=city or f"{code} City",
        latitude=latitude,
        longitude=longitude,
        region="中国",
    )


@pytest.fixture
def test_airports() -> list[Airport]:
    """A handful of airports, including two placeholder codes AAA and BBB."""
    return [
        make_airport(1, "PEK", 40.0801, 116.5846, "Beijing Capital International Airport", "Beijing"),
        make_airport(2, "SHA", 31.1979, 121.3363, "Shanghai Hongqiao International Airport", "Shanghai"),
        make_airport(3, "CAN", 23.3924, 113.2988, "Guangzhou Baiyun International Airport", "Guangzhou"),
        make_airport(4, "AAA", 30.0, 120.0, "Alpha Field", "Alpha"),
        make_airport(5, "BBB", 31.0, 121.0, "Bravo Field", "Bravo"),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        app_jwt_secret=TEST_JWT_SECRET,
        identity_client_id="client-id",
        identity_client_secret="client-secret",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW.timestamp())


@pytest.fixture
def token_service(clock: FakeClock) -> TokenService:
    return TokenService(TEST_JWT_SECRET, ttl_seconds=3600, clock=clock)


@pytest.fixture
def airport_repository(test_airports: list[Airport]) -> InMemoryAirportRepository:
    return InMemoryAirportRepository(test_airports)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def flight_repository() -> InMemoryFlightRepository:
    return InMemoryFlightRepository()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def auth_service(
    token_service: TokenService,
    user_repository: InMemoryUserRepository,
    airport_repository: InMemoryAirportRepository,
    identity_provider: FakeIdentityProvider,
) -> AuthService:
    return AuthService(
        tokens=token_service,
        users=user_repository,
        airports=airport_repository,
        identity=identity_provider,
    )


@pytest.fixture
def flight_service(
    flight_repository: InMemoryFlightRepository,
    airport_repository: InMemoryAirportRepository,
    user_repository: InMemoryUserRepository,
) -> FlightService:
    return FlightService(
        flights=flight_repository,
        airports=airport_repository,
        users=user_repository,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def registered_user(user_repository: InMemoryUserRepository) -> User:
    """A user who has logged in before, with union ID union-1."""
    return user_repository.create(
        union_id="union-1",
        open_id="open-1",
        provider="huawei",
        nickname="飞友abc123",
    )


@pytest.fixture
def auth_token(token_service: TokenService, registered_user: User) -> str:
    return token_service.issue({"sub": registered_user.union_id, "union_id": registered_user.union_id})


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def container(
    settings: Settings,
    token_service: TokenService,
    user_repository: InMemoryUserRepository,
    airport_repository: InMemoryAirportRepository,
    flight_repository: InMemoryFlightRepository,
    identity_provider: FakeIdentityProvider,
) -> ServiceContainer:
    """Service container wired to the in-memory fixtures above."""
    container = ServiceContainer(settings)
    container._token_service = token_service
    container._user_repository = user_repository
    container._airport_repository = airport_repository
    container._flight_repository = flight_repository
    container._identity_provider = identity_provider
    return container


@pytest.fixture
def client(container: ServiceContainer) -> TestClient:
    """TestClient for a fresh app using the in-memory container."""
    set_container(container)
    return TestClient(create_app())


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()
