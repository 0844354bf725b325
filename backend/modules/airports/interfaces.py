"""
Airports module interfaces.

The flights and auth modules depend on IAirportRepository for lookups;
the API layer depends on IAirportService.
"""

from typing import Protocol, Optional, Iterable, runtime_checkable

from .models import Airport


@runtime_checkable
class IAirportRepository(Protocol):
    """Read-only access to airport reference data."""

    def get_by_id(self, airport_id: int) -> Optional[Airport]:
        ...

    def get_by_code(self, code: str) -> Optional[Airport]:
        """
        Get the first airport with the given code.

        Codes are not guaranteed unique in the data; the first match wins.
        """
        ...

    def get_many_by_ids(self, airport_ids: Iterable[int]) -> dict[int, Airport]:
        """
        Batch lookup used to enrich flight listings.

        Returns:
            Mapping of airport ID to Airport for the IDs that exist
        """
        ...

    def list_all(self) -> list[Airport]:
        ...

    def search(self, code_fragment: str, name_fragment: str) -> list[Airport]:
        """Airports whose code contains code_fragment or name contains name_fragment."""
        ...


@runtime_checkable
class IAirportService(Protocol):
    """Interface for airport lookup and proximity search."""

    async def find_near(self, latitude: float, longitude: float, radius: float) -> list[Airport]:
        """
        Find airports on a ring around a point.

        Raises:
            InvalidQueryError: If coordinates or radius are not finite, or radius <= 0
        """
        ...

    async def search(self, text: Optional[str]) -> list[Airport]:
        ...

    async def get_by_code(self, code: str) -> Airport:
        """
        Raises:
            AirportNotFoundError: If no airport has the code
        """
        ...
