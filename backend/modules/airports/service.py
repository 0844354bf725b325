"""
Airport service implementation.

Provides airport lookup, text search and the ring-shaped proximity search.
"""

import math
from typing import Any, Optional

from .geo import haversine_km
from .interfaces import IAirportService, IAirportRepository
from .models import Airport
from .exceptions import AirportNotFoundError, InvalidQueryError

# Half-width of the distance band around the requested radius, in km
RING_HALF_WIDTH_KM = 20.0

# Shortest search text that triggers a lookup
MIN_SEARCH_LENGTH = 2


def ring_bounds(radius: float) -> tuple[float, float]:
    """Inner and outer distance bounds of the search ring."""
    return max(0.0, radius - RING_HALF_WIDTH_KM), radius + RING_HALF_WIDTH_KM


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class AirportService(IAirportService):
    """Airport lookups over an IAirportRepository."""

    def __init__(self, repository: IAirportRepository):
        self._repository = repository

    async def find_near(self, latitude: float, longitude: float, radius: float) -> list[Airport]:
        """
        Find airports whose distance from the point lies on the ring
        [radius - 20, radius + 20] km, bounds inclusive.

        This is a band, not a disc: airports closer than the inner bound
        are excluded. Scans all airports; the result is unordered.
        """
        if not (_is_finite_number(latitude) and _is_finite_number(longitude) and _is_finite_number(radius)):
            raise InvalidQueryError("Latitude, longitude and radius must be finite numbers")
        if radius <= 0:
            raise InvalidQueryError("Radius must be greater than 0", radius=radius)

        inner, outer = ring_bounds(radius)
        return [
            airport
            for airport in self._repository.list_all()
            if inner <= haversine_km(latitude, longitude, airport.latitude, airport.longitude) <= outer
        ]

    async def search(self, text: Optional[str]) -> list[Airport]:
        """Search airports by code or name. Short queries return nothing."""
        if not text or len(text) < MIN_SEARCH_LENGTH:
            return []
        return self._repository.search(text.upper(), text)

    async def get_by_code(self, code: str) -> Airport:
        airport = self._repository.get_by_code(code)
        if airport is None:
            raise AirportNotFoundError(code)
        return airport
