"""
Airports module.

Read-only airport reference data, text search and ring-shaped proximity search.

Public API:
- IAirportService: Interface for airport lookups
- IAirportRepository: Storage contract used by other modules
- Airport, AirportSummary: Models
- haversine_km: Great-circle distance
"""

from .interfaces import IAirportService, IAirportRepository
from .models import Airport, AirportSummary
from .geo import haversine_km, EARTH_RADIUS_KM
from .exceptions import AirportNotFoundError, InvalidQueryError

__all__ = [
    # Interfaces
    "IAirportService",
    "IAirportRepository",
    # Models
    "Airport",
    "AirportSummary",
    # Geo
    "haversine_km",
    "EARTH_RADIUS_KM",
    # Exceptions
    "AirportNotFoundError",
    "InvalidQueryError",
]
