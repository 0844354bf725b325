"""
Airports module data models.

Airports are static reference data populated by an external import
process; the backend only reads them.
"""

from pydantic import BaseModel, Field


class Airport(BaseModel):
    """An airport reference row."""

    id: int = Field(..., description="Airport primary key")
    code: str = Field(..., description="IATA-like airport code")
    name: str = Field(..., description="Airport name")
    city: str = Field(..., description="City the airport serves")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    region: str = Field(..., description="Region label")


class AirportSummary(BaseModel):
    """Denormalized airport fields attached to flight records."""

    code: str
    city: str
    latitude: float
    longitude: float

    @classmethod
    def from_airport(cls, airport: Airport) -> "AirportSummary":
        return cls(
            code=airport.code,
            city=airport.city,
            latitude=airport.latitude,
            longitude=airport.longitude,
        )
