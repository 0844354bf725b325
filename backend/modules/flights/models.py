"""
Flights module data models.

A flight record follows a small state machine: it starts `in_flight` and
ends either `arrived` or `canceled`. Terminal states never change again.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from modules.airports.models import AirportSummary


class FlightStatus(str, Enum):
    """Flight record lifecycle status."""

    IN_FLIGHT = "in_flight"  # Started, not yet arrived
    ARRIVED = "arrived"      # Completed by the user
    CANCELED = "canceled"    # Canceled or superseded by a newer trip

    def can_transition_to(self, target: "FlightStatus") -> bool:
        return target in ALLOWED_TRANSITIONS.get(self, ())


ALLOWED_TRANSITIONS: dict[FlightStatus, tuple[FlightStatus, ...]] = {
    FlightStatus.IN_FLIGHT: (FlightStatus.ARRIVED, FlightStatus.CANCELED),
}


class HistoryRange(str, Enum):
    """Time window for listing flight history, in UTC calendar units."""

    ALL = "all"
    DAY = "day"
    WEEK = "week"    # ISO week, Monday start
    MONTH = "month"


# Column limits
FLIGHT_NUMBER_MAX_LENGTH = 20
SEAT_NUMBER_MAX_LENGTH = 10


class FlightRecord(BaseModel):
    """A single trip taken by a user."""

    id: str = Field(..., description="Record ID (UUID)")
    user_id: str = Field(..., description="Owner user ID")
    departure_airport_id: int = Field(..., description="Departure airport")
    arrival_airport_id: int = Field(..., description="Arrival airport")
    departure_time_utc: datetime = Field(..., description="Server time the trip started")
    arrival_time_utc: Optional[datetime] = Field(None, description="Set only on arrival")
    status: FlightStatus = Field(..., description="Current status")
    distance: float = Field(..., description="Trip distance")
    flight_number: Optional[str] = Field(None, description="Flight number")
    seat_number: Optional[str] = Field(None, description="Seat number")


class FlightRecordView(FlightRecord):
    """Flight record enriched with airport details for listings."""

    departure: Optional[AirportSummary] = Field(None, description="Departure airport summary")
    arrival: Optional[AirportSummary] = Field(None, description="Arrival airport summary")


class FlightListResponse(BaseModel):
    """Paginated list of flight records, newest departure first."""

    success: bool = True
    page: int = Field(..., description="Current page")
    page_size: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total matching records")
    records: list[FlightRecordView] = Field(..., description="Records on this page")


class FlightStats(BaseModel):
    """Aggregates over the user's arrived flights."""

    total_distance: float = Field(default=0.0, description="Sum of arrived distances")
    flight_count: int = Field(default=0, description="Number of arrived flights")


class AirportCodeRef(BaseModel):
    code: Optional[str] = None


class CreateFlightRequest(BaseModel):
    """
    Request to start a new trip.

    Airport codes may be sent nested (`departure.code`) or flat
    (`departure_code`); the nested form wins when both are present.
    Values are checked by the service so that bad input reports the
    domain error rather than a generic schema error.
    """

    departure: Optional[AirportCodeRef] = None
    arrival: Optional[AirportCodeRef] = None
    departure_code: Optional[str] = None
    arrival_code: Optional[str] = None
    distance: Any = Field(None, description="Trip distance, a positive finite number")
    flight_number: Optional[str] = None
    seat_number: Optional[str] = None

    @property
    def resolved_departure_code(self) -> Optional[str]:
        if self.departure is not None and self.departure.code:
            return self.departure.code
        return self.departure_code

    @property
    def resolved_arrival_code(self) -> Optional[str]:
        if self.arrival is not None and self.arrival.code:
            return self.arrival.code
        return self.arrival_code


class CreateFlightResponse(BaseModel):
    success: bool = True
    id: str = Field(..., description="New record ID")
    superseded: int = Field(default=0, description="In-flight records canceled by this trip")


class FlightRecordRef(BaseModel):
    """Body of the complete/cancel endpoints."""

    id: Optional[str] = Field(None, description="Flight record ID")


class FlightTransitionResponse(BaseModel):
    success: bool = True
    record: FlightRecord
