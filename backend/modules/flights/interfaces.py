"""
Flights module interfaces.

The API layer depends on IFlightService; the service depends on
IFlightRepository, which has a Supabase and an in-memory implementation.
"""

from datetime import datetime
from typing import Protocol, Optional, Any, runtime_checkable

from .models import (
    FlightRecord,
    FlightStatus,
    FlightStats,
    FlightListResponse,
    CreateFlightResponse,
)


@runtime_checkable
class IFlightRepository(Protocol):
    """Storage contract for flight records."""

    def start_trip(
        self,
        user_id: str,
        departure_airport_id: int,
        arrival_airport_id: int,
        distance: float,
        departure_time: datetime,
        flight_number: Optional[str] = None,
        seat_number: Optional[str] = None,
    ) -> tuple[str, int]:
        """
        Cancel every in-flight record of the user and insert a new one,
        as a single atomic unit.

        Returns:
            (new record ID, number of records canceled)

        Raises:
            ActiveTripConflictError: If a concurrent start won the race
        """
        ...

    def get_by_id(self, record_id: str) -> Optional[FlightRecord]:
        ...

    def transition(
        self,
        record_id: str,
        target: FlightStatus,
        arrival_time: Optional[datetime],
    ) -> Optional[FlightRecord]:
        """
        Move an in-flight record to `target`.

        The update only applies while the record is still in flight.

        Returns:
            The updated record, or None if it was no longer in flight
        """
        ...

    def list_for_user(
        self,
        user_id: str,
        offset: int,
        limit: int,
        status: Optional[FlightStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> tuple[list[FlightRecord], int]:
        """
        Page through a user's records, newest departure first.

        `start`/`end` bound departure_time_utc as a half-open window.

        Returns:
            (records on the page, total matching records)
        """
        ...

    def stats_for_user(self, user_id: str) -> FlightStats:
        """Total distance and count of the user's arrived records."""
        ...


@runtime_checkable
class IFlightService(Protocol):
    """Interface for the flight lifecycle operations."""

    async def create_trip(
        self,
        subject_id: str,
        departure_code: Any,
        arrival_code: Any,
        distance: Any,
        flight_number: Optional[str] = None,
        seat_number: Optional[str] = None,
    ) -> CreateFlightResponse:
        """
        Start a trip, superseding any trip still in flight.

        Raises:
            MissingFieldError: Blank airport code
            InvalidDistanceError: Distance not a positive finite number
            FieldTooLongError: Flight or seat number too long
            AirportNotFoundError: Unknown airport code
        """
        ...

    async def complete_trip(self, subject_id: str, record_id: Optional[str]) -> FlightRecord:
        """
        Raises:
            FlightRecordNotFoundError: Missing or owned by another user
            InvalidFlightTransitionError: Record is not in flight
        """
        ...

    async def cancel_trip(self, subject_id: str, record_id: Optional[str]) -> FlightRecord:
        ...

    async def list_trips(
        self,
        subject_id: str,
        page: int = 1,
        page_size: int = 10,
        history_range: Optional[str] = "all",
        status: Optional[str] = None,
    ) -> FlightListResponse:
        ...

    async def get_stats(self, subject_id: str) -> FlightStats:
        ...
