"""
Flight lifecycle service.

Starts, completes, cancels and lists a user's trips and aggregates their
arrived distance. A user has at most one trip in flight: starting a new
trip cancels any trip still in flight.
"""

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from dateutil.relativedelta import relativedelta

from modules.auth.interfaces import IUserRepository
from modules.auth.models import User
from modules.auth.exceptions import UserNotFoundError
from modules.airports.interfaces import IAirportRepository
from modules.airports.models import AirportSummary
from modules.airports.exceptions import AirportNotFoundError

from .interfaces import IFlightService, IFlightRepository
from .models import (
    FlightRecord,
    FlightRecordView,
    FlightStatus,
    FlightStats,
    FlightListResponse,
    CreateFlightResponse,
    HistoryRange,
    FLIGHT_NUMBER_MAX_LENGTH,
    SEAT_NUMBER_MAX_LENGTH,
)
from .exceptions import (
    MissingFieldError,
    InvalidDistanceError,
    FieldTooLongError,
    InvalidRangeError,
    InvalidStatusError,
    FlightRecordNotFoundError,
    InvalidFlightTransitionError,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clamp_page(page: Optional[int], page_size: Optional[int]) -> tuple[int, int]:
    """Page is at least 1; page size is kept within [1, 100]."""
    page = page if page is not None else 1
    page_size = page_size if page_size is not None else DEFAULT_PAGE_SIZE
    return max(page, 1), min(max(page_size, 1), MAX_PAGE_SIZE)


def range_window(history_range: HistoryRange, now: datetime) -> Optional[tuple[datetime, datetime]]:
    """
    Half-open [start, end) window on departure time for a history range.

    Windows follow UTC calendar boundaries: the current day, the current
    ISO week starting Monday, or the current month. `all` has no window.
    """
    if history_range == HistoryRange.ALL:
        return None

    now = now.astimezone(timezone.utc)
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if history_range == HistoryRange.DAY:
        return day_start, day_start + relativedelta(days=1)
    if history_range == HistoryRange.WEEK:
        week_start = day_start - relativedelta(days=day_start.weekday())
        return week_start, week_start + relativedelta(weeks=1)

    month_start = day_start.replace(day=1)
    return month_start, month_start + relativedelta(months=1)


def _parse_range(value: Optional[str]) -> HistoryRange:
    try:
        return HistoryRange(value or HistoryRange.ALL.value)
    except ValueError:
        raise InvalidRangeError(str(value), [r.value for r in HistoryRange])


def _parse_status(value: Optional[str]) -> Optional[FlightStatus]:
    if value is None or value == "":
        return None
    try:
        return FlightStatus(value)
    except ValueError:
        raise InvalidStatusError(str(value), [s.value for s in FlightStatus])


def _require_code(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MissingFieldError(field)
    return value.strip()


def _require_distance(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDistanceError()
    if not math.isfinite(value) or value <= 0:
        raise InvalidDistanceError()
    return float(value)


def _check_length(value: Optional[str], field: str, max_length: int) -> Optional[str]:
    if value is not None and len(value) > max_length:
        raise FieldTooLongError(field, max_length)
    return value


class FlightService(IFlightService):
    """
    Implementation of the flight lifecycle.

    Args:
        flights: Flight record storage
        airports: Airport lookups
        users: User storage; completing a trip updates the user's location
        clock: Returns the current UTC time; injectable for tests
    """

    def __init__(
        self,
        flights: IFlightRepository,
        airports: IAirportRepository,
        users: IUserRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._flights = flights
        self._airports = airports
        self._users = users
        self._clock = clock

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
        Start a new in-flight trip.

        Any trip of the user still in flight is canceled in the same
        atomic step as the insert.
        """
        user = self._resolve_user(subject_id)

        departure_code = _require_code(departure_code, "departure.code")
        arrival_code = _require_code(arrival_code, "arrival.code")
        distance = _require_distance(distance)
        flight_number = _check_length(flight_number, "flight_number", FLIGHT_NUMBER_MAX_LENGTH)
        seat_number = _check_length(seat_number, "seat_number", SEAT_NUMBER_MAX_LENGTH)

        departure = self._airports.get_by_code(departure_code)
        if departure is None:
            raise AirportNotFoundError(departure_code)
        arrival = self._airports.get_by_code(arrival_code)
        if arrival is None:
            raise AirportNotFoundError(arrival_code)

        record_id, superseded = self._flights.start_trip(
            user_id=user.id,
            departure_airport_id=departure.id,
            arrival_airport_id=arrival.id,
            distance=distance,
            departure_time=self._clock(),
            flight_number=flight_number,
            seat_number=seat_number,
        )
        if superseded:
            logger.info(
                "Trip %s for user %s superseded %d in-flight record(s)",
                record_id,
                user.id,
                superseded,
            )
        return CreateFlightResponse(id=record_id, superseded=superseded)

    async def complete_trip(self, subject_id: str, record_id: Optional[str]) -> FlightRecord:
        """
        Mark an in-flight trip as arrived.

        The user's last arrival airport becomes the trip's arrival airport.
        """
        user = self._resolve_user(subject_id)
        record = self._transition(user, record_id, FlightStatus.ARRIVED, self._clock())
        self._users.update(user.id, last_arrival_airport_id=record.arrival_airport_id)
        return record

    async def cancel_trip(self, subject_id: str, record_id: Optional[str]) -> FlightRecord:
        user = self._resolve_user(subject_id)
        return self._transition(user, record_id, FlightStatus.CANCELED, None)

    async def list_trips(
        self,
        subject_id: str,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        history_range: Optional[str] = "all",
        status: Optional[str] = None,
    ) -> FlightListResponse:
        """
        List the user's trips, newest departure first.

        Each record carries code, city and coordinates of both airports,
        loaded with one batch lookup per page.
        """
        user = self._resolve_user(subject_id)
        page, page_size = clamp_page(page, page_size)
        window = range_window(_parse_range(history_range), self._clock())
        status_filter = _parse_status(status)
        start, end = window if window else (None, None)

        records, total = self._flights.list_for_user(
            user.id,
            offset=(page - 1) * page_size,
            limit=page_size,
            status=status_filter,
            start=start,
            end=end,
        )

        airport_ids = {r.departure_airport_id for r in records} | {r.arrival_airport_id for r in records}
        airports = self._airports.get_many_by_ids(airport_ids)

        views = []
        for record in records:
            departure = airports.get(record.departure_airport_id)
            arrival = airports.get(record.arrival_airport_id)
            views.append(
                FlightRecordView(
                    **record.model_dump(),
                    departure=AirportSummary.from_airport(departure) if departure else None,
                    arrival=AirportSummary.from_airport(arrival) if arrival else None,
                )
            )

        return FlightListResponse(page=page, page_size=page_size, total=total, records=views)

    async def get_stats(self, subject_id: str) -> FlightStats:
        user = self._resolve_user(subject_id)
        return self._flights.stats_for_user(user.id)

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _resolve_user(self, subject_id: str) -> User:
        user = self._users.get_by_union_id(subject_id)
        if user is None:
            raise UserNotFoundError(subject_id)
        return user

    def _load_owned_record(self, user: User, record_id: Optional[str]) -> FlightRecord:
        if not isinstance(record_id, str) or not record_id.strip():
            raise MissingFieldError("id")
        record_id = record_id.strip()

        try:
            uuid.UUID(record_id)
        except ValueError:
            raise FlightRecordNotFoundError(record_id)

        record = self._flights.get_by_id(record_id)
        if record is None or record.user_id != user.id:
            raise FlightRecordNotFoundError(record_id)
        return record

    def _transition(
        self,
        user: User,
        record_id: Optional[str],
        target: FlightStatus,
        arrival_time: Optional[datetime],
    ) -> FlightRecord:
        record = self._load_owned_record(user, record_id)
        if not record.status.can_transition_to(target):
            raise InvalidFlightTransitionError(record.id, record.status.value, target.value)

        updated = self._flights.transition(record.id, target, arrival_time)
        if updated is None:
            # Another request moved the record first
            current = self._flights.get_by_id(record.id)
            current_status = current.status.value if current else record.status.value
            raise InvalidFlightTransitionError(record.id, current_status, target.value)

        logger.debug("Flight record %s: %s -> %s", record.id, record.status.value, target.value)
        return updated
