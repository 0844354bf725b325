"""Tests for the flight lifecycle service."""

from datetime import datetime, timedelta, timezone

import pytest

from modules.flights.models import FlightStatus, HistoryRange
from modules.flights.service import FlightService, clamp_page, range_window
from modules.flights.exceptions import (
    MissingFieldError,
    InvalidDistanceError,
    FieldTooLongError,
    InvalidRangeError,
    InvalidStatusError,
    FlightRecordNotFoundError,
    InvalidFlightTransitionError,
)
from modules.airports.exceptions import AirportNotFoundError
from modules.auth.exceptions import UserNotFoundError
from shared.exceptions import InvalidTransitionError, NotFoundError

# Same instant as the flight_service fixture clock (a Wednesday)
FIXED_NOW = datetime(2025, 6, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def other_user(user_repository):
    return user_repository.create("union-2", "open-2", "huawei", "飞友zzz999")


async def start(service, subject="union-1", dep="AAA", arr="BBB", distance=500, **kwargs):
    return await service.create_trip(subject, dep, arr, distance, **kwargs)


class TestCreateTrip:
    @pytest.mark.asyncio
    async def test_creates_in_flight_record(self, flight_service, flight_repository, registered_user):
        """Should insert an in-flight record stamped with the server clock."""
        result = await start(flight_service, flight_number="CA1501", seat_number="32A")

        record = flight_repository.get_by_id(result.id)
        assert result.superseded == 0
        assert record.status == FlightStatus.IN_FLIGHT
        assert record.user_id == registered_user.id
        assert record.departure_airport_id == 4
        assert record.arrival_airport_id == 5
        assert record.departure_time_utc == FIXED_NOW
        assert record.arrival_time_utc is None
        assert record.distance == 500.0
        assert record.flight_number == "CA1501"
        assert record.seat_number == "32A"

    @pytest.mark.asyncio
    async def test_new_trip_supersedes_in_flight_one(self, flight_service, flight_repository, registered_user):
        """U1 starts AAA->BBB, then another trip: the first is canceled with no arrival time."""
        first = await start(flight_service)
        second = await start(flight_service, dep="PEK", arr="SHA", distance=1080)

        assert second.superseded == 1
        old = flight_repository.get_by_id(first.id)
        assert old.status == FlightStatus.CANCELED
        assert old.arrival_time_utc is None
        assert flight_repository.get_by_id(second.id).status == FlightStatus.IN_FLIGHT

    @pytest.mark.asyncio
    async def test_at_most_one_in_flight(self, flight_service, flight_repository, registered_user):
        for _ in range(5):
            await start(flight_service)
        _, in_flight = flight_repository.list_for_user(registered_user.id, 0, 10, status=FlightStatus.IN_FLIGHT)
        assert in_flight == 1

    @pytest.mark.asyncio
    async def test_other_users_trips_untouched(self, flight_service, flight_repository, registered_user, other_user):
        theirs = await start(flight_service, subject="union-2")
        await start(flight_service)

        assert flight_repository.get_by_id(theirs.id).status == FlightStatus.IN_FLIGHT

    @pytest.mark.asyncio
    async def test_trims_codes(self, flight_service, flight_repository, registered_user):
        result = await start(flight_service, dep=" PEK ", arr="SHA ")
        assert flight_repository.get_by_id(result.id).departure_airport_id == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("dep,arr", [("", "BBB"), ("AAA", "  "), (None, "BBB"), ("AAA", 42)])
    async def test_missing_codes(self, flight_service, registered_user, dep, arr):
        with pytest.raises(MissingFieldError):
            await start(flight_service, dep=dep, arr=arr)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("distance", [0, -1, float("nan"), float("inf"), None, "500", True])
    async def test_invalid_distance(self, flight_service, flight_repository, registered_user, distance):
        with pytest.raises(InvalidDistanceError):
            await start(flight_service, distance=distance)
        assert flight_repository.list_for_user(registered_user.id, 0, 10, status=FlightStatus.IN_FLIGHT) == ([], 0)

    @pytest.mark.asyncio
    async def test_field_lengths(self, flight_service, registered_user):
        """flight_number allows 20 characters and seat_number 10."""
        await start(flight_service, flight_number="F" * 20, seat_number="S" * 10)

        with pytest.raises(FieldTooLongError):
            await start(flight_service, flight_number="F" * 21)
        with pytest.raises(FieldTooLongError):
            await start(flight_service, seat_number="S" * 11)

    @pytest.mark.asyncio
    async def test_unknown_airport(self, flight_service, flight_repository, registered_user):
        """An unknown code should fail without canceling the current trip."""
        current = await start(flight_service)

        with pytest.raises(AirportNotFoundError):
            await start(flight_service, arr="ZZZ")
        assert flight_repository.get_by_id(current.id).status == FlightStatus.IN_FLIGHT

    @pytest.mark.asyncio
    async def test_unknown_user(self, flight_service):
        with pytest.raises(UserNotFoundError):
            await start(flight_service, subject="ghost")


class TestCompleteTrip:
    @pytest.mark.asyncio
    async def test_marks_arrived(self, flight_service, user_repository, registered_user):
        """Should set arrival time and move the user's location to the arrival airport."""
        created = await start(flight_service)

        record = await flight_service.complete_trip("union-1", created.id)

        assert record.status == FlightStatus.ARRIVED
        assert record.arrival_time_utc == FIXED_NOW
        assert user_repository.get_by_union_id("union-1").last_arrival_airport_id == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("finish", ["complete_trip", "cancel_trip"])
    async def test_terminal_records_cannot_complete(self, flight_service, registered_user, finish):
        created = await start(flight_service)
        await getattr(flight_service, finish)("union-1", created.id)

        with pytest.raises(InvalidFlightTransitionError) as exc_info:
            await flight_service.complete_trip("union-1", created.id)
        assert isinstance(exc_info.value, InvalidTransitionError)

    @pytest.mark.asyncio
    async def test_superseded_record_cannot_complete(self, flight_service, registered_user):
        first = await start(flight_service)
        await start(flight_service)

        with pytest.raises(InvalidFlightTransitionError):
            await flight_service.complete_trip("union-1", first.id)

    @pytest.mark.asyncio
    async def test_foreign_record_is_not_found(self, flight_service, registered_user, other_user):
        """Another user's record should look exactly like a missing one."""
        theirs = await start(flight_service, subject="union-2")

        with pytest.raises(FlightRecordNotFoundError) as exc_info:
            await flight_service.complete_trip("union-1", theirs.id)
        assert isinstance(exc_info.value, NotFoundError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("record_id", ["00000000-0000-0000-0000-000000000000", "not-a-uuid"])
    async def test_unknown_record(self, flight_service, registered_user, record_id):
        with pytest.raises(FlightRecordNotFoundError):
            await flight_service.complete_trip("union-1", record_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("record_id", [None, "", "  "])
    async def test_missing_record_id(self, flight_service, registered_user, record_id):
        with pytest.raises(MissingFieldError):
            await flight_service.complete_trip("union-1", record_id)

    @pytest.mark.asyncio
    async def test_lost_race_reports_invalid_transition(self, flight_service, flight_repository, registered_user):
        """If the record leaves in_flight between read and write, the update must not apply."""
        created = await start(flight_service)
        original_transition = flight_repository.transition

        def cancel_first(record_id, target, arrival_time):
            original_transition(record_id, FlightStatus.CANCELED, None)
            return original_transition(record_id, target, arrival_time)

        flight_repository.transition = cancel_first

        with pytest.raises(InvalidFlightTransitionError) as exc_info:
            await flight_service.complete_trip("union-1", created.id)
        assert exc_info.value.details["current"] == "canceled"
        assert flight_repository.get_by_id(created.id).status == FlightStatus.CANCELED


class TestCancelTrip:
    @pytest.mark.asyncio
    async def test_cancels(self, flight_service, user_repository, registered_user):
        created = await start(flight_service)

        record = await flight_service.cancel_trip("union-1", created.id)

        assert record.status == FlightStatus.CANCELED
        assert record.arrival_time_utc is None
        assert user_repository.get_by_union_id("union-1").last_arrival_airport_id is None

    @pytest.mark.asyncio
    async def test_arrived_record_cannot_cancel(self, flight_service, registered_user):
        created = await start(flight_service)
        await flight_service.complete_trip("union-1", created.id)

        with pytest.raises(InvalidFlightTransitionError):
            await flight_service.cancel_trip("union-1", created.id)

    @pytest.mark.asyncio
    async def test_foreign_record_is_not_found(self, flight_service, registered_user, other_user):
        theirs = await start(flight_service, subject="union-2")
        with pytest.raises(FlightRecordNotFoundError):
            await flight_service.cancel_trip("union-1", theirs.id)


class TestClampPage:
    @pytest.mark.parametrize(
        "page,page_size,expected",
        [
            (1, 10, (1, 10)),
            (0, 10, (1, 10)),
            (-3, 10, (1, 10)),
            (2, 500, (2, 100)),
            (1, 0, (1, 1)),
            (1, -5, (1, 1)),
            (None, None, (1, 10)),
        ],
    )
    def test_bounds(self, page, page_size, expected):
        assert clamp_page(page, page_size) == expected


class TestRangeWindow:
    def test_all_has_no_window(self):
        assert range_window(HistoryRange.ALL, FIXED_NOW) is None

    def test_day(self):
        start, end = range_window(HistoryRange.DAY, FIXED_NOW)
        assert start == datetime(2025, 6, 18, tzinfo=timezone.utc)
        assert end == datetime(2025, 6, 19, tzinfo=timezone.utc)

    def test_week_starts_monday(self):
        start, end = range_window(HistoryRange.WEEK, FIXED_NOW)
        assert start == datetime(2025, 6, 16, tzinfo=timezone.utc)
        assert start.weekday() == 0
        assert end == datetime(2025, 6, 23, tzinfo=timezone.utc)

    def test_month(self):
        start, end = range_window(HistoryRange.MONTH, FIXED_NOW)
        assert start == datetime(2025, 6, 1, tzinfo=timezone.utc)
        assert end == datetime(2025, 7, 1, tzinfo=timezone.utc)

    def test_month_rolls_over_year(self):
        start, end = range_window(HistoryRange.MONTH, datetime(2025, 12, 31, 23, 59, tzinfo=timezone.utc))
        assert start == datetime(2025, 12, 1, tzinfo=timezone.utc)
        assert end == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_converts_to_utc(self):
        """Windows follow UTC calendar days even for offset-aware input."""
        tokyo = timezone(timedelta(hours=9))
        start, _ = range_window(HistoryRange.DAY, datetime(2025, 6, 19, 2, 0, tzinfo=tokyo))
        assert start == datetime(2025, 6, 18, tzinfo=timezone.utc)


class TestListTrips:
    @pytest.fixture
    def timed_service(self, flight_repository, airport_repository, user_repository):
        """Service whose clock can be moved between trips."""
        state = {"now": FIXED_NOW}
        service = FlightService(
            flights=flight_repository,
            airports=airport_repository,
            users=user_repository,
            clock=lambda: state["now"],
        )
        return service, state

    @pytest.mark.asyncio
    async def test_newest_first_with_airports(self, timed_service, registered_user):
        service, state = timed_service
        state["now"] = FIXED_NOW - timedelta(hours=2)
        older = await start(service, dep="PEK", arr="SHA")
        state["now"] = FIXED_NOW
        newer = await start(service, dep="SHA", arr="CAN")

        result = await service.list_trips("union-1")

        assert result.total == 2
        assert [r.id for r in result.records] == [newer.id, older.id]
        top = result.records[0]
        assert top.departure.code == "SHA"
        assert top.arrival.city == "Guangzhou"
        assert top.arrival.latitude == pytest.approx(23.3924)

    @pytest.mark.asyncio
    async def test_only_own_records(self, flight_service, registered_user, other_user):
        await start(flight_service, subject="union-2")
        result = await flight_service.list_trips("union-1")
        assert result.total == 0
        assert result.records == []

    @pytest.mark.asyncio
    async def test_pagination(self, timed_service, registered_user):
        service, state = timed_service
        for hour in range(5):
            state["now"] = FIXED_NOW - timedelta(hours=hour)
            await start(service)

        page = await service.list_trips("union-1", page=2, page_size=2)

        assert page.total == 5
        assert page.page == 2
        assert page.page_size == 2
        assert [r.departure_time_utc for r in page.records] == [
            FIXED_NOW - timedelta(hours=2),
            FIXED_NOW - timedelta(hours=3),
        ]

    @pytest.mark.asyncio
    async def test_clamps_paging(self, flight_service, registered_user):
        result = await flight_service.list_trips("union-1", page=0, page_size=500)
        assert (result.page, result.page_size) == (1, 100)

        result = await flight_service.list_trips("union-1", page=-1, page_size=0)
        assert (result.page, result.page_size) == (1, 1)

    @pytest.mark.asyncio
    async def test_status_filter(self, flight_service, registered_user):
        first = await start(flight_service)
        await start(flight_service)

        canceled = await flight_service.list_trips("union-1", status="canceled")
        in_flight = await flight_service.list_trips("union-1", status="in_flight")

        assert [r.id for r in canceled.records] == [first.id]
        assert in_flight.total == 1

    @pytest.mark.asyncio
    async def test_range_filter(self, timed_service, registered_user):
        service, state = timed_service
        state["now"] = FIXED_NOW - timedelta(days=40)
        await start(service)
        state["now"] = FIXED_NOW - timedelta(days=1)
        await start(service)
        state["now"] = FIXED_NOW
        await start(service)

        assert (await service.list_trips("union-1", history_range="day")).total == 1
        assert (await service.list_trips("union-1", history_range="week")).total == 2
        assert (await service.list_trips("union-1", history_range="month")).total == 2
        assert (await service.list_trips("union-1", history_range="all")).total == 3

    @pytest.mark.asyncio
    async def test_invalid_range(self, flight_service, registered_user):
        with pytest.raises(InvalidRangeError):
            await flight_service.list_trips("union-1", history_range="year")

    @pytest.mark.asyncio
    async def test_invalid_status(self, flight_service, registered_user):
        with pytest.raises(InvalidStatusError):
            await flight_service.list_trips("union-1", status="landed")


class TestStats:
    @pytest.mark.asyncio
    async def test_no_flights(self, flight_service, registered_user):
        stats = await flight_service.get_stats("union-1")
        assert stats.total_distance == 0
        assert stats.flight_count == 0

    @pytest.mark.asyncio
    async def test_counts_only_arrived(self, flight_service, registered_user):
        """Total distance is the sum over arrived records; canceled and in-flight ones are ignored."""
        a = await start(flight_service, distance=500)
        await flight_service.complete_trip("union-1", a.id)
        b = await start(flight_service, distance=1200.5)
        await flight_service.complete_trip("union-1", b.id)
        c = await start(flight_service, distance=300)
        await flight_service.cancel_trip("union-1", c.id)
        await start(flight_service, distance=999)

        stats = await flight_service.get_stats("union-1")

        assert stats.total_distance == pytest.approx(1700.5)
        assert stats.flight_count == 2
