"""
Flight record repositories.

SupabaseFlightRepository reads and writes the `flight_records` table and
starts trips through the `start_flight_record` database function, which
cancels the user's in-flight records and inserts the new one in one
transaction. InMemoryFlightRepository does the same under a lock.
"""

import threading
import uuid
from datetime import datetime
from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.repository import BaseRepository
from .models import FlightRecord, FlightStatus, FlightStats
from .exceptions import ActiveTripConflictError

# Postgres unique_violation, raised by the one-in-flight-per-user index
UNIQUE_VIOLATION = "23505"


class SupabaseFlightRepository(BaseRepository[FlightRecord]):
    """
    Repository for flight record data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying record ownership.
    """

    TABLE = "flight_records"
    START_FUNCTION = "start_flight_record"
    STATS_FUNCTION = "flight_stats_for_user"

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
        params = {
            "p_user_id": user_id,
            "p_departure_airport_id": departure_airport_id,
            "p_arrival_airport_id": arrival_airport_id,
            "p_distance": distance,
            "p_departure_time": self._timestamp(departure_time),
            "p_flight_number": flight_number,
            "p_seat_number": seat_number,
        }
        try:
            result = self._db.rpc(self.START_FUNCTION, params).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ActiveTripConflictError(user_id) from e
            raise

        row = result.data[0] if isinstance(result.data, list) else result.data
        return str(row["record_id"]), int(row.get("superseded") or 0)

    def get_by_id(self, record_id: str) -> Optional[FlightRecord]:
        result = self._db.table(self.TABLE).select("*").eq("id", record_id).execute()
        row = self._first(result.data)
        return self._map_to_record(row) if row else None

    def transition(
        self,
        record_id: str,
        target: FlightStatus,
        arrival_time: Optional[datetime],
    ) -> Optional[FlightRecord]:
        data = {
            "status": target.value,
            "arrival_time_utc": self._timestamp(arrival_time),
        }
        result = (
            self._db.table(self.TABLE)
            .update(data)
            .eq("id", record_id)
            .eq("status", FlightStatus.IN_FLIGHT.value)
            .execute()
        )
        row = self._first(result.data)
        return self._map_to_record(row) if row else None

    def list_for_user(
        self,
        user_id: str,
        offset: int,
        limit: int,
        status: Optional[FlightStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> tuple[list[FlightRecord], int]:
        query = self._db.table(self.TABLE).select("*", count="exact").eq("user_id", user_id)
        if status:
            query = query.eq("status", status.value)
        if start is not None:
            query = query.gte("departure_time_utc", self._timestamp(start))
        if end is not None:
            query = query.lt("departure_time_utc", self._timestamp(end))

        result = (
            query.order("departure_time_utc", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        records = [self._map_to_record(row) for row in result.data or []]
        return records, result.count or 0

    def stats_for_user(self, user_id: str) -> FlightStats:
        """Sum and count arrived trips through the `flight_stats_for_user` function."""
        result = self._db.rpc(self.STATS_FUNCTION, {"p_user_id": user_id}).execute()
        row = self._first(result.data) or {}
        return FlightStats(
            total_distance=float(row.get("total_distance") or 0),
            flight_count=int(row.get("flight_count") or 0),
        )

    def _map_to_record(self, data: dict[str, Any]) -> FlightRecord:
        """Map database row to FlightRecord model."""
        return FlightRecord(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            departure_airport_id=int(data["departure_airport_id"]),
            arrival_airport_id=int(data["arrival_airport_id"]),
            departure_time_utc=data["departure_time_utc"],
            arrival_time_utc=data.get("arrival_time_utc"),
            status=FlightStatus(data["status"]),
            distance=float(data["distance"]),
            flight_number=data.get("flight_number"),
            seat_number=data.get("seat_number"),
        )


class InMemoryFlightRepository:
    """
    Flight record storage held in memory.

    For testing and development. Use SupabaseFlightRepository for production.
    """

    def __init__(self) -> None:
        self._records: dict[str, FlightRecord] = {}
        self._lock = threading.Lock()

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
        with self._lock:
            superseded = 0
            for record in list(self._records.values()):
                if record.user_id == user_id and record.status == FlightStatus.IN_FLIGHT:
                    self._records[record.id] = record.model_copy(
                        update={"status": FlightStatus.CANCELED, "arrival_time_utc": None}
                    )
                    superseded += 1

            record = FlightRecord(
                id=str(uuid.uuid4()),
                user_id=user_id,
                departure_airport_id=departure_airport_id,
                arrival_airport_id=arrival_airport_id,
                departure_time_utc=departure_time,
                status=FlightStatus.IN_FLIGHT,
                distance=distance,
                flight_number=flight_number,
                seat_number=seat_number,
            )
            self._records[record.id] = record
            return record.id, superseded

    def get_by_id(self, record_id: str) -> Optional[FlightRecord]:
        return self._records.get(record_id)

    def transition(
        self,
        record_id: str,
        target: FlightStatus,
        arrival_time: Optional[datetime],
    ) -> Optional[FlightRecord]:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.status != FlightStatus.IN_FLIGHT:
                return None
            updated = record.model_copy(update={"status": target, "arrival_time_utc": arrival_time})
            self._records[record_id] = updated
            return updated

    def list_for_user(
        self,
        user_id: str,
        offset: int,
        limit: int,
        status: Optional[FlightStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> tuple[list[FlightRecord], int]:
        matching = [
            record
            for record in self._records.values()
            if record.user_id == user_id
            and (status is None or record.status == status)
            and (start is None or record.departure_time_utc >= start)
            and (end is None or record.departure_time_utc < end)
        ]
        matching.sort(key=lambda record: record.departure_time_utc, reverse=True)
        return matching[offset:offset + limit], len(matching)

    def stats_for_user(self, user_id: str) -> FlightStats:
        arrived = [
            record
            for record in self._records.values()
            if record.user_id == user_id and record.status == FlightStatus.ARRIVED
        ]
        return FlightStats(
            total_distance=sum(record.distance for record in arrived),
            flight_count=len(arrived),
        )
