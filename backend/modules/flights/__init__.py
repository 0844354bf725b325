"""
Flights module.

Manages the lifecycle of a user's trips: start, arrive, cancel, history
and distance statistics.

Public API:
- IFlightService: Interface for flight operations
- IFlightRepository: Storage contract
- FlightRecord, FlightStatus, FlightStats: Models
- Flight exceptions: FlightRecordNotFoundError, InvalidFlightTransitionError, etc.
"""

from .interfaces import IFlightService, IFlightRepository
from .models import (
    FlightRecord,
    FlightRecordView,
    FlightStatus,
    FlightStats,
    FlightListResponse,
    HistoryRange,
    ALLOWED_TRANSITIONS,
)
from .exceptions import (
    MissingFieldError,
    InvalidDistanceError,
    FieldTooLongError,
    InvalidRangeError,
    InvalidStatusError,
    FlightRecordNotFoundError,
    InvalidFlightTransitionError,
    ActiveTripConflictError,
)

__all__ = [
    # Interfaces
    "IFlightService",
    "IFlightRepository",
    # Models
    "FlightRecord",
    "FlightRecordView",
    "FlightStatus",
    "FlightStats",
    "FlightListResponse",
    "HistoryRange",
    "ALLOWED_TRANSITIONS",
    # Exceptions
    "MissingFieldError",
    "InvalidDistanceError",
    "FieldTooLongError",
    "InvalidRangeError",
    "InvalidStatusError",
    "FlightRecordNotFoundError",
    "InvalidFlightTransitionError",
    "ActiveTripConflictError",
]
