"""
Flights module exceptions.
"""

from shared.exceptions import (
    NotFoundError,
    ValidationError,
    InvalidTransitionError,
)


class MissingFieldError(ValidationError):
    """Raised when a required request field is absent or blank."""

    def __init__(self, field: str):
        super().__init__(
            f"Missing or invalid field: {field}",
            code="MISSING_FIELD",
            details={"field": field},
        )


class InvalidDistanceError(ValidationError):
    """Raised when a trip distance is not a positive finite number."""

    def __init__(self) -> None:
        super().__init__(
            "Distance must be a positive finite number",
            code="INVALID_DISTANCE",
        )


class FieldTooLongError(ValidationError):
    def __init__(self, field: str, max_length: int):
        super().__init__(
            f"{field} must be at most {max_length} characters",
            code="FIELD_TOO_LONG",
            details={"field": field, "max_length": max_length},
        )


class InvalidRangeError(ValidationError):
    """Raised when a history range is not one of all/day/week/month."""

    def __init__(self, value: str, allowed: list[str]):
        super().__init__(
            f"Invalid range: {value}",
            code="INVALID_RANGE",
            details={"range": value, "allowed": allowed},
        )


class InvalidStatusError(ValidationError):
    """Raised when a status filter is not a known flight status."""

    def __init__(self, value: str, allowed: list[str]):
        super().__init__(
            f"Invalid status: {value}",
            code="INVALID_STATUS",
            details={"status": value, "allowed": allowed},
        )


class FlightRecordNotFoundError(NotFoundError):
    """
    Raised when a flight record does not exist or belongs to another user.

    Both cases produce the same error.
    """

    def __init__(self, record_id: str):
        super().__init__(
            f"Flight record not found: {record_id}",
            code="RECORD_NOT_FOUND",
            details={"record_id": record_id},
        )


class InvalidFlightTransitionError(InvalidTransitionError):
    """Raised when a record is not in a status that allows the requested change."""

    def __init__(self, record_id: str, current: str, target: str):
        super().__init__(
            f"Cannot move flight record from {current} to {target}",
            code="INVALID_TRANSITION",
            details={"record_id": record_id, "current": current, "target": target},
        )


class ActiveTripConflictError(InvalidTransitionError):
    """Raised when a concurrent request already started an in-flight trip."""

    def __init__(self, user_id: str):
        super().__init__(
            "Another in-flight trip was started concurrently",
            code="ACTIVE_TRIP_CONFLICT",
            details={"user_id": user_id},
        )
