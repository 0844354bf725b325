"""
Airports module exceptions.
"""

from typing import Any

from shared.exceptions import NotFoundError, ValidationError


class AirportNotFoundError(NotFoundError):
    """Raised when an airport code does not resolve to a row."""

    def __init__(self, code: str):
        super().__init__(
            f"Airport not found: {code}",
            code="AIRPORT_NOT_FOUND",
            details={"airport_code": code},
        )


class InvalidQueryError(ValidationError):
    """Raised when proximity search parameters are not usable."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message, code="INVALID_QUERY", details=details)
