"""
Error hierarchy for the AirMode backend.

Services raise these and never translate them; api.errors turns each
kind into one HTTP status:

    AuthenticationError     401  bad, expired or absent session token
    ValidationError         400  request values the API refuses
    NotFoundError           404  unknown airport, user or flight record
    InvalidTransitionError  409  flight record not in a state that allows the change
    ExternalServiceError    502  the identity provider failed

Module exceptions subclass one of these and pick a stable `code`.
"""

from typing import Optional, Any


class AirModeError(Exception):
    """
    Root of every error the API reports.

    Args:
        message: Human-readable explanation
        code: Stable machine-readable identifier; defaults to the class name
        details: Extra JSON-safe context for the client
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or type(self).__name__
        # Own copy, so subclasses can add keys without touching the caller's dict
        self.details: dict[str, Any] = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        """Response body: `{error, message, details}`."""
        return {
            "error": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


class NotFoundError(AirModeError):
    """A referenced row does not exist, or is not visible to the caller."""


class ValidationError(AirModeError):
    """A request value was rejected before anything was written."""


class AuthenticationError(AirModeError):
    """The session token is missing or did not verify."""


class InvalidTransitionError(AirModeError):
    """A flight record is not in a status that permits the requested change."""


class ExternalServiceError(AirModeError):
    """An upstream call failed; `service` names the upstream."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
