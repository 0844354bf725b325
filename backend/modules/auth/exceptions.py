"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token", code: str = "INVALID_TOKEN"):
        super().__init__(message, code=code)


class MalformedTokenError(InvalidTokenError):
    """Raised when a token does not have exactly three segments."""

    def __init__(self, message: str = "Token must have three dot-separated segments"):
        super().__init__(message, code="MALFORMED_TOKEN")


class UnsupportedAlgorithmError(InvalidTokenError):
    """Raised when the token header is unreadable or names another algorithm."""

    def __init__(self, algorithm: Optional[str] = None):
        message = (
            f"Unsupported token algorithm: {algorithm}"
            if algorithm
            else "Token header is invalid"
        )
        super().__init__(message, code="UNSUPPORTED_ALGORITHM")


class InvalidSignatureError(InvalidTokenError):
    """Raised when the token signature does not match its content."""

    def __init__(self, message: str = "Token signature is invalid"):
        super().__init__(message, code="INVALID_SIGNATURE")


class MalformedPayloadError(InvalidTokenError):
    """Raised when the token payload cannot be decoded into claims."""

    def __init__(self, message: str = "Token payload is invalid"):
        super().__init__(message, code="MALFORMED_PAYLOAD")


class ExpiredTokenError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class UserNotFoundError(NotFoundError):
    """Raised when the authenticated subject has no user record."""

    def __init__(self, subject_id: str):
        super().__init__(
            f"User not found: {subject_id}",
            code="USER_NOT_FOUND",
            details={"subject_id": subject_id},
        )


class InvalidNicknameError(ValidationError):
    """Raised when a nickname is empty or too long."""

    def __init__(self, message: str, max_length: int):
        super().__init__(
            message,
            code="INVALID_NICKNAME",
            details={"max_length": max_length},
        )


class LastArrivalAirportNotFoundError(NotFoundError):
    """Raised when the user has no recorded last arrival airport."""

    def __init__(self, subject_id: str):
        super().__init__(
            "No last arrival airport recorded",
            code="LAST_ARRIVAL_AIRPORT_NOT_FOUND",
            details={"subject_id": subject_id},
        )


class DepartureAlreadyInitializedError(ValidationError):
    """Raised when initializing a departure airport for a user who already has one."""

    def __init__(self, airport_id: int):
        super().__init__(
            "Last arrival airport already set; initialization is not allowed",
            code="DEPARTURE_ALREADY_INITIALIZED",
            details={"last_arrival_airport_id": airport_id},
        )


class IdentityProviderError(ExternalServiceError):
    """Raised when the identity provider rejects a call or returns no usable identity."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider: str = "huawei",
    ):
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(
            message,
            service=provider,
            code="IDENTITY_PROVIDER_ERROR",
            details=details,
        )
        self.status_code = status_code
