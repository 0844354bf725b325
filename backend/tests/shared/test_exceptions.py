"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    AirModeError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    InvalidTransitionError,
    ExternalServiceError,
)


class TestAirModeError:
    def test_message(self):
        """AirModeError should store message."""
        error = AirModeError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """AirModeError should default code to class name."""
        assert AirModeError("Test error").code == "AirModeError"

    def test_custom_code_and_details(self):
        error = AirModeError("Test error", code="CUSTOM_ERROR", details={"key": "value"})
        assert error.code == "CUSTOM_ERROR"
        assert error.details == {"key": "value"}

    def test_to_dict(self):
        """AirModeError should convert to the error response shape."""
        error = AirModeError("Test error", code="TEST_ERROR", details={"key": "value"})

        assert error.to_dict() == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }

    def test_to_dict_minimal(self):
        assert AirModeError("Test error").to_dict()["details"] == {}


class TestErrorKinds:
    @pytest.mark.parametrize(
        "error_type",
        [NotFoundError, ValidationError, AuthenticationError, InvalidTransitionError],
    )
    def test_inherits_base(self, error_type):
        error = error_type("problem")
        assert isinstance(error, AirModeError)
        assert error.code == error_type.__name__

    def test_kinds_are_distinct(self):
        """A transition error is not a validation error and vice versa."""
        assert not isinstance(InvalidTransitionError("x"), ValidationError)
        assert not isinstance(ValidationError("x"), InvalidTransitionError)


class TestExternalServiceError:
    def test_stores_service(self):
        error = ExternalServiceError("Upstream failed", service="huawei")
        assert error.service == "huawei"
        assert error.details["service"] == "huawei"

    def test_preserves_other_details(self):
        error = ExternalServiceError(
            "Upstream failed",
            service="huawei",
            details={"status_code": 400},
        )
        assert error.details == {"status_code": 400, "service": "huawei"}

    def test_does_not_mutate_caller_details(self):
        """Adding the service name should leave the caller's dict alone."""
        context = {"status_code": 400}

        ExternalServiceError("Upstream failed", service="huawei", details=context)

        assert context == {"status_code": 400}

    def test_to_dict_returns_copy(self):
        error = ExternalServiceError("Upstream failed", service="huawei")
        error.to_dict()["details"]["service"] = "other"
        assert error.details["service"] == "huawei"
