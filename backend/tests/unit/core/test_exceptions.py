"""
Unit Tests for the exception hierarchy and error envelope
"""
import pytest

from soc_portal.core.exceptions import (
    SocPortalError,
    ValidationError,
    InvalidFileTypeError,
    FileTooLargeError,
    AuthenticationError,
    SessionExpiredError,
    AuthorizationError,
    AccountInactiveError,
    InvalidCredentialsError,
    NotFoundError,
    AccountNotFoundError,
    ConflictError,
    PortalSystemError,
    error_response,
)


class TestStatusCodes:

    @pytest.mark.parametrize("error, status", [
        (ValidationError("bad"), 400),
        (InvalidFileTypeError("text/plain", ["image/png"]), 400),
        (FileTooLargeError(10, 5), 400),
        (AuthenticationError(), 401),
        (SessionExpiredError(), 401),
        (AuthorizationError(), 403),
        (AccountInactiveError("Inactive"), 403),
        (InvalidCredentialsError(), 403),
        (NotFoundError("Roster", "2026-03-01"), 404),
        (AccountNotFoundError("a@b.c"), 404),
        (ConflictError("Email already registered"), 409),
        (PortalSystemError(), 500),
    ])
    def test_status_code(self, error, status):
        assert isinstance(error, SocPortalError)
        assert error.status_code == status


class TestMessages:

    def test_session_expired(self):
        error = SessionExpiredError()
        assert error.message == "Session expired"
        assert error.code == "SESSION_EXPIRED"
        assert isinstance(error, AuthenticationError)

    def test_missing_credentials_default(self):
        assert AuthenticationError().message == "Unauthenticated: missing credentials"

    def test_account_inactive_keeps_status(self):
        error = AccountInactiveError("Resigned", "You Already Gave Your Resignation")
        assert error.details == {"status": "Resigned"}
        assert error.message == "You Already Gave Your Resignation"

    def test_not_found_code(self):
        error = NotFoundError("Team member", "BOB")
        assert error.code == "TEAM_MEMBER_NOT_FOUND"
        assert error.message == "Team member not found"

    def test_file_errors(self):
        assert InvalidFileTypeError("text/plain", []).message == "Only JPG, PNG, and WebP images are allowed"
        assert FileTooLargeError(6 * 1024 * 1024, 5 * 1024 * 1024).message == "File size exceeds 5MB limit"


class TestErrorResponse:

    def test_envelope(self):
        assert error_response(ConflictError("NGD ID already registered", field="ngdId")) == {
            "success": False,
            "message": "NGD ID already registered",
            "error": "CONFLICT",
        }

    def test_to_dict(self):
        error = ValidationError("Missing required fields", field="date")
        assert error.to_dict() == {
            "code": "VALIDATION_ERROR",
            "message": "Missing required fields",
            "details": {"field": "date"},
        }
