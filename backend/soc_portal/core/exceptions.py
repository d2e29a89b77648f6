"""
Custom Exceptions for SOC Portal
================================

Every handler-level failure is one of these. Each carries the HTTP status
it maps to, so the API layer converts them uniformly:

    ValidationError      -> 400
    AuthenticationError  -> 401
    AuthorizationError   -> 403
    NotFoundError        -> 404
    ConflictError        -> 409
    PortalSystemError    -> 500

Usage:
    from soc_portal.core.exceptions import NotFoundError

    if not roster:
        raise NotFoundError("Roster", date)
"""

from typing import Optional, Any, Dict


class SocPortalError(Exception):
    """Base exception for all SOC Portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(SocPortalError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidFileTypeError(ValidationError):
    """Uploaded file type not allowed"""

    def __init__(self, file_type: str, allowed_types: list):
        super().__init__("Only JPG, PNG, and WebP images are allowed", field="file")
        self.code = "INVALID_FILE_TYPE"
        self.details.update({"file_type": file_type, "allowed_types": allowed_types})


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds the size limit"""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size exceeds {max_size // (1024 * 1024)}MB limit", field="file")
        self.code = "FILE_TOO_LARGE"
        self.details.update({"size": size, "max_size": max_size})


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(SocPortalError):
    """Caller could not be authenticated"""

    status_code = 401

    def __init__(self, message: str = "Unauthenticated: missing credentials"):
        super().__init__(message, code="AUTH_FAILED")


class SessionExpiredError(AuthenticationError):
    """Last activity is older than the session timeout"""

    def __init__(self, message: str = "Session expired"):
        super().__init__(message)
        self.code = "SESSION_EXPIRED"


class AuthorizationError(SocPortalError):
    """Caller is authenticated but not allowed"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class AccountInactiveError(AuthorizationError):
    """Account status is not Active"""

    def __init__(self, status: str, message: str = "Account inactive"):
        super().__init__(message)
        self.code = "ACCOUNT_INACTIVE"
        self.details = {"status": status}


class InvalidCredentialsError(AuthorizationError):
    """Cookie-carried portal id does not match the stored one"""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)
        self.code = "INVALID_CREDENTIALS"


# ============================================
# Resource Errors (404 / 409)
# ============================================

class NotFoundError(SocPortalError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str = "", message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class AccountNotFoundError(NotFoundError):
    """Email resolves in neither identity store"""

    def __init__(self, email: str):
        super().__init__("Account", email, message="Account not found")


class ConflictError(SocPortalError):
    """Unique key already taken"""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFLICT", details=details)


# ============================================
# System Errors (500)
# ============================================

class PortalSystemError(SocPortalError):
    """Datastore, filesystem or other unexpected failure"""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="SYSTEM_ERROR")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: SocPortalError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "message": error.message,
        "error": error.code
    }
