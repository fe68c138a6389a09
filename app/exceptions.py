# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Following the principle: "Errors should tell HOW to fix, not just WHAT failed."
#
# Tool endpoints return structured failure objects in the response body and
# do not raise; these exceptions cover the other endpoints.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.utils import ApplicationError


class ContactGapException(Exception):
    """
    Base exception for the ContactGap API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONTACTGAP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result

    @classmethod
    def from_application_error(cls, error: ApplicationError, status_code: int) -> "ContactGapException":
        """Wrap a domain error for an HTTP response."""
        return cls(
            message=error.message,
            code=error.code,
            status_code=status_code,
            suggestion=error.suggestion,
            details=error.details,
        )


# =============================================================================
# Service Exceptions
# =============================================================================

class ServiceNotConfiguredError(ContactGapException):
    """Raised when an endpoint needs a collaborator that was not set up."""

    def __init__(self, service: str, setting: str):
        super().__init__(
            message=f"{service} is not configured",
            code="SERVICE_NOT_CONFIGURED",
            status_code=503,
            suggestion=f"Set {setting} and restart the service",
            details={"service": service},
        )


class ReportFailedError(ContactGapException):
    """Raised when a report export could not be produced."""

    def __init__(self, failure: dict[str, Any]):
        super().__init__(
            message=failure.get("message", "Report failed"),
            code=failure.get("error", "REPORT_FAILED"),
            status_code=502 if failure.get("error") == "DATABASE_CONNECTION_FAILED" else 422,
            suggestion=failure.get("suggestion"),
            details=failure.get("details") or {},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def contactgap_exception_handler(
    request: Request,
    exc: ContactGapException
) -> JSONResponse:
    """
    Convert ContactGapException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
