"""
Shared exception classes and error handling utilities for the Patient Records API.

This module provides:
- A domain exception hierarchy tagged with an ErrorKind
- Consistent error response formatting
- Exception handlers for FastAPI integration

Error kinds are decided by the component that detects the failure
(repositories, unit of work, integrity guard, services). HTTP status codes
are only assigned here, in the handler, via STATUS_BY_KIND.

Usage:
    from core.exceptions import NotFoundError, ConflictError

    # In service layer - raise domain exceptions
    raise NotFoundError("Patient not found.")

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import enum
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Tag identifying what went wrong, independent of any transport."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_REFERENCE = "invalid_reference"
    AUTHENTICATION = "authentication"
    STORE = "store"


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class RecordsServiceError(Exception):
    """
    Base exception for all Patient Records domain errors.

    All custom exceptions should inherit from this class and set `kind`.
    """

    kind: ErrorKind = ErrorKind.STORE
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None, **kwargs: Any):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            **kwargs: Additional context to include in the error response.
        """
        self.detail = detail or self.__class__.detail
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        result: Dict[str, Any] = {"detail": self.detail, "kind": self.kind.value}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# DATA ACCESS EXCEPTIONS
# =============================================================================

class NotFoundError(RecordsServiceError):
    """Raised when a looked-up row, or the target of an update/delete, is absent."""

    kind = ErrorKind.NOT_FOUND
    detail = "Record not found."


class ConflictError(RecordsServiceError):
    """Raised on a uniqueness violation or an identity mismatch on update."""

    kind = ErrorKind.CONFLICT
    detail = "Conflict."


class InvalidReferenceError(RecordsServiceError):
    """Raised when a foreign identity (PatientId, DoctorId) does not resolve."""

    kind = ErrorKind.INVALID_REFERENCE
    detail = "Invalid reference."


class StoreError(RecordsServiceError):
    """Raised when the durable store fails in a way that matches no known constraint."""

    kind = ErrorKind.STORE
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Database error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(RecordsServiceError):
    """Raised when credentials or a bearer token are rejected."""

    kind = ErrorKind.AUTHENTICATION
    detail = "Invalid credentials."


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_REFERENCE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def records_service_exception_handler(
    request: Request,
    exc: RecordsServiceError
) -> JSONResponse:
    """
    Handle RecordsServiceError exceptions and return consistent JSON responses.

    This handler logs the error and returns a standardized JSON error response.
    """
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"RecordsServiceError: {exc.detail}",
        extra={
            "kind": exc.kind.value,
            "status_code": status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.AUTHENTICATION else None
    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(),
        headers=headers
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Call this function during app initialization to enable consistent
    error handling across all endpoints.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(RecordsServiceError, records_service_exception_handler)
