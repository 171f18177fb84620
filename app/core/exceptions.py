"""
Base exception classes for application-wide error handling.

Every domain error carries a human-readable message, a machine-readable
error code and optional details, and knows which HTTP status it maps to.
The DRF exception handler at the bottom of this module turns them into
JSON responses so views never build error payloads by hand.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Missing or empty required input (400)
    ├── NotFoundError - Resource not found (404)
    ├── ConflictError - Operation conflicts with current state (409)
    ├── ConfigurationError - Required secrets/settings missing (500)
    ├── StoreError - Persistence failure (500)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import ValidationError

    raise ValidationError(
        "Missing required team or lead fields",
        details={"lead.email": ["This field is required."]},
    )

Note:
    Errors flagged with ``expose_details = False`` never leak their
    details to API callers. Log them instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        status_code: HTTP status used by the API exception handler
        expose_details: Whether details may be returned to API callers
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    expose_details: bool = True

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Team not found",
                "error_code": "NOT_FOUND",
                "details": {"team_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details and self.expose_details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when required input is missing or empty.

    Raised by services before any database write or outbound call, so a
    ValidationError guarantees nothing was persisted.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST


class NotFoundError(BaseApplicationError):
    """Raised when a requested resource is not found."""

    default_error_code: str = "NOT_FOUND"
    status_code: int = status.HTTP_404_NOT_FOUND


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Example:
        if team.status == TeamStatus.PAID:
            raise ConflictError(
                "Team has already paid the registration fee",
                error_code="TEAM_ALREADY_PAID",
                details={"team_id": str(team.id)},
            )
    """

    default_error_code: str = "CONFLICT"
    status_code: int = status.HTTP_409_CONFLICT


class ConfigurationError(BaseApplicationError):
    """
    Raised when a required setting or secret is missing.

    Always raised before any side effect (database write, network call)
    of the operation that needed the configuration.
    """

    default_error_code: str = "CONFIGURATION_ERROR"
    expose_details: bool = False


class StoreError(BaseApplicationError):
    """Raised when persisting to the database fails."""

    default_error_code: str = "STORE_ERROR"
    expose_details: bool = False


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Note:
        Log the original error for debugging but don't expose
        internal details to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = status.HTTP_502_BAD_GATEWAY
    expose_details: bool = False


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """
    DRF exception handler that understands BaseApplicationError.

    Configured via REST_FRAMEWORK["EXCEPTION_HANDLER"]. Falls back to
    DRF's default handler for everything else (serializer errors,
    authentication failures, 404s from get_object_or_404).
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        log_level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(
            log_level,
            f"{exc.__class__.__name__} raised in {view.__class__.__name__ if view else 'view'}",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
