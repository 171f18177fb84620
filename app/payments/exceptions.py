"""
Payment-specific exceptions for payment operations.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── SignatureError - Webhook failed authentication
    ├── MalformedWebhookError - Webhook body is not a JSON object
    └── ReconciliationMiss - Webhook matched no Payment

    GatewayError - Provider rejected the request or returned unusable
                   data (inherits ExternalServiceError, HTTP 502)

Webhook-side errors (SignatureError, MalformedWebhookError,
ReconciliationMiss) are raised and caught inside the reconciler: the
provider always receives an acknowledgement, the operator gets the log
line with the exception details.

Usage:
    from payments.exceptions import GatewayError

    raise GatewayError(
        "Fapshi returned HTTP 401",
        details={"status_code": 401, "body": response.text},
        status_code=401,
        raw_body=response.text,
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ExternalServiceError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class SignatureError(PaymentError):
    """
    Raised when a webhook signature is missing or does not match.

    The payload must not be trusted; the delivery is acknowledged
    without processing.
    """

    default_error_code: str = "INVALID_WEBHOOK_SIGNATURE"


class MalformedWebhookError(PaymentError):
    """Raised when a webhook body cannot be parsed as a JSON object."""

    default_error_code: str = "MALFORMED_WEBHOOK"


class ReconciliationMiss(PaymentError):
    """
    Raised when no Payment matches any correlation field of a webhook.

    Not a business error: it means a paid (or failed) transaction is
    invisible to us, so it is always logged at ERROR for manual follow-up.
    """

    default_error_code: str = "RECONCILIATION_MISS"


# =============================================================================
# Gateway Exceptions
# =============================================================================


class GatewayError(ExternalServiceError):
    """
    Raised when the payment provider rejects a request or returns data
    without a usable redirect target.

    Attributes:
        status_code_received: HTTP status from the provider (None on
            network failure or timeout)
        raw_body: Raw response body for diagnostics (never shown to
            public callers)
    """

    default_error_code: str = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        raw_body: str | None = None,
    ):
        details = details or {}
        if status_code is not None:
            details["provider_status_code"] = status_code
        if raw_body is not None:
            details["provider_body"] = raw_body
        super().__init__(message, error_code=error_code, details=details)
        self.status_code_received = status_code
        self.raw_body = raw_body


__all__ = [
    "PaymentError",
    "SignatureError",
    "MalformedWebhookError",
    "ReconciliationMiss",
    "GatewayError",
]
