"""
Fapshi API adapter for payment initiation.

This module provides the FapshiAdapter class which encapsulates the
Fapshi "initiate-pay" call. Every request to the provider goes through
this adapter so that timeouts, error translation and response
normalization live in one place.

Features:
- Explicit configuration object, read from settings once
- Bounded request timeout on every call
- Translation of transport and protocol failures into GatewayError
- Normalization of the provider's response shapes into GatewayResult
- Structured logging with timing metrics

Configuration (via settings):
- FAPSHI_API_BASE_URL: Provider base URL (sandbox by default)
- FAPSHI_API_USER / FAPSHI_API_KEY: Credentials sent as headers
- FAPSHI_API_USER_HEADER / FAPSHI_API_KEY_HEADER: Header names
- FAPSHI_API_TIMEOUT_SECONDS: Request timeout (default: 5)
- FAPSHI_WEBHOOK_SECRET: Shared secret for webhook signatures (optional)

Usage:
    from payments.adapters import FapshiAdapter, FapshiConfig, InitiatePaymentParams

    adapter = FapshiAdapter(FapshiConfig.from_settings())
    result = adapter.initiate(
        InitiatePaymentParams(
            amount=1000,
            currency="XAF",
            reference="HACKATHON-<team id>-1718000000000",
            user_id=str(team.id),
            name=team.lead_name,
            email=team.lead_email,
            phone=team.lead_phone,
            redirect_url="https://example.com/hackathon/register/success",
            cancel_url="https://example.com/hackathon/register/cancel",
        )
    )
    result.redirect_target  # URL to send the user to
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import requests
from django.conf import settings

from core.exceptions import ConfigurationError
from payments.exceptions import GatewayError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://sandbox.fapshi.com"

CHECKOUT_URL_KEYS = ("checkout_url", "checkoutUrl")
PAYMENT_LINK_KEYS = ("link", "paymentLink", "payment_link")
TRANSACTION_ID_KEYS = ("transId", "transactionId", "transaction_id")

# Provider bodies can be large HTML error pages
MAX_LOGGED_BODY = 2000


# =============================================================================
# Data Types
# =============================================================================


@dataclass(frozen=True)
class FapshiConfig:
    """
    Connection settings for the Fapshi API.

    Attributes:
        base_url: API root, without trailing slash
        api_user: Value of the API user header
        api_key: Value of the API key header
        api_user_header: Name of the header carrying api_user
        api_key_header: Name of the header carrying api_key
        timeout: Request timeout in seconds
        webhook_secret: Shared secret for webhook HMAC (empty disables check)
    """

    base_url: str = DEFAULT_BASE_URL
    api_user: str = ""
    api_key: str = ""
    api_user_header: str = "apiuser"
    api_key_header: str = "apikey"
    timeout: float = 5.0
    webhook_secret: str = ""

    @classmethod
    def from_settings(cls) -> FapshiConfig:
        return cls(
            base_url=(getattr(settings, "FAPSHI_API_BASE_URL", "") or DEFAULT_BASE_URL).rstrip("/"),
            api_user=getattr(settings, "FAPSHI_API_USER", "") or "",
            api_key=getattr(settings, "FAPSHI_API_KEY", "") or "",
            api_user_header=getattr(settings, "FAPSHI_API_USER_HEADER", "") or "apiuser",
            api_key_header=getattr(settings, "FAPSHI_API_KEY_HEADER", "") or "apikey",
            timeout=float(getattr(settings, "FAPSHI_API_TIMEOUT_SECONDS", 5) or 5),
            webhook_secret=getattr(settings, "FAPSHI_WEBHOOK_SECRET", "") or "",
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_user and self.api_key)


@dataclass
class InitiatePaymentParams:
    """
    Parameters for a Fapshi initiate-pay request.

    Attributes:
        amount: Amount in whole XAF
        currency: ISO 4217 currency code
        reference: Local reference, sent as both externalId and reference
        user_id: Our identifier for the payer (the team id)
        name / email / phone: Payer contact details
        redirect_url: Where the provider sends the user after paying
        cancel_url: Where the provider sends the user on cancel
        message: Free-text description shown on the checkout page
    """

    amount: int
    currency: str
    reference: str
    user_id: str
    name: str
    email: str
    phone: str
    redirect_url: str
    cancel_url: str
    message: str = "Hackathon registration fee"

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if not self.reference:
            raise ValueError("reference is required")
        if not self.currency:
            raise ValueError("currency is required")

    def to_payload(self) -> dict[str, Any]:
        return {
            "amount": self.amount,
            "currency": self.currency,
            "email": self.email,
            "phone": self.phone,
            "name": self.name,
            "userId": self.user_id,
            "externalId": self.reference,
            "reference": self.reference,
            "redirectUrl": self.redirect_url,
            "cancelUrl": self.cancel_url,
            "message": self.message,
        }


class RedirectKind(str, Enum):
    """Which kind of redirect target the provider returned."""

    CHECKOUT_URL = "CHECKOUT_URL"
    PAYMENT_LINK = "PAYMENT_LINK"


@dataclass
class GatewayResult:
    """
    Normalized result of a successful initiate-pay call.

    Attributes:
        redirect_kind: Which response field the target came from
        redirect_target: URL the user must be sent to
        provider_transaction_id: Provider transaction id, if returned
        provider_message: Human-readable message, if returned
        raw_response: Full decoded response body
    """

    redirect_kind: RedirectKind
    redirect_target: str
    provider_transaction_id: str | None = None
    provider_message: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Response Normalization
# =============================================================================


def _first_string(source: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = source.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def normalize_initiate_response(body: dict[str, Any]) -> GatewayResult | None:
    """
    Map an initiate-pay response body to a GatewayResult.

    Looks at the top level first, then inside an embedded "data" object.
    A checkout URL takes precedence over a payment link. Returns None when
    no redirect target can be found.
    """
    scopes = [body]
    nested = body.get("data")
    if isinstance(nested, dict):
        scopes.append(nested)

    redirect_kind = None
    redirect_target = None
    for scope in scopes:
        checkout_url = _first_string(scope, CHECKOUT_URL_KEYS)
        if checkout_url:
            redirect_kind, redirect_target = RedirectKind.CHECKOUT_URL, checkout_url
            break
        link = _first_string(scope, PAYMENT_LINK_KEYS)
        if link:
            redirect_kind, redirect_target = RedirectKind.PAYMENT_LINK, link
            break

    if redirect_target is None:
        return None

    transaction_id = None
    message = None
    for scope in scopes:
        transaction_id = transaction_id or _first_string(scope, TRANSACTION_ID_KEYS)
        message = message or _first_string(scope, ("message",))

    return GatewayResult(
        redirect_kind=redirect_kind,
        redirect_target=redirect_target,
        provider_transaction_id=transaction_id,
        provider_message=message,
        raw_response=body,
    )


# =============================================================================
# Fapshi Adapter
# =============================================================================


class FapshiAdapter:
    """
    Client for the Fapshi payment API.

    The adapter never reads settings itself; build it with
    FapshiAdapter(FapshiConfig.from_settings()) or pass a config
    directly in tests.
    """

    def __init__(self, config: FapshiConfig | None = None):
        self.config = config or FapshiConfig.from_settings()

    @classmethod
    def get_logger(cls) -> logging.Logger:
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            self.config.api_user_header: self.config.api_user,
            self.config.api_key_header: self.config.api_key,
        }

    def check_configuration(self) -> None:
        """
        Fail fast when API credentials are missing.

        Raises:
            ConfigurationError: API user or key is not configured
        """
        if self.config.has_credentials:
            return

        missing = [
            name
            for name, value in (
                ("FAPSHI_API_USER", self.config.api_user),
                ("FAPSHI_API_KEY", self.config.api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Fapshi API credentials are not configured",
                details={"missing": missing},
            )

    def initiate(self, params: InitiatePaymentParams) -> GatewayResult:
        """
        Ask the provider to create a checkout for a payment.

        Args:
            params: Payment details

        Returns:
            GatewayResult with the redirect target

        Raises:
            ConfigurationError: API user or key is not configured
            GatewayError: Network failure, timeout, non-2xx status,
                non-JSON body, or no redirect target in the response
        """
        self.check_configuration()

        log = self.get_logger()
        url = f"{self.config.base_url}/initiate-pay"
        log_context = {
            "operation": "initiate_pay",
            "reference": params.reference,
            "amount": params.amount,
            "currency": params.currency,
        }

        start_time = time.time()
        log.info("Starting Fapshi operation", extra=log_context)

        try:
            response = requests.post(
                url,
                json=params.to_payload(),
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.Timeout as e:
            duration_ms = (time.time() - start_time) * 1000
            log.error(
                "Fapshi request timed out",
                extra={**log_context, "duration_ms": duration_ms},
            )
            raise GatewayError(
                "Payment provider timed out",
                error_code="GATEWAY_TIMEOUT",
                details={"timeout_seconds": self.config.timeout},
            ) from e
        except requests.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            log.error(
                f"Fapshi request failed: {e}",
                extra={**log_context, "duration_ms": duration_ms},
            )
            raise GatewayError(
                "Payment provider is unreachable",
                error_code="GATEWAY_UNAVAILABLE",
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        raw_body = response.text or ""

        if not response.ok:
            log.error(
                "Fapshi returned an error status",
                extra={
                    **log_context,
                    "status_code": response.status_code,
                    "body": raw_body[:MAX_LOGGED_BODY],
                    "duration_ms": duration_ms,
                },
            )
            raise GatewayError(
                f"Payment provider returned HTTP {response.status_code}",
                status_code=response.status_code,
                raw_body=raw_body,
            )

        try:
            body = response.json()
        except ValueError as e:
            log.error(
                "Fapshi returned a non-JSON body",
                extra={
                    **log_context,
                    "status_code": response.status_code,
                    "body": raw_body[:MAX_LOGGED_BODY],
                },
            )
            raise GatewayError(
                "Payment provider returned an unreadable response",
                status_code=response.status_code,
                raw_body=raw_body,
            ) from e

        result = normalize_initiate_response(body) if isinstance(body, dict) else None
        if result is None:
            log.error(
                "Fapshi response has no redirect target",
                extra={
                    **log_context,
                    "status_code": response.status_code,
                    "body": raw_body[:MAX_LOGGED_BODY],
                },
            )
            raise GatewayError(
                "Payment provider did not return a checkout link",
                error_code="GATEWAY_NO_REDIRECT",
                status_code=response.status_code,
                raw_body=raw_body,
            )

        log.info(
            "Fapshi operation completed",
            extra={
                **log_context,
                "redirect_kind": result.redirect_kind.value,
                "provider_transaction_id": result.provider_transaction_id,
                "duration_ms": duration_ms,
            },
        )
        return result
