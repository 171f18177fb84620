"""
Webhook reconciliation for Fapshi payment notifications.

The provider tells us asynchronously how a payment ended. Deliveries can
arrive late, twice, out of order, unsigned, or with renamed fields. The
WebhookReconciler turns one delivery into at most one status transition
of one Payment and, on success, marks the owning Team as PAID.

Field drift is absorbed by two functions kept together in this module:
    extract_correlation_candidates: which payload fields identify the payment
    normalize_verdict: how the provider's status string maps to our states

Flow:
    1. Authenticate (HMAC-SHA256 when FAPSHI_WEBHOOK_SECRET is set)
    2. Parse the body as a JSON object
    3. Look up the Payment by each correlation candidate in order
    4. Apply the verdict (INITIATED only; terminal payments never regress)
    5. On SUCCESS, mark the Team PAID in a separate transaction

Every outcome is acknowledged to the provider. Only unexpected database
faults propagate, so the provider retries.

Usage:
    from payments.services import WebhookReconciler

    outcome = WebhookReconciler().reconcile(request.body, signature)
"""

from __future__ import annotations

import json
import logging
from typing import Any

from django.db import transaction

from core.helpers import verify_hmac_signature
from core.services import BaseService

from payments.adapters import FapshiConfig
from payments.exceptions import (
    MalformedWebhookError,
    ReconciliationMiss,
    SignatureError,
)
from payments.models import Payment
from payments.state_machines import PaymentProvider, PaymentStatus, ReconcileOutcome


logger = logging.getLogger(__name__)


# Checked in order; the first field that matches a payment wins
CORRELATION_FIELDS: tuple[tuple[str, ...], ...] = (
    ("reference",),
    ("externalId", "external_id"),
    ("transId", "transactionId", "transaction_id"),
)


# =============================================================================
# Payload Normalization
# =============================================================================


def extract_correlation_candidates(payload: dict[str, Any]) -> list[str]:
    """
    Collect the identifiers a webhook may use to point at a payment.

    Order: reference, then externalId (or external_id), then transId (or
    transactionId, transaction_id). Non-string and blank values are
    dropped, duplicates removed, order kept.

    Example:
        extract_correlation_candidates({"externalId": "REF-1", "transId": "t1"})
        # ["REF-1", "t1"]
    """
    candidates: list[str] = []
    for aliases in CORRELATION_FIELDS:
        for key in aliases:
            value = payload.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                value = str(value)
            if not isinstance(value, str):
                continue
            value = value.strip()
            if value and value not in candidates:
                candidates.append(value)
    return candidates


def normalize_verdict(raw_status: Any) -> str:
    """
    Map a provider status string to SUCCESS or FAILED.

    "success", "Success", "SUCCESS_COMPLETE" map to SUCCESS. Everything
    else, including a missing status, maps to FAILED.
    """
    if not isinstance(raw_status, str):
        return PaymentStatus.FAILED

    status = raw_status.strip().upper()
    if status.startswith(PaymentStatus.SUCCESS.value):
        return PaymentStatus.SUCCESS
    return PaymentStatus.FAILED


# =============================================================================
# Reconciler
# =============================================================================


class WebhookReconciler(BaseService):
    """
    Apply one provider webhook delivery to the matching Payment.

    Construct with an explicit FapshiConfig in tests; the default reads
    settings once at construction time.
    """

    provider = PaymentProvider.FAPSHI

    def __init__(self, config: FapshiConfig | None = None):
        self.config = config or FapshiConfig.from_settings()

    def reconcile(
        self,
        raw_body: bytes,
        signature_header: str | None = None,
    ) -> ReconcileOutcome:
        """
        Handle one webhook delivery.

        Args:
            raw_body: Request body exactly as received
            signature_header: Value of X-Fapshi-Signature, if any

        Returns:
            ReconcileOutcome describing what happened

        Raises:
            DatabaseError: Unexpected store failure (caller returns 500)
        """
        log = self.get_logger()

        try:
            self._authenticate(raw_body, signature_header)
        except SignatureError as e:
            log.warning(
                f"Rejected Fapshi webhook: {e.message}",
                extra={"error_code": e.error_code},
            )
            return ReconcileOutcome.REJECTED_SIGNATURE

        try:
            payload = self._parse(raw_body)
        except MalformedWebhookError as e:
            log.error(
                f"Malformed Fapshi webhook: {e.message}",
                extra={"error_code": e.error_code, **e.details},
            )
            return ReconcileOutcome.MALFORMED

        candidates = extract_correlation_candidates(payload)
        if not candidates:
            log.warning(
                "Fapshi webhook carries no correlation field",
                extra={"payload_keys": sorted(payload.keys())},
            )
            return ReconcileOutcome.NO_REFERENCE

        verdict = normalize_verdict(payload.get("status"))

        try:
            outcome, payment = self._apply_verdict(candidates, verdict, payload)
        except ReconciliationMiss as e:
            # A real transaction we cannot see; needs manual follow-up
            log.error(
                "Reconciliation miss: no payment matches Fapshi webhook",
                extra={"error_code": e.error_code, **e.details},
            )
            return ReconcileOutcome.UNMATCHED

        if verdict == PaymentStatus.SUCCESS and outcome in (
            ReconcileOutcome.APPLIED,
            ReconcileOutcome.DUPLICATE,
        ):
            self._mark_team_paid(payment)

        return outcome

    # =========================================================================
    # Steps
    # =========================================================================

    def _authenticate(self, raw_body: bytes, signature_header: str | None) -> None:
        secret = self.config.webhook_secret
        if not secret:
            self.get_logger().warning(
                "FAPSHI_WEBHOOK_SECRET is not set; accepting unsigned webhook "
                "(degraded trust)"
            )
            return

        if not signature_header:
            raise SignatureError("Missing webhook signature")

        if not verify_hmac_signature(raw_body, signature_header, secret):
            raise SignatureError("Webhook signature does not match")

    @staticmethod
    def _parse(raw_body: bytes) -> dict[str, Any]:
        try:
            payload = json.loads(raw_body)
        except (TypeError, ValueError) as e:
            raise MalformedWebhookError(
                "Webhook body is not valid JSON",
                details={"body_length": len(raw_body or b"")},
            ) from e

        if not isinstance(payload, dict):
            raise MalformedWebhookError(
                "Webhook body is not a JSON object",
                details={"body_type": type(payload).__name__},
            )
        return payload

    def _apply_verdict(
        self,
        candidates: list[str],
        verdict: str,
        payload: dict[str, Any],
    ) -> tuple[ReconcileOutcome, Payment]:
        """
        Lock the matching payment and apply the verdict.

        Runs in its own transaction, committed before the team step.

        Raises:
            ReconciliationMiss: No payment matches any candidate
        """
        log = self.get_logger()

        with transaction.atomic():
            payment = None
            for candidate in candidates:
                payment = (
                    Payment.objects.select_for_update()
                    .matching_reference(self.provider, candidate)
                    .first()
                )
                if payment is not None:
                    break

            if payment is None:
                raise ReconciliationMiss(
                    "No payment matches webhook",
                    details={
                        "candidates": candidates,
                        "status": payload.get("status"),
                    },
                )

            log_context = {
                "payment_id": str(payment.id),
                "team_id": str(payment.team_id),
                "provider_ref": payment.provider_ref,
                "verdict": verdict,
            }

            # Last delivery is kept for audit regardless of outcome
            payment.raw_payload = payload

            if payment.status == PaymentStatus.INITIATED:
                if verdict == PaymentStatus.SUCCESS:
                    payment.mark_succeeded(payload)
                else:
                    payment.mark_failed(payload)
                payment.save()
                log.info(
                    f"Payment {payment.id} moved to {payment.status}",
                    extra=log_context,
                )
                return ReconcileOutcome.APPLIED, payment

            payment.save()

            if payment.status == verdict:
                log.info(
                    f"Payment {payment.id} already {payment.status}, duplicate delivery",
                    extra=log_context,
                )
                return ReconcileOutcome.DUPLICATE, payment

            log.warning(
                f"Conflicting webhook for terminal payment {payment.id}: "
                f"stored {payment.status}, received {verdict}",
                extra={**log_context, "stored_status": payment.status},
            )
            return ReconcileOutcome.CONFLICT_IGNORED, payment

    def _mark_team_paid(self, payment: Payment) -> None:
        """
        Mark the payment's team PAID.

        A failure here leaves Payment=SUCCESS with an unpaid team; it is
        logged and re-raised so the provider redelivers, and the repair
        sweep catches whatever is left.
        """
        from hackathon.models import Team

        log = self.get_logger()
        try:
            with transaction.atomic():
                team = Team.objects.select_for_update().get(pk=payment.team_id)
                changed = team.mark_paid()
        except Exception:
            log.exception(
                "Failed to mark team PAID after successful payment",
                extra={
                    "payment_id": str(payment.id),
                    "team_id": str(payment.team_id),
                },
            )
            raise

        if changed:
            log.info(
                f"Team {team.id} marked PAID",
                extra={"payment_id": str(payment.id), "team_id": str(team.id)},
            )
