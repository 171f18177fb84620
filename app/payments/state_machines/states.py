"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration.
PaymentStatus backs the django-fsm field on Payment.

State Machines Overview:

Payment States:
    initiated → success (terminal)
    initiated → failed (terminal)

A terminal payment never moves again. Webhook deliveries that disagree
with a stored terminal status are recorded for audit but do not change it.
"""

from django.db import models


class PaymentStatus(models.TextChoices):
    """
    States for the Payment model lifecycle.

    Terminal states: SUCCESS, FAILED

    State Flow:
        INITIATED → SUCCESS
        INITIATED → FAILED
    """

    INITIATED = "INITIATED", "Initiated"
    SUCCESS = "SUCCESS", "Success"
    FAILED = "FAILED", "Failed"

    @classmethod
    def terminal(cls) -> tuple[str, ...]:
        """Statuses a payment can never leave."""
        return (cls.SUCCESS, cls.FAILED)


class PaymentProvider(models.TextChoices):
    """
    Payment provider tags.

    Stored on every Payment and used as half of the
    (provider, provider_ref) reconciliation key.
    """

    FAPSHI = "FAPSHI", "Fapshi"


class ReconcileOutcome(models.TextChoices):
    """
    Result of handling one inbound webhook delivery.

    Every outcome is acknowledged to the provider with HTTP 200; the
    outcome only drives logging and tests.

    APPLIED:            INITIATED payment moved to a terminal status
    DUPLICATE:          terminal payment re-asserted with the same verdict
    CONFLICT_IGNORED:   terminal payment received a different verdict, kept
    REJECTED_SIGNATURE: signature missing or invalid, payload not trusted
    MALFORMED:          body is not a JSON object
    NO_REFERENCE:       no correlation field present in the payload
    UNMATCHED:          no payment matches any correlation field
    """

    APPLIED = "applied", "Applied"
    DUPLICATE = "duplicate", "Duplicate"
    CONFLICT_IGNORED = "conflict_ignored", "Conflict Ignored"
    REJECTED_SIGNATURE = "rejected_signature", "Rejected Signature"
    MALFORMED = "malformed", "Malformed"
    NO_REFERENCE = "no_reference", "No Reference"
    UNMATCHED = "unmatched", "Unmatched"


__all__ = [
    "PaymentStatus",
    "PaymentProvider",
    "ReconcileOutcome",
]
