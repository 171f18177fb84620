"""
Payment model for the registration-fee lifecycle.

A Payment is one attempt to collect a team's registration fee through the
provider. It is created in INITIATED once the provider accepts the
initiate call, and moves exactly once into SUCCESS or FAILED when the
provider's webhook is reconciled.

Usage:
    from payments.models import Payment
    from payments.state_machines import PaymentStatus

    payment = Payment.objects.create(
        team=team,
        amount=1000,
        currency="XAF",
        provider_ref="trans_abc",
        reference="HACKATHON-<team id>-1718000000000",
        raw_payload=gateway_result.raw_response,
    )

    # State transitions using django-fsm
    payment.mark_succeeded(payload)  # INITIATED -> SUCCESS
    payment.save()
"""

from __future__ import annotations

from django.db import models
from django.db.models import Q
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin, VersionedMixin

from payments.state_machines import PaymentProvider, PaymentStatus


class PaymentQuerySet(models.QuerySet):
    """QuerySet helpers for reconciliation lookups."""

    def matching_reference(self, provider: str, candidate: str) -> PaymentQuerySet:
        """
        Payments of a provider whose provider_ref or local reference
        equals the candidate.

        Both columns are unique per provider, so at most one row matches
        each column. provider_ref wins when both match different rows.
        """
        return (
            self.filter(provider=provider)
            .filter(Q(provider_ref=candidate) | Q(reference=candidate))
            .order_by(
                models.Case(
                    models.When(provider_ref=candidate, then=0),
                    default=1,
                    output_field=models.IntegerField(),
                )
            )
        )

    def succeeded(self) -> PaymentQuerySet:
        return self.filter(status=PaymentStatus.SUCCESS)


class Payment(UUIDPrimaryKeyMixin, VersionedMixin, BaseModel):
    """
    One registration-fee payment attempt for a team.

    State Flow:
        INITIATED -> SUCCESS
        INITIATED -> FAILED

    Fields:
        team: Team the payment belongs to
        amount: Fee amount in whole currency units (XAF has no minor unit)
        currency: ISO 4217 currency code
        provider: Provider tag, half of the reconciliation key
        provider_ref: Provider transaction id (or our reference when the
            provider returned none), the other half of the key
        reference: Reference we generated and sent to the provider
        status: Current FSM state
        raw_payload: Last payload seen from the provider (audit/debug)
        succeeded_at / failed_at: When the terminal status was reached

    Note:
        Only the most recent payment of a team is authoritative for
        display; older INITIATED attempts are abandoned checkouts.
    """

    team = models.ForeignKey(
        "hackathon.Team",
        on_delete=models.PROTECT,
        related_name="payments",
        help_text="Team this payment belongs to",
    )

    amount = models.PositiveIntegerField(
        help_text="Fee amount in whole currency units",
    )

    currency = models.CharField(
        max_length=3,
        default="XAF",
        help_text="ISO 4217 currency code",
    )

    provider = models.CharField(
        max_length=20,
        choices=PaymentProvider.choices,
        default=PaymentProvider.FAPSHI,
        help_text="Payment provider tag",
    )

    provider_ref = models.CharField(
        max_length=255,
        help_text="Provider transaction id used to correlate webhooks",
    )

    reference = models.CharField(
        max_length=255,
        unique=True,
        help_text="Reference generated locally and sent to the provider",
    )

    status = FSMField(
        default=PaymentStatus.INITIATED,
        choices=PaymentStatus.choices,
        db_index=True,
        protected=True,
        help_text="Current status of the payment (managed by FSM)",
    )

    raw_payload = models.JSONField(
        default=dict,
        blank=True,
        help_text="Last payload received from the provider",
    )

    succeeded_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the provider confirmed the payment",
    )

    failed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the provider reported the payment as failed",
    )

    objects = PaymentQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=["team", "created_at"], name="payment_team_created_idx"),
            models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["provider", "provider_ref"],
                name="payment_provider_ref_unique",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Payment({self.id}, {self.status}, {self.amount} {self.currency})"

    @property
    def is_terminal(self) -> bool:
        return self.status in PaymentStatus.terminal()

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=PaymentStatus.INITIATED,
        target=PaymentStatus.SUCCESS,
    )
    def mark_succeeded(self, payload: dict | None = None):
        """
        Transition: INITIATED -> SUCCESS

        Called when a webhook reports success for this payment.
        """
        self.succeeded_at = timezone.now()
        if payload is not None:
            self.raw_payload = payload

    @transition(
        field=status,
        source=PaymentStatus.INITIATED,
        target=PaymentStatus.FAILED,
    )
    def mark_failed(self, payload: dict | None = None):
        """
        Transition: INITIATED -> FAILED

        Called when a webhook reports any non-success status.
        """
        self.failed_at = timezone.now()
        if payload is not None:
            self.raw_payload = payload
