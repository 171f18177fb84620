"""
Hackathon registration models.

Models:
    Team: A registered team and its lead contact
    TeamMember: Additional members, created atomically with the team
    Volunteer: Referral partner whose ref code attributes registrations

Team status:
    PENDING   - Registered, fee not yet confirmed (default)
    PAID      - A payment for the team succeeded
    CONFIRMED - Admin accepted the team
    REJECTED  - Admin declined the team

Only two writers change a team's status: the admin edit endpoint and
payment reconciliation (PENDING -> PAID).
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin


class TeamStatus(models.TextChoices):
    """Registration status of a team."""

    PENDING = "PENDING", "Pending"
    PAID = "PAID", "Paid"
    CONFIRMED = "CONFIRMED", "Confirmed"
    REJECTED = "REJECTED", "Rejected"


class Volunteer(UUIDPrimaryKeyMixin, BaseModel):
    """
    Referral partner sharing a personal registration link.

    Fields:
        name / email / phone: Contact details
        ref_code: Unique 16-char hex code appended to the registration link
    """

    name = models.CharField(max_length=200)
    email = models.EmailField(max_length=254)
    phone = models.CharField(max_length=32)
    ref_code = models.CharField(
        max_length=32,
        unique=True,
        help_text="Referral code used in ?ref= of the registration link",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Volunteer"
        verbose_name_plural = "Volunteers"

    def __str__(self) -> str:
        return f"{self.name} ({self.ref_code})"


class Team(UUIDPrimaryKeyMixin, BaseModel):
    """
    A team registered for the hackathon.

    The lead's contact details are used as the payer for the
    registration fee. Teams are never deleted by the application.
    """

    team_name = models.CharField(max_length=200)
    institution = models.CharField(max_length=200, blank=True, default="")

    lead_name = models.CharField(max_length=200)
    lead_email = models.EmailField(max_length=254)
    lead_phone = models.CharField(max_length=32)
    lead_role = models.CharField(max_length=100)

    status = models.CharField(
        max_length=20,
        choices=TeamStatus.choices,
        default=TeamStatus.PENDING,
        db_index=True,
    )

    volunteer = models.ForeignKey(
        Volunteer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="teams",
        help_text="Volunteer whose referral link was used",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Team"
        verbose_name_plural = "Teams"

    def __str__(self) -> str:
        return f"{self.team_name} ({self.status})"

    @property
    def is_paid(self) -> bool:
        return self.status == TeamStatus.PAID

    def latest_payment(self):
        """Most recent payment attempt, the only one shown to users."""
        return self.payments.order_by("-created_at").first()

    def mark_paid(self) -> bool:
        """
        Move a PENDING team to PAID and save it.

        Returns:
            True if the status changed, False if the team was already
            PAID or carries an admin decision (CONFIRMED, REJECTED)
        """
        if self.status != TeamStatus.PENDING:
            return False
        self.status = TeamStatus.PAID
        self.save(update_fields=["status", "updated_at"])
        return True


class TeamMember(UUIDPrimaryKeyMixin, BaseModel):
    """A team member other than the lead."""

    team = models.ForeignKey(
        Team,
        on_delete=models.CASCADE,
        related_name="members",
    )
    name = models.CharField(max_length=200)
    email = models.EmailField(max_length=254)
    role = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name = "Team Member"
        verbose_name_plural = "Team Members"

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
