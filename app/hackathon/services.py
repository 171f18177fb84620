"""
Hackathon services: team registration and volunteer referrals.

This module provides:
- RegistrationService: Creates teams and starts their fee payment
- VolunteerService: Creates volunteers with unique referral codes

Registration flow:
    1. Validate team and lead fields, drop blank members
    2. Create Team + TeamMembers in one transaction
    3. Ask the payment provider for a checkout (outside the transaction)
    4. Persist one INITIATED Payment correlated to the provider transaction

A provider failure leaves the team in place without a payment. The
caller retries with RegistrationService.initiate_payment(team).

Usage:
    from hackathon.services import RegistrationService, LeadContact, MemberInput

    result = RegistrationService().register(
        team_name="Alpha",
        institution="UB",
        lead=LeadContact(name="A", email="a@x.cm", phone="6xx", role="Dev"),
        members=[MemberInput(name="B", email="b@x.cm")],
    )
    result.gateway_result.redirect_target
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from django.conf import settings
from django.db import DatabaseError, IntegrityError

from core.exceptions import ConfigurationError, ConflictError, StoreError, ValidationError
from core.helpers import generate_token
from core.services import BaseService

from hackathon.models import Team, TeamMember, TeamStatus, Volunteer
from payments.adapters import FapshiAdapter, FapshiConfig, GatewayResult, InitiatePaymentParams
from payments.exceptions import GatewayError
from payments.models import Payment
from payments.state_machines import PaymentProvider


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class LeadContact:
    name: str
    email: str
    phone: str
    role: str


@dataclass
class MemberInput:
    name: str | None
    email: str | None
    role: str | None = None

    @property
    def is_blank(self) -> bool:
        return not (self.name or "").strip() or not (self.email or "").strip()


@dataclass
class RegistrationResult:
    """
    Outcome of a successful registration or payment retry.

    Attributes:
        team: The registered team
        payment: The INITIATED payment just persisted
        gateway_result: Normalized provider response (redirect target)
    """

    team: Team
    payment: Payment
    gateway_result: GatewayResult


def _clean(value: str | None) -> str:
    return (value or "").strip()


# =============================================================================
# Registration
# =============================================================================


class RegistrationService(BaseService):
    """
    Registers teams and initiates their registration-fee payment.

    The gateway adapter can be injected for tests; by default it is built
    from settings when the service is created.
    """

    SUCCESS_PATH = "/hackathon/register/success"
    CANCEL_PATH = "/hackathon/register/cancel"

    def __init__(self, adapter: FapshiAdapter | None = None):
        self.adapter = adapter or FapshiAdapter(FapshiConfig.from_settings())

    def register(
        self,
        team_name: str,
        lead: LeadContact,
        members: list[MemberInput],
        institution: str | None = None,
        ref_code: str | None = None,
    ) -> RegistrationResult:
        """
        Register a team and start its fee payment.

        Raises:
            ValidationError: Missing team/lead field or no usable member
            ConfigurationError: Provider credentials or fee missing (nothing saved)
            StoreError: Team could not be saved (gateway not called)
            GatewayError: Provider refused or returned no redirect
        """
        log = self.get_logger()

        self.validate_required(
            teamName=team_name,
            **{
                "lead.name": lead.name,
                "lead.email": lead.email,
                "lead.phone": lead.phone,
                "lead.role": lead.role,
            },
        )

        kept_members = [m for m in members if not m.is_blank]
        if not kept_members:
            raise ValidationError(
                "At least one team member with name and email is required",
                details={"members": ["At least one member with name and email is required."]},
            )

        self.adapter.check_configuration()
        self._check_fee()

        volunteer = self._resolve_volunteer(ref_code)

        try:
            with self.atomic():
                team = Team.objects.create(
                    team_name=_clean(team_name),
                    institution=_clean(institution),
                    lead_name=_clean(lead.name),
                    lead_email=_clean(lead.email),
                    lead_phone=_clean(lead.phone),
                    lead_role=_clean(lead.role),
                    volunteer=volunteer,
                )
                TeamMember.objects.bulk_create(
                    [
                        TeamMember(
                            team=team,
                            name=_clean(member.name),
                            email=_clean(member.email),
                            role=_clean(member.role) or None,
                        )
                        for member in kept_members
                    ]
                )
        except DatabaseError as e:
            log.error(f"Failed to save team registration: {e}", exc_info=True)
            raise StoreError("Could not save team registration") from e

        log.info(
            f"Registered team {team.id}",
            extra={
                "team_id": str(team.id),
                "members": len(kept_members),
                "volunteer_id": str(volunteer.id) if volunteer else None,
            },
        )

        return self.initiate_payment(team)

    def initiate_payment(self, team: Team) -> RegistrationResult:
        """
        Start a fresh payment attempt for an existing team.

        Safe to call again after a gateway failure: each call uses a new
        reference and persists its own Payment only on provider success.

        Raises:
            ConflictError: Team is not PENDING
            ConfigurationError: Provider credentials or fee missing
            GatewayError: Provider refused or returned no redirect
            StoreError: Payment could not be saved
        """
        log = self.get_logger()

        if team.is_paid:
            raise ConflictError(
                "Team has already paid the registration fee",
                error_code="TEAM_ALREADY_PAID",
                details={"team_id": str(team.id)},
            )
        if team.status != TeamStatus.PENDING:
            raise ConflictError(
                f"Team is {team.status} and cannot start a payment",
                error_code="TEAM_NOT_PENDING",
                details={"team_id": str(team.id), "status": team.status},
            )

        self._check_fee()

        reference = self.build_reference(team)
        amount = settings.REGISTRATION_FEE_AMOUNT
        currency = settings.REGISTRATION_FEE_CURRENCY
        base_url = settings.APP_BASE_URL.rstrip("/")

        params = InitiatePaymentParams(
            amount=amount,
            currency=currency,
            reference=reference,
            user_id=str(team.id),
            name=team.lead_name,
            email=team.lead_email,
            phone=team.lead_phone,
            redirect_url=f"{base_url}{self.SUCCESS_PATH}",
            cancel_url=f"{base_url}{self.CANCEL_PATH}",
            message=f"Hackathon registration fee - {team.team_name}",
        )

        try:
            gateway_result = self.adapter.initiate(params)
        except GatewayError:
            log.warning(
                f"Payment initiation failed for team {team.id}; team kept without payment",
                extra={"team_id": str(team.id), "reference": reference},
            )
            raise

        provider_ref = gateway_result.provider_transaction_id or reference

        try:
            payment = Payment.objects.create(
                team=team,
                amount=amount,
                currency=currency,
                provider=PaymentProvider.FAPSHI,
                provider_ref=provider_ref,
                reference=reference,
                raw_payload=gateway_result.raw_response,
            )
        except DatabaseError as e:
            log.error(
                f"Failed to save payment for team {team.id}",
                extra={"team_id": str(team.id), "provider_ref": provider_ref},
                exc_info=True,
            )
            raise StoreError("Could not save payment") from e

        log.info(
            f"Initiated payment {payment.id} for team {team.id}",
            extra={
                "team_id": str(team.id),
                "payment_id": str(payment.id),
                "provider_ref": provider_ref,
                "redirect_kind": gateway_result.redirect_kind.value,
            },
        )

        return RegistrationResult(team=team, payment=payment, gateway_result=gateway_result)

    @staticmethod
    def _check_fee() -> None:
        amount = settings.REGISTRATION_FEE_AMOUNT
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ConfigurationError(
                "Registration fee is not configured",
                details={"REGISTRATION_FEE_AMOUNT": amount},
            )

    @staticmethod
    def build_reference(team: Team) -> str:
        """Local payment reference: {PREFIX}-{team id}-{epoch millis}."""
        prefix = settings.REGISTRATION_REFERENCE_PREFIX
        return f"{prefix}-{team.id}-{int(time.time() * 1000)}"

    def _resolve_volunteer(self, ref_code: str | None) -> Volunteer | None:
        code = _clean(ref_code)
        if not code:
            return None

        volunteer = Volunteer.objects.filter(ref_code=code).first()
        if volunteer is None:
            self.get_logger().info(
                "Unknown referral code ignored",
                extra={"ref_code": code},
            )
        return volunteer


# =============================================================================
# Volunteers
# =============================================================================


class VolunteerService(BaseService):
    """Creates volunteers and builds their registration links."""

    REF_CODE_BYTES = 8
    MAX_REF_CODE_ATTEMPTS = 5

    @classmethod
    def create_volunteer(cls, name: str, email: str, phone: str) -> Volunteer:
        """
        Create a volunteer with a unique referral code.

        Raises:
            ValidationError: Missing name, email or phone
            StoreError: No unique code after MAX_REF_CODE_ATTEMPTS tries
        """
        cls.validate_required(name=name, email=email, phone=phone)

        for attempt in range(1, cls.MAX_REF_CODE_ATTEMPTS + 1):
            ref_code = generate_token(cls.REF_CODE_BYTES)
            if Volunteer.objects.filter(ref_code=ref_code).exists():
                continue
            try:
                with cls.atomic():
                    volunteer = Volunteer.objects.create(
                        name=_clean(name),
                        email=_clean(email),
                        phone=_clean(phone),
                        ref_code=ref_code,
                    )
            except IntegrityError:
                # Lost a race on the same code
                continue

            cls.get_logger().info(
                f"Created volunteer {volunteer.id}",
                extra={"volunteer_id": str(volunteer.id), "attempt": attempt},
            )
            return volunteer

        cls.get_logger().error("Could not generate a unique referral code")
        raise StoreError("Could not generate a unique referral code")

    @staticmethod
    def registration_link(volunteer: Volunteer) -> str:
        base_url = settings.APP_BASE_URL.rstrip("/")
        return f"{base_url}/hackathon/register?ref={volunteer.ref_code}"
