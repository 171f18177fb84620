"""
Tests for hackathon services.

Tests cover:
- Registration: validation, atomic team creation, payment initiation
- Gateway failures leaving the team without a payment
- Payment retry and the conflict for teams that are not PENDING
- Fee configuration checked before any write or gateway call
- Volunteer referral codes and registration links
"""

from unittest.mock import patch

import pytest
from django.db import DatabaseError, IntegrityError
from django.test import override_settings

from core.exceptions import ConfigurationError, ConflictError, StoreError, ValidationError
from hackathon.models import Team, TeamMember, TeamStatus, Volunteer
from hackathon.services import (
    LeadContact,
    MemberInput,
    RegistrationService,
    VolunteerService,
)
from hackathon.tests.factories import TeamFactory, VolunteerFactory
from payments.adapters import FapshiAdapter, FapshiConfig, GatewayResult, RedirectKind
from payments.exceptions import GatewayError
from payments.models import Payment
from payments.state_machines import PaymentProvider, PaymentStatus


# =============================================================================
# Registration
# =============================================================================


@pytest.mark.django_db
class TestRegister:
    """Tests for RegistrationService.register."""

    def test_registers_team_and_initiates_payment(self, registration_service, mock_adapter, lead, members):
        result = registration_service.register(
            team_name="Alpha", institution="UB", lead=lead, members=members
        )

        team = Team.objects.get(pk=result.team.id)
        assert team.team_name == "Alpha"
        assert team.status == TeamStatus.PENDING
        assert team.members.count() == 1

        payment = result.payment
        assert payment.status == PaymentStatus.INITIATED
        assert payment.amount == 1000
        assert payment.currency == "XAF"
        assert payment.provider == PaymentProvider.FAPSHI
        assert payment.provider_ref == "trans_alpha_001"
        assert payment.reference.startswith(f"HACKATHON-{team.id}-")
        assert result.gateway_result.redirect_target == "https://checkout.fapshi.test/pay/abc"

        params = mock_adapter.initiate.call_args.args[0]
        assert params.amount == 1000
        assert params.reference == payment.reference
        assert params.user_id == str(team.id)
        assert params.email == "ada@example.com"
        assert params.redirect_url == "https://hackathon.test/hackathon/register/success"

    def test_blank_members_dropped(self, registration_service, lead):
        result = registration_service.register(
            team_name="Alpha",
            lead=lead,
            members=[
                MemberInput(name="Bola", email="bola@example.com"),
                MemberInput(name="  ", email="x@example.com"),
                MemberInput(name="Chi", email=""),
            ],
        )

        assert [m.name for m in result.team.members.all()] == ["Bola"]

    def test_values_are_trimmed(self, registration_service, members):
        lead = LeadContact(name="  Ada ", email=" ada@example.com ", phone="690", role="Dev ")

        result = registration_service.register(team_name="  Alpha  ", lead=lead, members=members)

        team = Team.objects.get(pk=result.team.id)
        assert team.team_name == "Alpha"
        assert team.lead_name == "Ada"
        assert team.lead_email == "ada@example.com"

    @pytest.mark.parametrize(
        "field",
        ["name", "email", "phone", "role"],
    )
    def test_missing_lead_field_rejected(self, registration_service, mock_adapter, lead, members, field):
        setattr(lead, field, "   ")

        with pytest.raises(ValidationError) as exc_info:
            registration_service.register(team_name="Alpha", lead=lead, members=members)

        assert f"lead.{field}" in exc_info.value.details
        assert Team.objects.count() == 0
        mock_adapter.initiate.assert_not_called()

    def test_missing_team_name_rejected(self, registration_service, lead, members):
        with pytest.raises(ValidationError) as exc_info:
            registration_service.register(team_name="", lead=lead, members=members)

        assert "teamName" in exc_info.value.details
        assert Team.objects.count() == 0

    def test_no_usable_members_rejected(self, registration_service, mock_adapter, lead):
        with pytest.raises(ValidationError):
            registration_service.register(
                team_name="Alpha",
                lead=lead,
                members=[MemberInput(name="", email="")],
            )

        assert Team.objects.count() == 0
        assert TeamMember.objects.count() == 0
        mock_adapter.initiate.assert_not_called()

    def test_ref_code_links_volunteer(self, registration_service, lead, members):
        volunteer = VolunteerFactory()

        result = registration_service.register(
            team_name="Alpha", lead=lead, members=members, ref_code=volunteer.ref_code
        )

        assert Team.objects.get(pk=result.team.id).volunteer == volunteer

    def test_unknown_ref_code_ignored(self, registration_service, lead, members):
        result = registration_service.register(
            team_name="Alpha", lead=lead, members=members, ref_code="nope"
        )

        assert Team.objects.get(pk=result.team.id).volunteer is None

    def test_store_failure_skips_gateway(self, registration_service, mock_adapter, lead, members):
        with patch.object(TeamMember.objects, "bulk_create", side_effect=DatabaseError("db down")):
            with pytest.raises(StoreError):
                registration_service.register(team_name="Alpha", lead=lead, members=members)

        assert Team.objects.count() == 0
        mock_adapter.initiate.assert_not_called()

    def test_gateway_failure_keeps_team_without_payment(self, registration_service, mock_adapter, lead, members):
        mock_adapter.initiate.side_effect = GatewayError("Payment provider returned HTTP 500", status_code=500)

        with pytest.raises(GatewayError):
            registration_service.register(team_name="Alpha", lead=lead, members=members)

        team = Team.objects.get()
        assert team.status == TeamStatus.PENDING
        assert team.members.count() == 1
        assert Payment.objects.count() == 0

    @override_settings(FAPSHI_API_USER="", FAPSHI_API_KEY="")
    def test_missing_credentials_raise_configuration_error(self, lead, members):
        service = RegistrationService(adapter=FapshiAdapter(FapshiConfig.from_settings()))

        with pytest.raises(ConfigurationError):
            service.register(team_name="Alpha", lead=lead, members=members)

        assert Team.objects.count() == 0
        assert Payment.objects.count() == 0

    @pytest.mark.parametrize("amount", [0, -500])
    def test_invalid_fee_raises_configuration_error(self, settings, registration_service, mock_adapter, lead, members, amount):
        settings.REGISTRATION_FEE_AMOUNT = amount

        with pytest.raises(ConfigurationError) as exc_info:
            registration_service.register(team_name="Alpha", lead=lead, members=members)

        assert exc_info.value.status_code == 500
        assert Team.objects.count() == 0
        assert TeamMember.objects.count() == 0
        mock_adapter.initiate.assert_not_called()


# =============================================================================
# Payment Initiation
# =============================================================================


@pytest.mark.django_db
class TestInitiatePayment:
    """Tests for RegistrationService.initiate_payment."""

    def test_retry_creates_new_payment(self, registration_service, mock_adapter, gateway_result):
        team = TeamFactory()
        mock_adapter.initiate.side_effect = [
            gateway_result,
            GatewayResult(
                redirect_kind=RedirectKind.CHECKOUT_URL,
                redirect_target="https://checkout.fapshi.test/pay/def",
                provider_transaction_id="trans_alpha_002",
            ),
        ]

        references = [f"HACKATHON-{team.id}-1718000000000", f"HACKATHON-{team.id}-1718000001000"]
        with patch.object(RegistrationService, "build_reference", side_effect=references):
            first = registration_service.initiate_payment(team)
            second = registration_service.initiate_payment(team)

        assert first.payment.id != second.payment.id
        assert first.payment.reference != second.payment.reference
        assert team.payments.count() == 2
        assert team.latest_payment() == second.payment

    def test_paid_team_conflict(self, registration_service, mock_adapter):
        team = TeamFactory(status=TeamStatus.PAID)

        with pytest.raises(ConflictError) as exc_info:
            registration_service.initiate_payment(team)

        assert exc_info.value.error_code == "TEAM_ALREADY_PAID"
        mock_adapter.initiate.assert_not_called()

    @pytest.mark.parametrize("status", [TeamStatus.CONFIRMED, TeamStatus.REJECTED])
    def test_decided_team_conflict(self, registration_service, mock_adapter, status):
        team = TeamFactory(status=status)

        with pytest.raises(ConflictError) as exc_info:
            registration_service.initiate_payment(team)

        assert exc_info.value.error_code == "TEAM_NOT_PENDING"
        assert Payment.objects.count() == 0
        mock_adapter.initiate.assert_not_called()

    @override_settings(REGISTRATION_FEE_AMOUNT=0)
    def test_invalid_fee_raises_before_gateway(self, registration_service, mock_adapter):
        team = TeamFactory()

        with pytest.raises(ConfigurationError):
            registration_service.initiate_payment(team)

        assert Payment.objects.count() == 0
        mock_adapter.initiate.assert_not_called()

    def test_provider_ref_falls_back_to_reference(self, registration_service, mock_adapter):
        mock_adapter.initiate.return_value = GatewayResult(
            redirect_kind=RedirectKind.PAYMENT_LINK,
            redirect_target="https://checkout.fapshi.test/pay/xyz",
        )
        team = TeamFactory()

        result = registration_service.initiate_payment(team)

        assert result.payment.provider_ref == result.payment.reference

    def test_raw_response_stored(self, registration_service):
        result = registration_service.initiate_payment(TeamFactory())

        assert Payment.objects.get(pk=result.payment.pk).raw_payload["transId"] == "trans_alpha_001"

    def test_build_reference_format(self):
        team = TeamFactory.build()

        reference = RegistrationService.build_reference(team)

        prefix, _, millis = reference.rpartition("-")
        assert prefix == f"HACKATHON-{team.id}"
        assert millis.isdigit()


# =============================================================================
# Volunteers
# =============================================================================


@pytest.mark.django_db
class TestVolunteerService:
    """Tests for VolunteerService."""

    def test_create_volunteer(self):
        volunteer = VolunteerService.create_volunteer("Vera", "vera@example.com", "670000000")

        assert Volunteer.objects.get(pk=volunteer.pk).name == "Vera"
        assert len(volunteer.ref_code) == 16
        int(volunteer.ref_code, 16)

    def test_codes_are_unique(self):
        codes = {
            VolunteerService.create_volunteer(f"V{i}", f"v{i}@example.com", "670").ref_code
            for i in range(5)
        }

        assert len(codes) == 5

    def test_missing_fields_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            VolunteerService.create_volunteer("", "vera@example.com", " ")

        assert set(exc_info.value.details) == {"name", "phone"}
        assert Volunteer.objects.count() == 0

    def test_collision_retried(self):
        existing = VolunteerFactory(ref_code="aaaaaaaaaaaaaaaa")

        with patch(
            "hackathon.services.generate_token",
            side_effect=[existing.ref_code, "bbbbbbbbbbbbbbbb"],
        ):
            volunteer = VolunteerService.create_volunteer("Vera", "vera@example.com", "670")

        assert volunteer.ref_code == "bbbbbbbbbbbbbbbb"

    def test_gives_up_after_max_attempts(self):
        with patch.object(Volunteer.objects, "create", side_effect=IntegrityError("dup")):
            with pytest.raises(StoreError):
                VolunteerService.create_volunteer("Vera", "vera@example.com", "670")

    def test_registration_link(self):
        volunteer = VolunteerFactory.build(ref_code="9f2c4e1a7b3d5c60")

        link = VolunteerService.registration_link(volunteer)

        assert link == "https://hackathon.test/hackathon/register?ref=9f2c4e1a7b3d5c60"
