"""
Serializers for hackathon API.

Field names follow the public JSON contract (camelCase), mapped to model
attributes with ``source``.

Serializer Hierarchy:
    RegistrationRequestSerializer: Register payload (shape only)
    PaymentInitiationSerializer: Response of register / payment retry

    TeamSerializer: Team with members and latest payment (admin views)
    TeamReceiptSerializer: Public receipt as team, members and payment
    TeamUpdateSerializer: Admin partial update

    VolunteerSerializer: Volunteer with registration link and counters
    VolunteerCreateSerializer: Create payload

Design Decisions:
    - Required-but-blank checks live in the service layer so that
      whitespace-only values are rejected the same way everywhere
    - Blank members are accepted here and dropped by the service
"""

from __future__ import annotations

from rest_framework import serializers

from hackathon.models import Team, TeamMember, TeamStatus, Volunteer
from hackathon.services import LeadContact, MemberInput, VolunteerService
from payments.models import Payment


# =============================================================================
# Registration
# =============================================================================


class LeadSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    email = serializers.CharField(allow_blank=True, trim_whitespace=False)
    phone = serializers.CharField(allow_blank=True, trim_whitespace=False)
    role = serializers.CharField(allow_blank=True, trim_whitespace=False)


class MemberSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    role = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class RegistrationRequestSerializer(serializers.Serializer):
    """
    Request body for POST /api/v1/hackathon/register/.

    Example:
        {
            "teamName": "Alpha",
            "institution": "UB",
            "lead": {"name": "A", "email": "a@x.cm", "phone": "6xx", "role": "Dev"},
            "members": [{"name": "B", "email": "b@x.cm"}],
            "refCode": "9f2c4e1a7b3d5c60"
        }
    """

    teamName = serializers.CharField(allow_blank=True, trim_whitespace=False)
    institution = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    lead = LeadSerializer()
    members = MemberSerializer(many=True)
    refCode = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )

    def to_service_kwargs(self) -> dict:
        data = self.validated_data
        return {
            "team_name": data["teamName"],
            "institution": data.get("institution"),
            "lead": LeadContact(**data["lead"]),
            "members": [MemberInput(**member) for member in data["members"]],
            "ref_code": data.get("refCode"),
        }


class PaymentInitiationSerializer(serializers.Serializer):
    """
    Response body for a started payment.

    Serializes a RegistrationResult.
    """

    teamId = serializers.UUIDField(source="team.id")
    payment = serializers.SerializerMethodField()

    def get_payment(self, result) -> dict:
        gateway = result.gateway_result
        return {
            "id": str(result.payment.id),
            "amount": result.payment.amount,
            "currency": result.payment.currency,
            "provider": result.payment.provider,
            "status": result.payment.status,
            "redirectType": gateway.redirect_kind.value,
            "redirectTarget": gateway.redirect_target,
            "providerTransactionId": gateway.provider_transaction_id,
        }


# =============================================================================
# Teams
# =============================================================================


class PaymentSummarySerializer(serializers.ModelSerializer):
    providerRef = serializers.CharField(source="provider_ref")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Payment
        fields = ["id", "amount", "currency", "provider", "providerRef", "reference", "status", "createdAt"]
        read_only_fields = fields


class TeamMemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = TeamMember
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields


def latest_payment_data(team: Team) -> dict | None:
    """Newest payment of a team, picked from its prefetched payments."""
    payments = list(team.payments.all())
    if not payments:
        return None
    latest = max(payments, key=lambda payment: payment.created_at)
    return PaymentSummarySerializer(latest).data


class TeamSummarySerializer(serializers.ModelSerializer):
    teamName = serializers.CharField(source="team_name")
    leadName = serializers.CharField(source="lead_name")
    leadEmail = serializers.CharField(source="lead_email")
    leadPhone = serializers.CharField(source="lead_phone")
    leadRole = serializers.CharField(source="lead_role")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Team
        fields = [
            "id",
            "teamName",
            "institution",
            "leadName",
            "leadEmail",
            "leadPhone",
            "leadRole",
            "status",
            "createdAt",
        ]
        read_only_fields = fields


class TeamSerializer(TeamSummarySerializer):
    """
    Team with its members and most recent payment.

    Expects payments prefetched newest first (see views) so that listing
    teams does not cost one query per team.
    """

    members = TeamMemberSerializer(many=True, read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta(TeamSummarySerializer.Meta):
        fields = TeamSummarySerializer.Meta.fields + ["members", "payment"]
        read_only_fields = fields

    def get_payment(self, obj: Team) -> dict | None:
        return latest_payment_data(obj)


class TeamReceiptSerializer(serializers.Serializer):
    """
    Public receipt, split into its three parts.

    Example:
        {
            "team": {"id": "...", "teamName": "Alpha", "status": "PAID", ...},
            "members": [{"id": "...", "name": "Bola", "email": "...", "role": null}],
            "payment": {"id": "...", "status": "SUCCESS", ...}
        }
    """

    team = TeamSummarySerializer(source="*", read_only=True)
    members = TeamMemberSerializer(many=True, read_only=True)
    payment = serializers.SerializerMethodField()

    def get_payment(self, obj: Team) -> dict | None:
        return latest_payment_data(obj)


class TeamUpdateSerializer(serializers.ModelSerializer):
    """Admin partial update of a team."""

    teamName = serializers.CharField(source="team_name", required=False)
    institution = serializers.CharField(required=False, allow_blank=True)
    leadName = serializers.CharField(source="lead_name", required=False)
    leadEmail = serializers.EmailField(source="lead_email", required=False)
    leadPhone = serializers.CharField(source="lead_phone", required=False)
    leadRole = serializers.CharField(source="lead_role", required=False)
    status = serializers.ChoiceField(choices=TeamStatus.choices, required=False)

    class Meta:
        model = Team
        fields = ["teamName", "institution", "leadName", "leadEmail", "leadPhone", "leadRole", "status"]


# =============================================================================
# Volunteers
# =============================================================================


class VolunteerSerializer(serializers.ModelSerializer):
    """
    Volunteer with referral link and registration counters.

    teamsCount / paidTeamsCount come from queryset annotations and are 0
    for a freshly created volunteer.
    """

    refCode = serializers.CharField(source="ref_code")
    registrationLink = serializers.SerializerMethodField()
    teamsCount = serializers.SerializerMethodField()
    paidTeamsCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Volunteer
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "refCode",
            "registrationLink",
            "teamsCount",
            "paidTeamsCount",
            "createdAt",
        ]
        read_only_fields = fields

    def get_registrationLink(self, obj: Volunteer) -> str:
        return VolunteerService.registration_link(obj)

    def get_teamsCount(self, obj: Volunteer) -> int:
        return getattr(obj, "teams_count", 0)

    def get_paidTeamsCount(self, obj: Volunteer) -> int:
        return getattr(obj, "paid_teams_count", 0)


class VolunteerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    email = serializers.CharField(allow_blank=True, trim_whitespace=False)
    phone = serializers.CharField(allow_blank=True, trim_whitespace=False)


class AdminLoginSerializer(serializers.Serializer):
    password = serializers.CharField(allow_blank=True, trim_whitespace=False)
