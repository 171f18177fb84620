"""
API views for hackathon registration and administration.

URL Structure:
    /api/v1/hackathon/register/                  POST   Register team, start payment
    /api/v1/hackathon/teams/{id}/                GET    Public receipt
    /api/v1/hackathon/teams/{id}/payment/        POST   Retry payment
    /api/v1/hackathon/admin/login/               POST   Exchange password for token
    /api/v1/hackathon/admin/teams/               GET    All teams + stats
    /api/v1/hackathon/admin/teams/{id}/          PATCH  Edit team
    /api/v1/hackathon/admin/volunteers/          GET, POST

Design Decisions:
    - Public endpoints need no authentication
    - Admin endpoints use the static bearer token (see permissions)
    - Business logic lives in services; domain errors are rendered by
      core.exceptions.api_exception_handler
"""

from __future__ import annotations

import logging

from django.db.models import Count, Prefetch, Q
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import NotFoundError
from hackathon.models import Team, TeamStatus, Volunteer
from hackathon.permissions import (
    AdminTokenAuthentication,
    IsHackathonAdmin,
    check_admin_password,
)
from hackathon.serializers import (
    AdminLoginSerializer,
    PaymentInitiationSerializer,
    RegistrationRequestSerializer,
    TeamReceiptSerializer,
    TeamSerializer,
    TeamUpdateSerializer,
    VolunteerCreateSerializer,
    VolunteerSerializer,
)
from hackathon.services import RegistrationService, VolunteerService
from payments.models import Payment
from payments.state_machines import PaymentStatus

logger = logging.getLogger(__name__)


def teams_with_details():
    """Teams with members and payments (newest first) prefetched."""
    return Team.objects.prefetch_related(
        "members",
        Prefetch("payments", queryset=Payment.objects.order_by("-created_at")),
    )


def get_team_or_404(queryset, team_id) -> Team:
    try:
        return queryset.get(pk=team_id)
    except Team.DoesNotExist:
        raise NotFoundError("Team not found", details={"team_id": str(team_id)})


# =============================================================================
# Public Views
# =============================================================================


class RegisterTeamView(APIView):
    """
    Register a team and start its registration-fee payment.

    POST /api/v1/hackathon/register/
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="register_team",
        summary="Register team",
        tags=["Hackathon"],
        request=RegistrationRequestSerializer,
        responses={
            201: PaymentInitiationSerializer,
            400: OpenApiResponse(description="Missing or invalid fields"),
            502: OpenApiResponse(description="Payment provider failure"),
        },
    )
    def post(self, request):
        serializer = RegistrationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RegistrationService().register(**serializer.to_service_kwargs())

        return Response(
            PaymentInitiationSerializer(result).data,
            status=status.HTTP_201_CREATED,
        )


class TeamReceiptView(APIView):
    """
    Public receipt: team, members and latest payment.

    GET /api/v1/hackathon/teams/{team_id}/
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="get_team_receipt",
        summary="Get team receipt",
        tags=["Hackathon"],
        responses={200: TeamReceiptSerializer, 404: OpenApiResponse(description="Unknown team")},
    )
    def get(self, request, team_id):
        team = get_team_or_404(teams_with_details(), team_id)
        return Response(TeamReceiptSerializer(team).data)


class TeamPaymentView(APIView):
    """
    Start a new payment attempt for an existing team.

    POST /api/v1/hackathon/teams/{team_id}/payment/
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="retry_team_payment",
        summary="Retry team payment",
        tags=["Hackathon"],
        request=None,
        responses={
            201: PaymentInitiationSerializer,
            404: OpenApiResponse(description="Unknown team"),
            409: OpenApiResponse(description="Team already paid or no longer PENDING"),
            502: OpenApiResponse(description="Payment provider failure"),
        },
    )
    def post(self, request, team_id):
        team = get_team_or_404(Team.objects.all(), team_id)
        result = RegistrationService().initiate_payment(team)
        return Response(
            PaymentInitiationSerializer(result).data,
            status=status.HTTP_201_CREATED,
        )


# =============================================================================
# Admin Views
# =============================================================================


class AdminLoginView(APIView):
    """
    Exchange the admin password for the admin token.

    POST /api/v1/hackathon/admin/login/
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="admin_login",
        summary="Admin login",
        tags=["Hackathon - Admin"],
        request=AdminLoginSerializer,
        responses={200: OpenApiResponse(description="{token}"), 401: OpenApiResponse(description="Wrong password")},
    )
    def post(self, request):
        serializer = AdminLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        token = check_admin_password(serializer.validated_data["password"])
        if token is None:
            logger.warning("Failed admin login attempt")
            return Response(
                {"error": "Invalid password"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response({"token": token})


class AdminView(APIView):
    authentication_classes = [AdminTokenAuthentication]
    permission_classes = [IsHackathonAdmin]


class AdminTeamListView(AdminView):
    """
    All teams, newest first, with members, latest payment and stats.

    GET /api/v1/hackathon/admin/teams/
    """

    @extend_schema(
        operation_id="admin_list_teams",
        summary="List teams",
        tags=["Hackathon - Admin"],
        responses={200: TeamSerializer(many=True)},
    )
    def get(self, request):
        teams = list(teams_with_details().order_by("-created_at"))
        stats = {
            "total": len(teams),
            "paid": sum(1 for team in teams if team.status == TeamStatus.PAID),
        }
        return Response(
            {
                "teams": TeamSerializer(teams, many=True).data,
                "stats": stats,
            }
        )


class AdminTeamDetailView(AdminView):
    """
    Edit a team.

    PATCH /api/v1/hackathon/admin/teams/{team_id}/
    """

    @extend_schema(
        operation_id="admin_update_team",
        summary="Update team",
        tags=["Hackathon - Admin"],
        request=TeamUpdateSerializer,
        responses={200: TeamSerializer, 404: OpenApiResponse(description="Unknown team")},
    )
    def patch(self, request, team_id):
        team = get_team_or_404(Team.objects.all(), team_id)

        serializer = TeamUpdateSerializer(team, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(
            f"Admin updated team {team.id}",
            extra={"team_id": str(team.id), "fields": sorted(serializer.validated_data.keys())},
        )

        team = get_team_or_404(teams_with_details(), team_id)
        return Response(TeamSerializer(team).data)


class AdminVolunteerView(AdminView):
    """
    List and create volunteers.

    GET  /api/v1/hackathon/admin/volunteers/
    POST /api/v1/hackathon/admin/volunteers/
    """

    @extend_schema(
        operation_id="admin_list_volunteers",
        summary="List volunteers",
        tags=["Hackathon - Admin"],
        responses={200: VolunteerSerializer(many=True)},
    )
    def get(self, request):
        volunteers = Volunteer.objects.annotate(
            teams_count=Count("teams", distinct=True),
            paid_teams_count=Count(
                "teams",
                filter=Q(teams__payments__status=PaymentStatus.SUCCESS),
                distinct=True,
            ),
        ).order_by("-created_at")
        return Response({"volunteers": VolunteerSerializer(volunteers, many=True).data})

    @extend_schema(
        operation_id="admin_create_volunteer",
        summary="Create volunteer",
        tags=["Hackathon - Admin"],
        request=VolunteerCreateSerializer,
        responses={201: VolunteerSerializer},
    )
    def post(self, request):
        serializer = VolunteerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        volunteer = VolunteerService.create_volunteer(**serializer.validated_data)

        return Response(
            VolunteerSerializer(volunteer).data,
            status=status.HTTP_201_CREATED,
        )
