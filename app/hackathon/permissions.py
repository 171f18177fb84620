"""
Admin access for the hackathon API.

Admins share one static bearer token (HACKATHON_ADMIN_TOKEN) obtained by
logging in with HACKATHON_ADMIN_PASSWORD. There are no admin user
accounts.

Classes:
- AdminTokenAuthentication: Accepts "Authorization: Bearer <token>"
- IsHackathonAdmin: Grants access only to requests authenticated above

Usage:
    class AdminTeamListView(APIView):
        authentication_classes = [AdminTokenAuthentication]
        permission_classes = [IsHackathonAdmin]
"""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from rest_framework import exceptions, permissions
from rest_framework.authentication import BaseAuthentication

from core.exceptions import ConfigurationError
from core.helpers import get_bearer_token

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


ADMIN_AUTH = "hackathon-admin"


def get_admin_token() -> str:
    """
    Configured admin token.

    Raises:
        ConfigurationError: HACKATHON_ADMIN_TOKEN is not set
    """
    token = getattr(settings, "HACKATHON_ADMIN_TOKEN", "") or ""
    if not token:
        raise ConfigurationError("Admin credentials are not configured")
    return token


def check_admin_password(password: str) -> str | None:
    """
    Return the admin token if the password matches, None otherwise.

    Raises:
        ConfigurationError: Admin password or token is not set
    """
    expected = getattr(settings, "HACKATHON_ADMIN_PASSWORD", "") or ""
    if not expected:
        raise ConfigurationError("Admin credentials are not configured")
    token = get_admin_token()

    if not hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
        return None
    return token


class AdminTokenAuthentication(BaseAuthentication):
    """Static bearer-token authentication for hackathon admins."""

    keyword = "Bearer"

    def authenticate(self, request: Request):
        expected = get_admin_token()
        token = get_bearer_token(request)
        if not token:
            return None

        if not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
            raise exceptions.AuthenticationFailed("Invalid admin token")

        return (AnonymousUser(), ADMIN_AUTH)

    def authenticate_header(self, request: Request) -> str:
        return self.keyword


class IsHackathonAdmin(permissions.BasePermission):
    """Allows access only to requests carrying the admin token."""

    message = "Admin token required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        return request.auth == ADMIN_AUTH
