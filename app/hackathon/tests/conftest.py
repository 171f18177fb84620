"""
Test fixtures for hackathon app.

Provides fixtures for:
- Public and admin API clients
- A stubbed Fapshi initiate-pay endpoint
- A RegistrationService bound to a mock adapter
- Registration payloads
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests
from rest_framework.test import APIClient

from hackathon.services import LeadContact, MemberInput, RegistrationService
from payments.adapters import FapshiAdapter, GatewayResult, RedirectKind


ADMIN_TOKEN = "test-admin-token"

FAPSHI_LINK_BODY = {
    "message": "Request successful",
    "link": "https://checkout.fapshi.test/pay/abc",
    "transId": "trans_alpha_001",
}


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client() -> APIClient:
    """Return unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_client() -> APIClient:
    """Return API client carrying the admin bearer token."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {ADMIN_TOKEN}")
    return client


# =============================================================================
# Payment Provider Fixtures
# =============================================================================


def fapshi_response(status_code=200, json_body=None, text=""):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text or (str(json_body) if json_body is not None else "")
    if json_body is not None:
        response.json.return_value = json_body
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    return response


@pytest.fixture
def fapshi_post():
    """Patch the provider call; returns a payment link by default."""
    with patch("payments.adapters.fapshi_adapter.requests.post") as mocked:
        mocked.return_value = fapshi_response(json_body=dict(FAPSHI_LINK_BODY))
        yield mocked


@pytest.fixture
def gateway_result() -> GatewayResult:
    return GatewayResult(
        redirect_kind=RedirectKind.PAYMENT_LINK,
        redirect_target=FAPSHI_LINK_BODY["link"],
        provider_transaction_id=FAPSHI_LINK_BODY["transId"],
        provider_message=FAPSHI_LINK_BODY["message"],
        raw_response=dict(FAPSHI_LINK_BODY),
    )


@pytest.fixture
def mock_adapter(gateway_result):
    adapter = MagicMock(spec=FapshiAdapter)
    adapter.initiate.return_value = gateway_result
    return adapter


@pytest.fixture
def registration_service(mock_adapter) -> RegistrationService:
    return RegistrationService(adapter=mock_adapter)


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def lead() -> LeadContact:
    return LeadContact(name="Ada Lead", email="ada@example.com", phone="690000000", role="Developer")


@pytest.fixture
def members() -> list[MemberInput]:
    return [MemberInput(name="Bola", email="bola@example.com", role="Designer")]


@pytest.fixture
def registration_payload() -> dict:
    return {
        "teamName": "Alpha",
        "institution": "University of Buea",
        "lead": {
            "name": "Ada Lead",
            "email": "ada@example.com",
            "phone": "690000000",
            "role": "Developer",
        },
        "members": [
            {"name": "Bola", "email": "bola@example.com", "role": "Designer"},
            {"name": "", "email": ""},
        ],
    }
