"""
Pytest fixtures for Fapshi adapter tests.

Sections:
    - Config and Params Fixtures
    - Mock HTTP Fixtures
"""

from unittest.mock import patch

import pytest

from payments.adapters import FapshiAdapter, FapshiConfig, InitiatePaymentParams


# =============================================================================
# Config and Params Fixtures
# =============================================================================


@pytest.fixture
def config():
    return FapshiConfig(
        base_url="https://sandbox.fapshi.test",
        api_user="user-123",
        api_key="key-456",
        timeout=5,
    )


@pytest.fixture
def adapter(config):
    return FapshiAdapter(config)


@pytest.fixture
def params():
    return InitiatePaymentParams(
        amount=1000,
        currency="XAF",
        reference="HACKATHON-team-1718000000000",
        user_id="team-uuid",
        name="Ada Lead",
        email="ada@example.com",
        phone="690000000",
        redirect_url="https://hackathon.test/hackathon/register/success",
        cancel_url="https://hackathon.test/hackathon/register/cancel",
    )


# =============================================================================
# Mock HTTP Fixtures
# =============================================================================


@pytest.fixture
def mock_post():
    """Patch requests.post as used by the adapter."""
    with patch("payments.adapters.fapshi_adapter.requests.post") as mocked:
        yield mocked
