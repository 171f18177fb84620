"""
Pytest fixtures for payment tests.

Fixtures provide payments in each status and a reconciler bound to an
explicit FapshiConfig, so tests never depend on ambient settings for the
webhook secret.

Usage:
    def test_success(initiated_payment, reconciler):
        reconciler.reconcile(b'{"reference": "...", "status": "SUCCESSFUL"}')
"""

import pytest

from payments.adapters import FapshiConfig
from payments.services import WebhookReconciler
from payments.state_machines import PaymentStatus
from payments.tests.factories import PaymentFactory


WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture
def fapshi_config():
    """Config with credentials and no webhook secret."""
    return FapshiConfig(
        base_url="https://sandbox.fapshi.test",
        api_user="test-api-user",
        api_key="test-api-key",
        timeout=5,
    )


@pytest.fixture
def signed_config(fapshi_config):
    """Config that requires webhook signatures."""
    return FapshiConfig(
        base_url=fapshi_config.base_url,
        api_user=fapshi_config.api_user,
        api_key=fapshi_config.api_key,
        timeout=fapshi_config.timeout,
        webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def reconciler(fapshi_config):
    return WebhookReconciler(config=fapshi_config)


@pytest.fixture
def initiated_payment(db):
    return PaymentFactory()


@pytest.fixture
def succeeded_payment(db):
    return PaymentFactory(status=PaymentStatus.SUCCESS)


@pytest.fixture
def failed_payment(db):
    return PaymentFactory(status=PaymentStatus.FAILED)
