"""
Tests for Payment state machine transitions using django-fsm.
"""

import pytest
from django_fsm import TransitionNotAllowed

from payments.models import Payment
from payments.state_machines import PaymentStatus


class TestPaymentTransitions:
    """Tests for Payment state machine transitions."""

    # -------------------------------------------------------------------------
    # Valid Transitions
    # -------------------------------------------------------------------------

    def test_initiated_to_success(self, initiated_payment):
        """Should transition from initiated to success and stamp the time."""
        initiated_payment.mark_succeeded({"status": "SUCCESSFUL"})
        initiated_payment.save()

        stored = Payment.objects.get(pk=initiated_payment.pk)
        assert stored.status == PaymentStatus.SUCCESS
        assert stored.succeeded_at is not None
        assert stored.raw_payload == {"status": "SUCCESSFUL"}

    def test_initiated_to_failed(self, initiated_payment):
        """Should transition from initiated to failed and stamp the time."""
        initiated_payment.mark_failed({"status": "FAILED"})
        initiated_payment.save()

        stored = Payment.objects.get(pk=initiated_payment.pk)
        assert stored.status == PaymentStatus.FAILED
        assert stored.failed_at is not None

    def test_transition_without_payload_keeps_raw_payload(self, initiated_payment):
        """Should leave raw_payload untouched when no payload is given."""
        initiated_payment.raw_payload = {"link": "https://checkout.test/x"}
        initiated_payment.mark_succeeded()

        assert initiated_payment.raw_payload == {"link": "https://checkout.test/x"}

    # -------------------------------------------------------------------------
    # Invalid Transitions
    # -------------------------------------------------------------------------

    def test_success_cannot_fail(self, succeeded_payment):
        """Should never regress a successful payment."""
        with pytest.raises(TransitionNotAllowed):
            succeeded_payment.mark_failed()

    def test_failed_cannot_succeed(self, failed_payment):
        """Should not move a failed payment to success."""
        with pytest.raises(TransitionNotAllowed):
            failed_payment.mark_succeeded()

    def test_success_cannot_succeed_twice(self, succeeded_payment):
        """Should reject re-applying the same terminal transition."""
        with pytest.raises(TransitionNotAllowed):
            succeeded_payment.mark_succeeded()

    def test_status_is_protected(self, initiated_payment):
        """Should not allow direct assignment of the status field."""
        with pytest.raises(AttributeError):
            initiated_payment.status = PaymentStatus.SUCCESS
