"""
State machine enums for payment models.

This module defines the state enums used by payment models with django-fsm.
"""

from payments.state_machines.states import (
    PaymentProvider,
    PaymentStatus,
    ReconcileOutcome,
)

__all__ = [
    "PaymentProvider",
    "PaymentStatus",
    "ReconcileOutcome",
]
