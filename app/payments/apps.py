"""
Payments app configuration.

This app provides the registration-fee payment lifecycle:
- Payment model and state machine
- Fapshi gateway adapter
- Webhook reconciliation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
