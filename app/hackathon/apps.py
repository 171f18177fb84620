"""
Hackathon app configuration.
"""

from django.apps import AppConfig


class HackathonConfig(AppConfig):
    """Configuration for the hackathon application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "hackathon"
    verbose_name = "Hackathon"
