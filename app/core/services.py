"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.

Pattern:
    - Expected failures (missing input, wrong state) raise the matching
      core.exceptions error, which the API exception handler renders.
    - Unexpected failures (database errors, bugs) are logged and either
      wrapped (StoreError) or left to propagate.

Usage:
    from core.services import BaseService

    class RegistrationService(BaseService):
        def register(self, team_name: str, ...) -> RegistrationResult:
            self.validate_required(team_name=team_name)
            with self.atomic():
                team = Team.objects.create(team_name=team_name)
            self.get_logger().info(f"Created team {team.id}")
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Required-field validation
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code.
        """
        with transaction.atomic():
            yield

    @classmethod
    def validate_required(cls, **fields) -> None:
        """
        Validate that required fields are provided.

        A value counts as missing when it is None or a string that is
        empty after stripping whitespace.

        Raises:
            ValidationError: with one entry per missing field in details

        Example:
            cls.validate_required(team_name=team_name, lead_email=lead_email)
        """
        errors = {}
        for field_name, value in fields.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            raise ValidationError(
                "Missing required team or lead fields",
                details=errors,
            )
