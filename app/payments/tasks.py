"""
Celery tasks for payment processing.

This module provides async tasks for:
- Repairing teams whose payment succeeded but whose status was never
  moved to PAID (team write failed after the payment commit)

Usage:
    from payments.tasks import repair_unpaid_teams

    # Typically called via celery-beat
    repair_unpaid_teams.delay()

Celery Beat Schedule:
    CELERY_BEAT_SCHEDULE = {
        "repair-unpaid-teams": {
            "task": "payments.tasks.repair_unpaid_teams",
            "schedule": crontab(minute="*/15"),
        },
    }
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.db import DatabaseError, transaction

from payments.state_machines import PaymentStatus

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_BATCH_SIZE = 500


# =============================================================================
# Periodic Task: Team Status Repair
# =============================================================================


@shared_task
def repair_unpaid_teams(batch_size: int = DEFAULT_BATCH_SIZE) -> dict:
    """
    Mark PAID every PENDING team that owns a SUCCESS payment.

    Only PENDING teams are touched; CONFIRMED and REJECTED are admin
    decisions and are left alone.

    Args:
        batch_size: Maximum number of teams handled per run

    Returns:
        Dict with:
        - repaired: Number of teams moved to PAID
        - failed: Number of teams whose update raised a database error
    """
    from hackathon.models import Team, TeamStatus

    team_ids = list(
        Team.objects.filter(
            status=TeamStatus.PENDING,
            payments__status=PaymentStatus.SUCCESS,
        )
        .distinct()
        .values_list("id", flat=True)[:batch_size]
    )

    repaired = 0
    failed = 0

    for team_id in team_ids:
        try:
            with transaction.atomic():
                team = Team.objects.select_for_update().get(pk=team_id)
                if team.mark_paid():
                    repaired += 1
                    logger.info(
                        f"Repaired team {team_id}: marked PAID",
                        extra={"team_id": str(team_id)},
                    )
        except DatabaseError:
            failed += 1
            logger.error(
                f"Failed to repair team {team_id}",
                extra={"team_id": str(team_id)},
                exc_info=True,
            )

    if team_ids:
        logger.info(
            "Team repair sweep finished",
            extra={"checked": len(team_ids), "repaired": repaired, "failed": failed},
        )

    return {"repaired": repaired, "failed": failed}
