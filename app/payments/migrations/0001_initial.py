import uuid

import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hackathon", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("version", models.PositiveIntegerField(default=1, help_text="Version for optimistic locking - incremented on each save")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier for this record", primary_key=True, serialize=False)),
                ("amount", models.PositiveIntegerField(help_text="Fee amount in whole currency units")),
                ("currency", models.CharField(default="XAF", help_text="ISO 4217 currency code", max_length=3)),
                ("provider", models.CharField(choices=[("FAPSHI", "Fapshi")], default="FAPSHI", help_text="Payment provider tag", max_length=20)),
                ("provider_ref", models.CharField(help_text="Provider transaction id used to correlate webhooks", max_length=255)),
                ("reference", models.CharField(help_text="Reference generated locally and sent to the provider", max_length=255, unique=True)),
                ("status", django_fsm.FSMField(choices=[("INITIATED", "Initiated"), ("SUCCESS", "Success"), ("FAILED", "Failed")], db_index=True, default="INITIATED", help_text="Current status of the payment (managed by FSM)", max_length=50, protected=True)),
                ("raw_payload", models.JSONField(blank=True, default=dict, help_text="Last payload received from the provider")),
                ("succeeded_at", models.DateTimeField(blank=True, help_text="When the provider confirmed the payment", null=True)),
                ("failed_at", models.DateTimeField(blank=True, help_text="When the provider reported the payment as failed", null=True)),
                ("team", models.ForeignKey(help_text="Team this payment belongs to", on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="hackathon.team")),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["team", "created_at"], name="payment_team_created_idx"),
                    models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("provider", "provider_ref"), name="payment_provider_ref_unique"),
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="payment_amount_positive"),
                ],
            },
        ),
    ]
