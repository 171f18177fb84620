"""
Payment admin configuration.

Payments are read-only in the admin: status changes only happen through
webhook reconciliation.
"""

from django.contrib import admin

from payments.models import Payment

__all__ = [
    "PaymentAdmin",
]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin configuration for Payment.

    Provides visibility into payment attempts and their statuses.
    """

    list_display = [
        "id",
        "team",
        "amount_display",
        "status",
        "provider",
        "provider_ref",
        "created_at",
    ]
    list_filter = ["status", "provider", "currency", "created_at"]
    search_fields = ["id", "provider_ref", "reference", "team__team_name", "team__lead_email"]
    readonly_fields = [
        "id",
        "team",
        "amount",
        "currency",
        "provider",
        "provider_ref",
        "reference",
        "status",
        "raw_payload",
        "version",
        "created_at",
        "updated_at",
        "succeeded_at",
        "failed_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (None, {"fields": ("id", "team", "status")}),
        ("Amount", {"fields": ("amount", "currency")}),
        ("Provider", {"fields": ("provider", "provider_ref", "reference", "raw_payload")}),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at", "succeeded_at", "failed_at", "version"),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj: Payment) -> str:
        return f"{obj.amount} {obj.currency}"

    def has_add_permission(self, request):
        return False
