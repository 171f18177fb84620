"""
Webhook handling for payment notifications from Fapshi.

Usage:
    # In urls.py
    from payments.webhooks.views import fapshi_webhook

    urlpatterns = [
        path("webhooks/fapshi/", fapshi_webhook, name="fapshi_webhook"),
    ]
"""

from payments.webhooks.views import fapshi_webhook

__all__ = [
    "fapshi_webhook",
]
