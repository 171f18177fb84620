"""
Webhook endpoint view for Fapshi.

The view hands the raw body and signature header to the
WebhookReconciler and acknowledges the delivery. Fapshi retries any
non-2xx response, so only unexpected internal faults return 500;
malformed, unsigned or unmatched deliveries are logged and acknowledged.

Usage:
    # In urls.py
    from payments.webhooks.views import fapshi_webhook

    urlpatterns = [
        path("webhooks/fapshi/", fapshi_webhook, name="fapshi_webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.services import WebhookReconciler


logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Fapshi-Signature"


@csrf_exempt
@require_POST
def fapshi_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive a Fapshi payment notification.

    Security:
    - HMAC-SHA256 signature checked when FAPSHI_WEBHOOK_SECRET is set
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - A terminal payment never changes status again
    - Duplicate deliveries return 200 without side effects

    Returns:
        JsonResponse with status:
        - 200 {"received": true}: Delivery handled (any outcome)
        - 500 {"error": ...}: Internal failure, provider should retry
    """
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        outcome = WebhookReconciler().reconcile(request.body, signature)
    except Exception as e:
        logger.error(
            f"Fapshi webhook processing failed: {type(e).__name__}",
            exc_info=True,
        )
        return JsonResponse({"error": "Webhook processing failed"}, status=500)

    logger.info(
        "Fapshi webhook handled",
        extra={"outcome": outcome.value},
    )
    return JsonResponse({"received": True})
