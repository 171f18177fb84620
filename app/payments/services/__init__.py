"""
Payment services.

This module provides:
- WebhookReconciler: Applies provider webhooks to payments and teams
- extract_correlation_candidates / normalize_verdict: Webhook field drift

Usage:
    from payments.services import WebhookReconciler

    outcome = WebhookReconciler().reconcile(request.body, signature)
"""

from payments.services.reconciler import (
    WebhookReconciler,
    extract_correlation_candidates,
    normalize_verdict,
)

__all__ = [
    "WebhookReconciler",
    "extract_correlation_candidates",
    "normalize_verdict",
]
