"""
Payments app for Fapshi integration.

This app handles:
- Payment records and their status lifecycle
- Initiating payments with the provider
- Webhook reconciliation of payment outcomes
- Periodic repair of teams left unpaid after a successful payment

Related apps:
    - hackathon: Team model owning the payments

Usage:
    from payments.adapters import FapshiAdapter, FapshiConfig
    from payments.services import WebhookReconciler

    result = FapshiAdapter(FapshiConfig.from_settings()).initiate(params)
    outcome = WebhookReconciler().reconcile(request.body, signature)
"""
