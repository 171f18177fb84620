"""
Payment adapters for external services.

All calls to the payment provider go through these adapters so that
timeouts, error translation and response normalization stay consistent.

Usage:
    from payments.adapters import FapshiAdapter, FapshiConfig, InitiatePaymentParams

    adapter = FapshiAdapter(FapshiConfig.from_settings())
    result = adapter.initiate(InitiatePaymentParams(...))
"""

from payments.adapters.fapshi_adapter import (
    FapshiAdapter,
    FapshiConfig,
    GatewayResult,
    InitiatePaymentParams,
    RedirectKind,
    normalize_initiate_response,
)

__all__ = [
    "FapshiAdapter",
    "FapshiConfig",
    "GatewayResult",
    "InitiatePaymentParams",
    "RedirectKind",
    "normalize_initiate_response",
]
