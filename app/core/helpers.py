"""
Helper functions for common infrastructure operations.

This module provides domain-agnostic utility functions for:
- Token generation (cryptographic)
- HMAC signature computation and constant-time verification
- Bearer token extraction from HTTP requests

Usage:
    from core.helpers import generate_token, verify_hmac_signature

    ref_code = generate_token(8)
    ok = verify_hmac_signature(request.body, header, secret)
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from django.http import HttpRequest


def generate_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure random token.

    Args:
        length: Number of bytes (resulting string is 2x length in hex)

    Example:
        token = generate_token(8)  # Returns 16-character hex string
    """
    return secrets.token_hex(length)


def compute_hmac_signature(payload: bytes, secret: str) -> str:
    """Return the hex HMAC-SHA256 of payload keyed with secret."""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_hmac_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """
    Check a hex HMAC-SHA256 signature against the raw payload.

    Accepts an optional "sha256=" scheme prefix and ignores case and
    surrounding whitespace in the hex digest. Comparison is constant-time.

    Args:
        payload: Raw request body exactly as received
        signature: Signature header value (may be None)
        secret: Shared secret

    Returns:
        True if the signature matches, False otherwise (including when
        the signature is missing)
    """
    if not signature:
        return False

    candidate = signature.strip()
    if candidate.lower().startswith("sha256="):
        candidate = candidate[len("sha256="):]

    expected = compute_hmac_signature(payload, secret)
    # Header values may carry non-ASCII text; compare bytes
    return hmac.compare_digest(
        expected.encode("ascii"),
        candidate.lower().encode("utf-8", "surrogateescape"),
    )


def get_bearer_token(request: HttpRequest) -> str:
    """
    Extract the token from an "Authorization: Bearer <token>" header.

    Returns an empty string when the header is missing or uses another
    scheme.
    """
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return ""
    return header[len("Bearer "):].strip()
