"""
Tests for core helper functions.

Tests cover:
- Token generation
- HMAC signature computation and verification
- Bearer token extraction
"""

from __future__ import annotations

import hashlib
import hmac

import pytest
from django.test import RequestFactory

from core.helpers import (
    compute_hmac_signature,
    generate_token,
    get_bearer_token,
    verify_hmac_signature,
)


SECRET = "whsec_helper"
PAYLOAD = b'{"reference": "trans_1", "status": "SUCCESSFUL"}'


class TestGenerateToken:
    def test_hex_length(self):
        token = generate_token(8)

        assert len(token) == 16
        int(token, 16)

    def test_tokens_differ(self):
        assert generate_token() != generate_token()


class TestHmacSignature:
    """Tests for compute_hmac_signature / verify_hmac_signature."""

    def test_compute_matches_stdlib(self):
        expected = hmac.new(SECRET.encode(), PAYLOAD, hashlib.sha256).hexdigest()

        assert compute_hmac_signature(PAYLOAD, SECRET) == expected

    @pytest.mark.parametrize(
        "transform",
        [
            lambda sig: sig,
            lambda sig: sig.upper(),
            lambda sig: f"sha256={sig}",
            lambda sig: f"  SHA256={sig}  ",
        ],
    )
    def test_accepts_valid_signature_forms(self, transform):
        signature = transform(compute_hmac_signature(PAYLOAD, SECRET))

        assert verify_hmac_signature(PAYLOAD, signature, SECRET) is True

    @pytest.mark.parametrize("signature", [None, "", "deadbeef", "sha256="])
    def test_rejects_missing_or_wrong(self, signature):
        assert verify_hmac_signature(PAYLOAD, signature, SECRET) is False

    def test_rejects_other_secret(self):
        signature = compute_hmac_signature(PAYLOAD, "other")

        assert verify_hmac_signature(PAYLOAD, signature, SECRET) is False

    def test_rejects_modified_body(self):
        signature = compute_hmac_signature(PAYLOAD, SECRET)

        assert verify_hmac_signature(PAYLOAD + b" ", signature, SECRET) is False

    @pytest.mark.parametrize("signature", ["sha256=caf\u00e9", "\u00e9" * 64])
    def test_rejects_non_ascii(self, signature):
        """Should return False rather than raise for non-ASCII header text."""
        assert verify_hmac_signature(PAYLOAD, signature, SECRET) is False


class TestGetBearerToken:
    """Tests for get_bearer_token."""

    def test_extracts_token(self):
        request = RequestFactory().get("/", HTTP_AUTHORIZATION="Bearer abc123 ")

        assert get_bearer_token(request) == "abc123"

    @pytest.mark.parametrize("header", [None, "", "Token abc", "bearer abc"])
    def test_other_schemes_ignored(self, header):
        extra = {"HTTP_AUTHORIZATION": header} if header is not None else {}
        request = RequestFactory().get("/", **extra)

        assert get_bearer_token(request) == ""
