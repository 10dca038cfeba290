"""
Unit tests for domain exceptions.
"""

import pytest

from gardien.domain.exceptions import (
    ChainUnavailableError,
    ChallengeFormatInvalid,
    ChallengeInvalidOrReused,
    GardienException,
    InternalFailure,
    RandomnessSourceError,
    RequestMalformed,
    SignatureBackendError,
    SignatureInvalid,
)


class TestExceptions:
    """Unit tests for exception codes and messages."""

    @pytest.mark.parametrize(
        "exc,code,message",
        [
            (
                RequestMalformed(),
                "REQUEST_MALFORMED",
                "Missing required fields: address, message, signature",
            ),
            (
                ChallengeFormatInvalid(),
                "CHALLENGE_FORMAT_INVALID",
                "Invalid message format - nonce not found",
            ),
            (
                ChallengeInvalidOrReused(),
                "CHALLENGE_INVALID_OR_REUSED",
                "Invalid or reused nonce",
            ),
            (SignatureInvalid(), "SIGNATURE_INVALID", "Invalid signature"),
            (InternalFailure(), "INTERNAL_FAILURE", "Internal server error"),
        ],
    )
    def test_default_codes_and_messages(self, exc, code, message):
        """Test every category carries its code and default reason."""
        assert isinstance(exc, GardienException)
        assert exc.code == code
        assert exc.message == message
        assert str(exc) == message

    @pytest.mark.parametrize(
        "exc",
        [
            RandomnessSourceError("urandom failed"),
            SignatureBackendError("decoder crashed"),
            ChainUnavailableError("RPC down", rpc_method="eth_call"),
        ],
    )
    def test_internal_failures(self, exc):
        """Test internal failures share the internal code."""
        assert isinstance(exc, InternalFailure)
        assert exc.code == "INTERNAL_FAILURE"

    def test_public_messages(self):
        """Test caller-facing text never carries server-side detail."""
        assert ChainUnavailableError("RPC down").public_message == (
            "Internal server error"
        )
        assert RandomnessSourceError("urandom failed").public_message == (
            "Failed to generate nonce"
        )

    def test_code_override(self):
        """Test explicit code overrides the class default."""
        assert GardienException("x", code="CUSTOM").code == "CUSTOM"
