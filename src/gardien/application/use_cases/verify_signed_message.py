"""
Use case for verifying a signed sign-in message.
"""

import time
from typing import Optional

from gardien.application.challenge_extraction import ChallengeExtractionChain
from gardien.domain.auth import SignedAssertion, VerificationResult
from gardien.domain.exceptions import (
    ChallengeInvalidOrReused,
    GardienException,
    InternalFailure,
    RequestMalformed,
    SignatureBackendError,
    SignatureInvalid,
)
from gardien.domain.services import ISignatureVerifier
from gardien.infrastructure.blockchain.signature_formats import (
    is_evm_address,
    parse_hex,
)
from gardien.infrastructure.monitoring import metrics
from gardien.infrastructure.monitoring.system_reporter import SystemReporter
from gardien.infrastructure.nonces import NonceAuthority


class VerifySignedMessageUseCase:
    """
    Use case for authenticating an address from a signed message.

    Order is fixed: extract the challenge, consume it, then check the
    signature. A consumed challenge stays spent whatever the signature
    check says, so a rejected attempt cannot be retried with the same
    challenge.
    """

    def __init__(
        self,
        nonce_authority: NonceAuthority,
        signature_verifier: ISignatureVerifier,
        extractor: Optional[ChallengeExtractionChain] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize use case.

        Args:
            nonce_authority: Registry of outstanding challenges
            signature_verifier: Signature verification service
            extractor: Challenge extraction chain
            reporter: Optional SystemReporter for logging
        """
        self.nonce_authority = nonce_authority
        self.signature_verifier = signature_verifier
        self.extractor = extractor or ChallengeExtractionChain()
        self.reporter = reporter

    async def execute(
        self,
        address: Optional[str],
        message: Optional[str],
        signature: Optional[str],
    ) -> VerificationResult:
        """
        Verify a signed assertion.

        Args:
            address: Claimed account address
            message: Signed message text containing the challenge
            signature: Signature over message (0x-prefixed hex)

        Returns:
            VerificationResult for the authenticated address

        Raises:
            RequestMalformed: If a field is missing or malformed
            ChallengeFormatInvalid: If no challenge is found in message
            ChallengeInvalidOrReused: If the challenge is not outstanding
            SignatureInvalid: If the signature does not match address
            InternalFailure: If verification could not be completed
        """
        started = time.perf_counter()
        outcome = "error"
        try:
            result = await self._verify(address, message, signature)
            outcome = "authenticated"
            return result
        except GardienException as e:
            outcome = e.code.lower()
            raise
        finally:
            metrics.verifications_total.labels(outcome=outcome).inc()
            metrics.verification_duration_seconds.observe(
                time.perf_counter() - started
            )

    async def _verify(
        self,
        address: Optional[str],
        message: Optional[str],
        signature: Optional[str],
    ) -> VerificationResult:
        self._validate_fields(address, message, signature)
        assertion = SignedAssertion(
            address=address, message=message, signature=signature
        )

        nonce = self.extractor.extract_or_raise(assertion.message)

        if not self.nonce_authority.consume(nonce):
            self._warn(f"Rejected unknown or reused challenge for {address}")
            raise ChallengeInvalidOrReused()

        try:
            valid = await self.signature_verifier.verify_message(assertion)
        except InternalFailure:
            raise
        except Exception as e:
            raise SignatureBackendError(
                f"Signature verification failed: {type(e).__name__}: {e}", cause=e
            ) from e

        if not valid:
            self._warn(f"Invalid signature for {address}")
            raise SignatureInvalid(address=address)

        if self.reporter:
            self.reporter.info(
                f"Authenticated {address}",
                context="VerifySignedMessage",
                verbose_level=2,
            )
        return VerificationResult(address=address)

    @staticmethod
    def _validate_fields(
        address: Optional[str], message: Optional[str], signature: Optional[str]
    ) -> None:
        """
        Check presence and shape of the submitted fields.

        Raises:
            RequestMalformed: On the first problem found
        """
        if not address or not message or not signature:
            raise RequestMalformed()

        if not is_evm_address(address):
            raise RequestMalformed("Invalid address format", field="address")

        try:
            signature_bytes = parse_hex(signature)
        except ValueError:
            raise RequestMalformed("Invalid signature format", field="signature")
        if not signature_bytes:
            raise RequestMalformed("Invalid signature format", field="signature")

    def _warn(self, msg: str) -> None:
        if self.reporter:
            self.reporter.warning(msg, context="VerifySignedMessage")
