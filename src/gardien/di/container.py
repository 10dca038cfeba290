"""
Dependency Injection container for Gardien.

Manages lifecycle and dependencies of all application components.
"""

import logging
from typing import Optional

from gardien.application.challenge_extraction import ChallengeExtractionChain
from gardien.application.use_cases import (
    IssueChallengeUseCase,
    VerifySignedMessageUseCase,
)
from gardien.config.settings import Settings
from gardien.domain.services import IChainReader, ISignatureVerifier
from gardien.infrastructure.blockchain import (
    CircuitBreaker,
    EvmSignatureVerifier,
    Web3ChainReader,
)
from gardien.infrastructure.blockchain.web3_chain_reader import TRANSPORT_ERRORS
from gardien.infrastructure.monitoring import GardienHealthChecker, SystemReporter
from gardien.infrastructure.nonces import NonceAuthority

VERBOSITY_BY_LEVEL = {
    "debug": 3,
    "info": 1,
    "warning": 1,
    "error": 0,
    "critical": 0,
}

_UNSET = object()


class Container:
    """
    Dependency Injection container.

    Creates and manages all application dependencies.
    Implements singleton pattern for shared resources.
    """

    def __init__(
        self,
        settings: Settings,
        chain_reader=_UNSET,
        nonce_authority: Optional[NonceAuthority] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            chain_reader: Chain reader to use instead of the web3 one.
                Pass None explicitly to disable on-chain verification.
            nonce_authority: Prebuilt challenge registry (tests)
            reporter: Prebuilt reporter (tests)
        """
        self.settings = settings

        self._reporter: Optional[SystemReporter] = reporter
        self._nonce_authority: Optional[NonceAuthority] = nonce_authority
        self._circuit_breaker: Optional[CircuitBreaker] = None
        self._chain_reader_injected = chain_reader is not _UNSET
        self._chain_reader: Optional[IChainReader] = (
            None if chain_reader is _UNSET else chain_reader
        )
        self._signature_verifier: Optional[ISignatureVerifier] = None
        self._extractor: Optional[ChallengeExtractionChain] = None
        self._health_checker: Optional[GardienHealthChecker] = None

    @property
    def reporter(self) -> SystemReporter:
        """
        Get SystemReporter singleton configured from log settings.

        Returns:
            SystemReporter instance
        """
        if self._reporter is None:
            level_name = self.settings.log_level
            self._reporter = SystemReporter(
                name="gardien",
                log_dir=self.settings.log_dir,
                level=getattr(logging, level_name.upper()),
                verbose=VERBOSITY_BY_LEVEL[level_name],
            )
        return self._reporter

    @property
    def nonce_authority(self) -> NonceAuthority:
        """
        Get NonceAuthority singleton.

        Returns:
            NonceAuthority instance
        """
        if self._nonce_authority is None:
            interval = (
                self.settings.nonce_sweep_interval_seconds
                if self.settings.nonce_sweep_enabled
                else None
            )
            self._nonce_authority = NonceAuthority(
                sweep_interval_seconds=interval,
                token_bytes=self.settings.nonce_bytes,
                reporter=self.reporter,
            )
        return self._nonce_authority

    @property
    def circuit_breaker(self) -> Optional[CircuitBreaker]:
        """
        Get RPC circuit breaker singleton.

        Returns:
            CircuitBreaker if the web3 chain reader is in use, None otherwise
        """
        if self._chain_reader_injected or not self.settings.rpc_url:
            return None

        if self._circuit_breaker is None:
            self._circuit_breaker = CircuitBreaker(
                name="rpc",
                failure_threshold=self.settings.cb_failure_threshold,
                recovery_timeout=self.settings.cb_recovery_timeout,
                expected_exceptions=TRANSPORT_ERRORS,
            )
        return self._circuit_breaker

    @property
    def chain_reader(self) -> Optional[IChainReader]:
        """
        Get chain reader singleton.

        Returns:
            IChainReader instance, None when on-chain checks are disabled
        """
        if self._chain_reader_injected:
            return self._chain_reader

        if not self.settings.rpc_url:
            return None

        if self._chain_reader is None:
            self._chain_reader = Web3ChainReader(
                rpc_url=self.settings.rpc_url,
                timeout_seconds=self.settings.rpc_timeout_seconds,
                circuit_breaker=self.circuit_breaker,
                reporter=self.reporter,
            )
        return self._chain_reader

    @property
    def signature_verifier(self) -> ISignatureVerifier:
        """
        Get signature verifier singleton.

        Returns:
            ISignatureVerifier instance
        """
        if self._signature_verifier is None:
            self._signature_verifier = EvmSignatureVerifier(
                chain_reader=self.chain_reader,
                reporter=self.reporter,
            )
        return self._signature_verifier

    @property
    def extractor(self) -> ChallengeExtractionChain:
        """Get challenge extraction chain singleton."""
        if self._extractor is None:
            self._extractor = ChallengeExtractionChain()
        return self._extractor

    @property
    def health_checker(self) -> GardienHealthChecker:
        """
        Get health checker singleton.

        Returns:
            GardienHealthChecker instance
        """
        if self._health_checker is None:
            self._health_checker = GardienHealthChecker(
                version=self.settings.APP_VERSION,
                nonce_authority=self.nonce_authority,
                sweep_expected=self.settings.nonce_sweep_enabled,
                circuit_breaker=self.circuit_breaker,
            )
        return self._health_checker

    def get_issue_challenge_use_case(self) -> IssueChallengeUseCase:
        """
        Get IssueChallengeUseCase.

        Returns:
            Use case instance
        """
        return IssueChallengeUseCase(self.nonce_authority, reporter=self.reporter)

    def get_verify_signed_message_use_case(self) -> VerifySignedMessageUseCase:
        """
        Get VerifySignedMessageUseCase.

        Returns:
            Use case instance
        """
        return VerifySignedMessageUseCase(
            nonce_authority=self.nonce_authority,
            signature_verifier=self.signature_verifier,
            extractor=self.extractor,
            reporter=self.reporter,
        )

    async def start(self) -> None:
        """Start background tasks (challenge expiry sweep)."""
        await self.nonce_authority.start()

    async def shutdown(self) -> None:
        """Stop background tasks and release network resources."""
        await self.nonce_authority.shutdown()

        if self._chain_reader is not None:
            await self._chain_reader.close()
