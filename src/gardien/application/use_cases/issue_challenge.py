"""
Use case for issuing a sign-in challenge.
"""

from typing import Optional

from gardien.domain.auth import ChallengeIssued
from gardien.infrastructure.monitoring.system_reporter import SystemReporter
from gardien.infrastructure.nonces import NonceAuthority


class IssueChallengeUseCase:
    """Issue a fresh single-use challenge for a wallet to sign."""

    def __init__(
        self,
        nonce_authority: NonceAuthority,
        reporter: Optional[SystemReporter] = None,
    ):
        self.nonce_authority = nonce_authority
        self.reporter = reporter

    def execute(self) -> ChallengeIssued:
        """
        Issue a challenge.

        Returns:
            ChallengeIssued carrying the token

        Raises:
            RandomnessSourceError: If no token could be generated
        """
        nonce = self.nonce_authority.issue()
        if self.reporter:
            self.reporter.debug("Challenge issued", context="IssueChallenge")
        return ChallengeIssued(nonce=nonce)
