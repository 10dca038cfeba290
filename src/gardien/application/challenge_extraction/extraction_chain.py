"""
Ordered challenge extraction.
"""

from typing import List, Optional, Sequence

from gardien.application.challenge_extraction.matchers import (
    BareTokenMatcher,
    CaseInsensitiveNonceMatcher,
    ChallengeMatcher,
    LabeledNonceMatcher,
    TrailingAtMatcher,
)
from gardien.domain.exceptions import ChallengeFormatInvalid


def default_matchers() -> List[ChallengeMatcher]:
    """Matchers in precedence order; the first hit wins."""
    return [
        LabeledNonceMatcher(),
        CaseInsensitiveNonceMatcher(),
        TrailingAtMatcher(),
        BareTokenMatcher(),
    ]


class ChallengeExtractionChain:
    """
    Tries each matcher in order until one finds a token.

    Attributes:
        strategies: Matchers in precedence order
    """

    def __init__(self, strategies: Optional[Sequence[ChallengeMatcher]] = None):
        """
        Initialize chain.

        Args:
            strategies: Matchers to try (defaults to the standard four)
        """
        self.strategies: List[ChallengeMatcher] = (
            list(strategies) if strategies is not None else default_matchers()
        )

    def extract(self, message: str) -> Optional[str]:
        """
        Extract the challenge token from message text.

        Args:
            message: Signed message text

        Returns:
            Token from the first matching strategy, None if none match
        """
        for strategy in self.strategies:
            token = strategy.extract(message)
            if token is not None:
                return token
        return None

    def extract_or_raise(self, message: str) -> str:
        """
        Extract the challenge token or fail.

        Raises:
            ChallengeFormatInvalid: If no strategy matches
        """
        token = self.extract(message)
        if token is None:
            raise ChallengeFormatInvalid()
        return token
