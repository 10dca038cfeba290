"""
Challenge extraction from signed message text.
"""

from gardien.application.challenge_extraction.extraction_chain import (
    ChallengeExtractionChain,
    default_matchers,
)
from gardien.application.challenge_extraction.matchers import (
    BareTokenMatcher,
    CaseInsensitiveNonceMatcher,
    ChallengeMatcher,
    LabeledNonceMatcher,
    TrailingAtMatcher,
)

__all__ = [
    "BareTokenMatcher",
    "CaseInsensitiveNonceMatcher",
    "ChallengeExtractionChain",
    "ChallengeMatcher",
    "LabeledNonceMatcher",
    "TrailingAtMatcher",
    "default_matchers",
]
