"""
Challenge token matchers.

Each matcher looks for the challenge token in a signed message using one
textual convention. Wallet UIs format the sign-in text differently, so
several conventions are accepted.
"""

import re
from typing import Optional, Pattern

# Token length produced by a 16-byte hex challenge
CHALLENGE_TOKEN_LENGTH = 32


class ChallengeMatcher:
    """
    One convention for locating a challenge token in message text.

    Subclasses set pattern; by default the token is its first group.
    """

    name: str = "matcher"
    pattern: Pattern[str]

    def extract(self, message: str) -> Optional[str]:
        """
        Find the challenge token.

        Args:
            message: Signed message text

        Returns:
            Token if this convention matches, None otherwise
        """
        match = self.pattern.search(message)
        if match is None:
            return None
        return self._token(match)

    def _token(self, match: "re.Match[str]") -> str:
        """Pull the token out of a successful match."""
        return match.group(1)


class LabeledNonceMatcher(ChallengeMatcher):
    """`Nonce: <token>` with the label capitalised exactly."""

    name = "labeled"
    pattern = re.compile(r"Nonce: (\w+)", re.ASCII)


class CaseInsensitiveNonceMatcher(ChallengeMatcher):
    """`nonce: <token>` with the label in any case."""

    name = "labeled_any_case"
    pattern = re.compile(r"nonce: (\w+)", re.ASCII | re.IGNORECASE)


class TrailingAtMatcher(ChallengeMatcher):
    """`... at <token>` closing the message."""

    name = "trailing_at"
    # \Z: end of the whole message, never before a trailing newline
    pattern = re.compile(r"at (\w{%d})\Z" % CHALLENGE_TOKEN_LENGTH, re.ASCII)


class BareTokenMatcher(ChallengeMatcher):
    """Any run of token-length word characters anywhere in the message."""

    name = "bare_token"
    pattern = re.compile(r"\w{%d}" % CHALLENGE_TOKEN_LENGTH, re.ASCII)

    def _token(self, match: "re.Match[str]") -> str:
        return match.group(0)
