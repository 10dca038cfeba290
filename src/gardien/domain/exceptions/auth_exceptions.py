"""
Authentication exceptions.

Client-attributable rejections are raised locally and turned into
structured error responses. None of them is retried inside Gardien;
the caller must request a fresh challenge and resubmit.
"""

from gardien.domain.exceptions.base import GardienException


class RequestMalformed(GardienException):
    """Raised when required fields are missing or have an invalid shape."""

    code = "REQUEST_MALFORMED"

    def __init__(
        self,
        message: str = "Missing required fields: address, message, signature",
        field: str = None,
    ):
        """
        Initialize RequestMalformed.

        Args:
            message: Error message
            field: Optional name of the offending field
        """
        super().__init__(message)
        self.field = field


class ChallengeFormatInvalid(GardienException):
    """Raised when no challenge can be extracted from the signed message."""

    code = "CHALLENGE_FORMAT_INVALID"

    def __init__(self, message: str = "Invalid message format - nonce not found"):
        super().__init__(message)


class ChallengeInvalidOrReused(GardienException):
    """
    Raised when the extracted challenge is not outstanding.

    The challenge was never issued, was already consumed, or was
    invalidated by an expiry sweep.
    """

    code = "CHALLENGE_INVALID_OR_REUSED"

    def __init__(self, message: str = "Invalid or reused nonce"):
        super().__init__(message)


class SignatureInvalid(GardienException):
    """Raised when the signature was not produced by the claimed address."""

    code = "SIGNATURE_INVALID"

    def __init__(self, message: str = "Invalid signature", address: str = None):
        """
        Initialize SignatureInvalid.

        Args:
            message: Error message
            address: Claimed address that failed verification
        """
        super().__init__(message)
        self.address = address
