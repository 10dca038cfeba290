"""
Internal failure exceptions.

These are not attributable to the caller. They are logged with full
context and reported to the caller as an opaque message.
"""

from gardien.domain.exceptions.base import GardienException


class InternalFailure(GardienException):
    """Base exception for server-side failures."""

    code = "INTERNAL_FAILURE"
    # Only text the caller ever sees
    public_message = "Internal server error"

    def __init__(self, message: str = "Internal server error", cause: Exception = None):
        """
        Initialize InternalFailure.

        Args:
            message: Server-side description (never sent to the caller)
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.cause = cause


class RandomnessSourceError(InternalFailure):
    """Raised when the secure randomness source cannot produce a challenge."""

    public_message = "Failed to generate nonce"


class SignatureBackendError(InternalFailure):
    """Raised when signature verification fails for a non-cryptographic reason."""


class ChainUnavailableError(InternalFailure):
    """Raised when the JSON-RPC node cannot be reached or keeps failing."""

    def __init__(self, message: str, rpc_method: str = None, cause: Exception = None):
        """
        Initialize ChainUnavailableError.

        Args:
            message: Error message
            rpc_method: JSON-RPC method that failed
            cause: Optional underlying exception
        """
        super().__init__(message, cause=cause)
        self.rpc_method = rpc_method
