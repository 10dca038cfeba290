"""
Base exception for Gardien domain errors.
"""


class GardienException(Exception):
    """
    Base exception for all Gardien domain errors.

    Every exception carries a machine-readable code used by the API
    error handler to pick the HTTP status, and a human-readable message
    returned to the caller.

    Attributes:
        message: Caller-facing error message
        code: Error category code
    """

    code: str = "GARDIEN_ERROR"

    def __init__(self, message: str, code: str = None):
        """
        Initialize Gardien exception.

        Args:
            message: Caller-facing error message
            code: Optional error code override
        """
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
