"""
Domain exceptions for Gardien.
"""

from gardien.domain.exceptions.auth_exceptions import (
    ChallengeFormatInvalid,
    ChallengeInvalidOrReused,
    RequestMalformed,
    SignatureInvalid,
)
from gardien.domain.exceptions.base import GardienException
from gardien.domain.exceptions.internal import (
    ChainUnavailableError,
    InternalFailure,
    RandomnessSourceError,
    SignatureBackendError,
)

__all__ = [
    "GardienException",
    "RequestMalformed",
    "ChallengeFormatInvalid",
    "ChallengeInvalidOrReused",
    "SignatureInvalid",
    "InternalFailure",
    "RandomnessSourceError",
    "SignatureBackendError",
    "ChainUnavailableError",
]
