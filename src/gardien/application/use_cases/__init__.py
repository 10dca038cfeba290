"""
Application use cases for Gardien.
"""

from gardien.application.use_cases.issue_challenge import IssueChallengeUseCase
from gardien.application.use_cases.verify_signed_message import (
    VerifySignedMessageUseCase,
)

__all__ = [
    "IssueChallengeUseCase",
    "VerifySignedMessageUseCase",
]
