"""
Authentication domain models for Gardien.

Defines the signed assertion submitted by a wallet and the result of
verifying it.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso_timestamp(moment: datetime) -> str:
    """
    Render a datetime the way browsers render Date.toISOString().

    Example: 2026-10-19T08:15:30.123Z

    Args:
        moment: Aware or naive (assumed UTC) datetime

    Returns:
        ISO-8601 string with millisecond precision and Z suffix
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class SignedAssertion(BaseModel):
    """
    Signed assertion submitted for verification.

    Exists only for the duration of one verification call.

    Attributes:
        address: Claimed account address (0x-prefixed hex)
        message: Exact signed message text
        signature: Signature bytes (0x-prefixed hex)
    """

    address: str = Field(..., description="Claimed account address")
    message: str = Field(..., description="Signed message text")
    signature: str = Field(..., description="Signature (0x-prefixed hex)")


class VerificationResult(BaseModel):
    """
    Outcome of a successful verification.

    No session is minted here; the caller decides what to do with it.

    Attributes:
        address: Authenticated address, as submitted
        success: Always True for a returned result
        timestamp: Moment the assertion was accepted (UTC)
    """

    address: str = Field(..., description="Authenticated address")
    success: bool = Field(default=True, description="Verification outcome")
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="Verification timestamp (UTC)",
    )

    @property
    def iso_timestamp(self) -> str:
        """Timestamp rendered as ISO-8601 with a Z suffix."""
        return to_iso_timestamp(self.timestamp)


class ChallengeIssued(BaseModel):
    """Freshly issued challenge handed to the wallet layer."""

    nonce: str = Field(..., description="Single-use challenge token")
