"""
Authentication API schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

# ================================================================
# Challenge Schemas
# ================================================================


class ChallengeResponse(BaseModel):
    """Freshly issued challenge."""

    nonce: str = Field(..., description="Single-use challenge token (hex)")


# ================================================================
# Verify Schemas
# ================================================================


class VerifyRequest(BaseModel):
    """
    Signed assertion submitted by the wallet layer.

    Fields are optional here so that missing values are reported with
    the service's own error envelope instead of a schema error.
    """

    address: Optional[str] = Field(None, description="Claimed account address")
    message: Optional[str] = Field(None, description="Exact signed message text")
    signature: Optional[str] = Field(None, description="Signature (0x-prefixed hex)")


class VerifyResponse(BaseModel):
    """Successful verification."""

    success: bool = Field(default=True)
    address: str = Field(..., description="Authenticated address")
    message: str = Field(default="Authentication successful")
    timestamp: str = Field(..., description="ISO-8601 verification time")


# ================================================================
# Error Schemas
# ================================================================


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing request."""

    error: str = Field(..., description="Human-readable reason")
    code: str = Field(..., description="Error category")
