"""
API request and response schemas.
"""

from gardien.presentation.schemas.auth_schemas import (
    ChallengeResponse,
    ErrorResponse,
    VerifyRequest,
    VerifyResponse,
)
from gardien.presentation.schemas.health_schemas import (
    ComponentHealth,
    HealthResponse,
)

__all__ = [
    "ChallengeResponse",
    "ComponentHealth",
    "ErrorResponse",
    "HealthResponse",
    "VerifyRequest",
    "VerifyResponse",
]
