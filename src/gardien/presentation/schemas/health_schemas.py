"""
Schemas for health endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ComponentHealth(BaseModel):
    """Health status for individual component."""

    status: str = Field(..., description="Component status (healthy, degraded, unhealthy)")
    message: Optional[str] = Field(None, description="Status message")
    duration: Optional[float] = Field(None, description="Check duration in seconds")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Additional details")


class HealthResponse(BaseModel):
    """Health report returned by liveness and readiness probes."""

    status: str = Field(..., description="Overall service status")
    timestamp: str = Field(..., description="Report timestamp (ISO-8601)")
    version: str = Field(..., description="Service version")
    checks: Dict[str, ComponentHealth] = Field(
        ..., description="Health status per component"
    )
