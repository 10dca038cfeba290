"""
Health check API routes.

Kubernetes-compatible liveness and readiness probes.
"""

from fastapi import APIRouter, Depends, Response, status

from gardien.di import Container
from gardien.infrastructure.monitoring import GardienHealthChecker
from gardien.presentation.api.dependencies import get_container
from gardien.presentation.schemas import HealthResponse

router = APIRouter(tags=["health"])


def get_health_checker(
    container: Container = Depends(get_container),
) -> GardienHealthChecker:
    """Dependency for health checker."""
    return container.health_checker


@router.get("/health/live", response_model=HealthResponse)
def liveness_probe(
    response: Response,
    health_checker: GardienHealthChecker = Depends(get_health_checker),
):
    """
    Liveness probe endpoint.

    Returns 200 if service is alive, 503 if dead.
    """
    report = health_checker.check_liveness()

    if not report.is_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return report.to_dict()


@router.get("/health/ready", response_model=HealthResponse)
def readiness_probe(
    response: Response,
    health_checker: GardienHealthChecker = Depends(get_health_checker),
):
    """
    Readiness probe endpoint.

    Returns 200 if ready (healthy or degraded), 503 if not ready.

    Checks:
    - Challenge registry initialized and expiry sweep running
    - JSON-RPC circuit breaker state
    """
    report = health_checker.check_readiness()

    if not report.is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return report.to_dict()


@router.get("/health", response_model=HealthResponse)
def health_check_endpoint(
    response: Response,
    health_checker: GardienHealthChecker = Depends(get_health_checker),
):
    """General health check endpoint (alias for readiness)."""
    return readiness_probe(response, health_checker)
