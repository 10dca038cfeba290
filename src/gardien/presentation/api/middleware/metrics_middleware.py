"""
Prometheus metrics middleware for FastAPI.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from gardien.infrastructure.monitoring import metrics

UNMATCHED_ENDPOINT = "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count HTTP requests by method, endpoint and status."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request and record its outcome.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response from handler
        """
        method = request.method

        try:
            response = await call_next(request)
        except Exception:
            metrics.http_requests_total.labels(
                method=method, endpoint=_endpoint(request), status=500
            ).inc()
            raise

        metrics.http_requests_total.labels(
            method=method,
            endpoint=_endpoint(request),
            status=response.status_code,
        ).inc()
        return response


def _endpoint(request: Request) -> str:
    """Route template the router matched, so label values stay bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)
