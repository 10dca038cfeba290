"""
Monitoring infrastructure for Gardien.

Provides:
- SystemReporter logging with request ID tagging
- Prometheus metrics
- Health checks (liveness/readiness)
"""

from gardien.infrastructure.monitoring.health_checker import (
    GardienHealthChecker,
    HealthReport,
)
from gardien.infrastructure.monitoring.system_reporter import (
    SystemReporter,
    get_request_id,
    set_request_id,
)

__all__ = [
    "GardienHealthChecker",
    "HealthReport",
    "SystemReporter",
    "get_request_id",
    "set_request_id",
]
