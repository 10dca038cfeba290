"""
Gardien health checks.

Liveness answers "is the process alive"; readiness answers "can it
issue and verify challenges right now".
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from gardien.infrastructure.blockchain.circuit_breaker import CircuitBreaker
    from gardien.infrastructure.nonces.nonce_authority import NonceAuthority


class HealthStatus(str, Enum):
    """Health status levels."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheck:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: Optional[str] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """
    Overall health report.

    Aggregates multiple health checks into overall status.
    """

    status: HealthStatus
    checks: Dict[str, HealthCheck]
    version: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON response.

        Returns:
            Dictionary representation
        """
        return {
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "checks": {
                name: {
                    "status": check.status.value,
                    "message": check.message,
                    "duration": check.duration,
                    **({"metadata": check.metadata} if check.metadata else {}),
                }
                for name, check in self.checks.items()
            },
        }

    @property
    def is_healthy(self) -> bool:
        """Check if overall status is healthy."""
        return self.status == HealthStatus.HEALTHY

    @property
    def is_ready(self) -> bool:
        """Check if service is ready (healthy or degraded)."""
        return self.status in (HealthStatus.HEALTHY, HealthStatus.DEGRADED)


class GardienHealthChecker:
    """
    Health checker for Gardien.

    Checks:
    - Service liveness (basic check)
    - Challenge registry and its expiry sweep
    - JSON-RPC circuit breaker (contract-wallet verification)
    """

    def __init__(
        self,
        version: str,
        nonce_authority: Optional["NonceAuthority"] = None,
        sweep_expected: bool = True,
        circuit_breaker: Optional["CircuitBreaker"] = None,
    ):
        """
        Initialize health checker.

        Args:
            version: Service version reported in every report
            nonce_authority: Challenge registry to inspect
            sweep_expected: Whether the expiry sweep should be running
            circuit_breaker: JSON-RPC breaker, None when no RPC is configured
        """
        self.version = version
        self.nonce_authority = nonce_authority
        self.sweep_expected = sweep_expected
        self.circuit_breaker = circuit_breaker

    def check_liveness(self) -> HealthReport:
        """
        Liveness probe - is the service alive?

        Returns:
            HealthReport with liveness status
        """
        checks = {
            "service": HealthCheck(
                name="gardien",
                status=HealthStatus.HEALTHY,
                message="Service is alive",
            )
        }
        return self._report(HealthStatus.HEALTHY, checks)

    def check_readiness(self) -> HealthReport:
        """
        Readiness probe - can the service handle requests?

        Returns:
            HealthReport with readiness status
        """
        registry_check = self._check_challenge_registry()
        chain_check = self._check_chain()
        checks = {
            "challenge_registry": registry_check,
            "chain": chain_check,
        }

        if registry_check.status == HealthStatus.UNHEALTHY:
            overall = HealthStatus.UNHEALTHY
        elif HealthStatus.DEGRADED in (registry_check.status, chain_check.status):
            overall = HealthStatus.DEGRADED
        else:
            overall = HealthStatus.HEALTHY

        return self._report(overall, checks)

    def _check_challenge_registry(self) -> HealthCheck:
        """Check the registry is initialized and its sweep is alive."""
        start = time.time()

        if self.nonce_authority is None:
            return HealthCheck(
                name="challenge_registry",
                status=HealthStatus.UNHEALTHY,
                message="Challenge registry not initialized",
            )

        outstanding = self.nonce_authority.size()
        sweeping = self.nonce_authority.is_sweeping
        metadata = {
            "outstanding": outstanding,
            "sweeping": sweeping,
            "sweep_interval_seconds": self.nonce_authority.sweep_interval_seconds,
        }

        if self.sweep_expected and not sweeping:
            return HealthCheck(
                name="challenge_registry",
                status=HealthStatus.DEGRADED,
                message="Expiry sweep is not running",
                duration=time.time() - start,
                metadata=metadata,
            )

        return HealthCheck(
            name="challenge_registry",
            status=HealthStatus.HEALTHY,
            message=f"Operational ({outstanding} outstanding)",
            duration=time.time() - start,
            metadata=metadata,
        )

    def _check_chain(self) -> HealthCheck:
        """Check JSON-RPC availability as seen by the circuit breaker."""
        if self.circuit_breaker is None:
            return HealthCheck(
                name="chain",
                status=HealthStatus.HEALTHY,
                message="No RPC configured, key-pair accounts only",
            )

        state = self.circuit_breaker.state.value
        metadata = {
            "circuit_state": state,
            "failure_count": self.circuit_breaker.failure_count,
        }

        if state == "closed":
            return HealthCheck(
                name="chain",
                status=HealthStatus.HEALTHY,
                message="RPC reachable",
                metadata=metadata,
            )

        return HealthCheck(
            name="chain",
            status=HealthStatus.DEGRADED,
            message=f"RPC circuit {state}, contract-wallet verification impaired",
            metadata=metadata,
        )

    def _report(
        self, status: HealthStatus, checks: Dict[str, HealthCheck]
    ) -> HealthReport:
        return HealthReport(
            status=status,
            checks=checks,
            version=self.version,
            timestamp=datetime.now(timezone.utc),
        )
