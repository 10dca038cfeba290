"""
Nonce Authority - issuance and single-use consumption of challenges.

Owns the registry of outstanding challenge tokens. Every mutation
(issue, consume, sweep) happens under one lock, so concurrent consume
calls for the same token observe success at most once.

Expiry is coarse: each sweep tick clears every outstanding token. A
token's effective lifetime therefore ranges from just under one sweep
interval down to near zero depending on when it was issued.
"""

import asyncio
import secrets
import threading
from typing import Callable, Optional, Set

from gardien.domain.exceptions import RandomnessSourceError
from gardien.infrastructure.monitoring import metrics
from gardien.infrastructure.monitoring.system_reporter import SystemReporter

DEFAULT_SWEEP_INTERVAL_SECONDS = 10 * 60
DEFAULT_TOKEN_BYTES = 16
MIN_TOKEN_BYTES = 16


class NonceAuthority:
    """
    Registry of outstanding single-use challenges.

    Lifecycle:
        authority = NonceAuthority()
        await authority.start()     # schedules the background sweep
        token = authority.issue()
        authority.consume(token)    # True once, False afterwards
        await authority.shutdown()  # cancels sweep, clears registry

    Attributes:
        sweep_interval_seconds: Seconds between sweeps (None disables)
        token_bytes: Random bytes per token (hex doubles the length)
    """

    def __init__(
        self,
        sweep_interval_seconds: Optional[float] = DEFAULT_SWEEP_INTERVAL_SECONDS,
        token_bytes: int = DEFAULT_TOKEN_BYTES,
        token_factory: Optional[Callable[[int], str]] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize Nonce Authority.

        Args:
            sweep_interval_seconds: Seconds between registry sweeps.
                None or 0 disables the background sweep.
            token_bytes: Random bytes per token (at least 16)
            token_factory: Source of tokens, called with token_bytes.
                Defaults to secrets.token_hex.
            reporter: Optional SystemReporter for logging

        Raises:
            ValueError: If token_bytes is below 16 (128 bits)
        """
        if token_bytes < MIN_TOKEN_BYTES:
            raise ValueError(
                f"token_bytes must be at least {MIN_TOKEN_BYTES}, got {token_bytes}"
            )

        self.sweep_interval_seconds = sweep_interval_seconds
        self.token_bytes = token_bytes
        self.reporter = reporter

        self._token_factory = token_factory or secrets.token_hex
        self._nonces: Set[str] = set()
        self._lock = threading.Lock()
        self._sweep_task: Optional[asyncio.Task] = None

    # ================================================================
    # Registry operations
    # ================================================================

    def issue(self) -> str:
        """
        Generate a new challenge and register it.

        Returns:
            Challenge token (lowercase hex)

        Raises:
            RandomnessSourceError: If the randomness source fails
        """
        try:
            token = self._token_factory(self.token_bytes)
        except (OSError, NotImplementedError) as e:
            raise RandomnessSourceError(
                f"Secure randomness source failed: {e}", cause=e
            ) from e

        with self._lock:
            self._nonces.add(token)
            outstanding = len(self._nonces)

        metrics.challenges_issued_total.inc()
        metrics.outstanding_challenges.set(outstanding)
        self._debug(f"Issued challenge ({outstanding} outstanding)")
        return token

    def consume(self, token: str) -> bool:
        """
        Atomically remove token if present.

        Args:
            token: Challenge token to consume

        Returns:
            True if the token was outstanding and is now spent,
            False if it was never issued, already consumed or swept
        """
        with self._lock:
            if token in self._nonces:
                self._nonces.remove(token)
                consumed = True
            else:
                consumed = False
            outstanding = len(self._nonces)

        metrics.challenges_consumed_total.labels(
            outcome="consumed" if consumed else "rejected"
        ).inc()
        metrics.outstanding_challenges.set(outstanding)
        return consumed

    def has(self, token: str) -> bool:
        """Check whether token is outstanding without consuming it."""
        with self._lock:
            return token in self._nonces

    def clear(self) -> None:
        """Drop every outstanding token."""
        with self._lock:
            self._nonces.clear()
        metrics.outstanding_challenges.set(0)

    def size(self) -> int:
        """Number of outstanding tokens."""
        with self._lock:
            return len(self._nonces)

    def sweep(self) -> int:
        """
        Run one expiry sweep.

        Clears the whole registry, including tokens issued moments ago.

        Returns:
            Number of tokens invalidated
        """
        with self._lock:
            swept = len(self._nonces)
            self._nonces.clear()

        metrics.challenges_swept_total.inc(swept)
        metrics.outstanding_challenges.set(0)
        if swept:
            self._debug(f"Sweep invalidated {swept} outstanding challenges")
        return swept

    # ================================================================
    # Lifecycle
    # ================================================================

    @property
    def is_sweeping(self) -> bool:
        """Whether the background sweep task is running."""
        return self._sweep_task is not None and not self._sweep_task.done()

    async def start(self) -> None:
        """
        Start the background sweep.

        No-op when already started or when the sweep is disabled.
        """
        if not self.sweep_interval_seconds or self.is_sweeping:
            return

        self._sweep_task = asyncio.create_task(
            self._sweep_loop(), name="nonce-authority-sweep"
        )
        if self.reporter:
            self.reporter.info(
                f"Challenge sweep started (interval: {self.sweep_interval_seconds}s)",
                context="NonceAuthority",
            )

    async def shutdown(self) -> None:
        """Cancel the background sweep and clear the registry."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None

        self.clear()
        if self.reporter:
            self.reporter.info("Challenge registry shut down", context="NonceAuthority")

    async def _sweep_loop(self) -> None:
        """Clear the registry every sweep interval until cancelled."""
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep()

    def _debug(self, msg: str) -> None:
        if self.reporter:
            self.reporter.debug(msg, context="NonceAuthority", verbose_level=3)
