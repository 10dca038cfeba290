"""
Unit tests for NonceAuthority.

Tests challenge issuance, single-use consumption under concurrency,
coarse expiry sweeps and the background sweep lifecycle.

Usage:
    pytest tests/unit/infrastructure/test_nonce_authority.py
"""

import asyncio
import re
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from gardien.domain.exceptions import InternalFailure, RandomnessSourceError
from gardien.infrastructure.nonces import NonceAuthority


class TestNonceAuthority:
    """Unit tests for NonceAuthority."""

    # ================================================================
    # Issuance tests
    # ================================================================

    def test_issue_returns_32_char_lowercase_hex(self):
        """Test issued token is 16 random bytes rendered as hex."""
        authority = NonceAuthority(sweep_interval_seconds=None)

        token = authority.issue()

        assert re.fullmatch(r"[0-9a-f]{32}", token)
        assert authority.has(token) is True
        assert authority.size() == 1

    def test_issue_longer_tokens(self):
        """Test token_bytes widens the token."""
        authority = NonceAuthority(sweep_interval_seconds=None, token_bytes=32)

        assert len(authority.issue()) == 64

    def test_token_bytes_below_128_bits_rejected(self):
        """Test tokens shorter than 128 bits are refused."""
        with pytest.raises(ValueError):
            NonceAuthority(token_bytes=8)

    def test_ten_thousand_issues_are_distinct(self):
        """Test 10,000 issued tokens are pairwise distinct."""
        authority = NonceAuthority(sweep_interval_seconds=None)

        tokens = {authority.issue() for _ in range(10_000)}

        assert len(tokens) == 10_000
        assert authority.size() == 10_000

    def test_randomness_failure_raises_internal_failure(self):
        """Test randomness source failure surfaces and inserts nothing."""

        def broken_source(_: int) -> str:
            raise OSError("entropy pool unavailable")

        authority = NonceAuthority(
            sweep_interval_seconds=None, token_factory=broken_source
        )

        with pytest.raises(RandomnessSourceError) as exc_info:
            authority.issue()

        assert isinstance(exc_info.value, InternalFailure)
        assert exc_info.value.public_message == "Failed to generate nonce"
        assert authority.size() == 0

    # ================================================================
    # Consumption tests
    # ================================================================

    def test_consume_succeeds_once(self):
        """Test issued token is consumed exactly once."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        token = authority.issue()

        assert authority.consume(token) is True
        assert authority.consume(token) is False
        assert authority.has(token) is False
        assert authority.size() == 0

    def test_consume_unknown_token(self):
        """Test never-issued token is rejected."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        authority.issue()

        assert authority.consume("0" * 32) is False
        assert authority.consume("") is False
        assert authority.size() == 1

    def test_concurrent_consume_single_winner(self):
        """Test concurrent consumers of one token see at most one success."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        workers = 16

        for _ in range(50):
            token = authority.issue()
            barrier = threading.Barrier(workers)

            def attempt() -> bool:
                barrier.wait()
                return authority.consume(token)

            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(lambda _: attempt(), range(workers)))

            assert results.count(True) == 1

        assert authority.size() == 0

    async def test_concurrent_consume_from_coroutines(self):
        """Test concurrent coroutines racing on one token see one success."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        token = authority.issue()

        async def attempt() -> bool:
            await asyncio.sleep(0)
            return authority.consume(token)

        results = await asyncio.gather(*(attempt() for _ in range(100)))

        assert results.count(True) == 1

    # ================================================================
    # Expiry tests
    # ================================================================

    def test_sweep_invalidates_all_outstanding(self):
        """Test a sweep invalidates every token issued before it."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        tokens = [authority.issue() for _ in range(5)]

        swept = authority.sweep()

        assert swept == 5
        assert authority.size() == 0
        assert all(authority.consume(t) is False for t in tokens)

    def test_tokens_after_sweep_are_valid(self):
        """Test tokens issued after a sweep are unaffected by it."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        authority.issue()
        authority.sweep()

        token = authority.issue()

        assert authority.consume(token) is True

    def test_clear(self):
        """Test clear drops every outstanding token."""
        authority = NonceAuthority(sweep_interval_seconds=None)
        token = authority.issue()

        authority.clear()

        assert authority.size() == 0
        assert authority.has(token) is False

    # ================================================================
    # Lifecycle tests
    # ================================================================

    async def test_background_sweep_clears_registry(self):
        """Test started authority sweeps on its interval."""
        authority = NonceAuthority(sweep_interval_seconds=0.05)
        await authority.start()
        try:
            token = authority.issue()
            assert authority.is_sweeping is True

            await asyncio.sleep(0.2)

            assert authority.consume(token) is False
        finally:
            await authority.shutdown()

    async def test_start_is_idempotent(self):
        """Test second start keeps the running sweep task."""
        authority = NonceAuthority(sweep_interval_seconds=60)
        await authority.start()
        task = authority._sweep_task

        await authority.start()

        assert authority._sweep_task is task
        await authority.shutdown()

    async def test_start_without_interval_does_not_sweep(self):
        """Test disabled sweep never starts a task."""
        authority = NonceAuthority(sweep_interval_seconds=None)

        await authority.start()

        assert authority.is_sweeping is False

    async def test_shutdown_cancels_sweep_and_clears(self):
        """Test shutdown stops the sweep and empties the registry."""
        authority = NonceAuthority(sweep_interval_seconds=60)
        await authority.start()
        authority.issue()

        await authority.shutdown()

        assert authority.is_sweeping is False
        assert authority.size() == 0
