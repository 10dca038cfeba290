"""
JSON-RPC chain reader backed by web3.py.

Every request goes through a circuit breaker and a per-call timeout.
Transport failures surface as ChainUnavailableError; contract reverts
are reported as unsuccessful CallResults.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, Web3Exception

from gardien.domain.exceptions import ChainUnavailableError
from gardien.domain.services import CallRequest, CallResult, IChainReader
from gardien.infrastructure.blockchain.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerError,
)
from gardien.infrastructure.monitoring import metrics
from gardien.infrastructure.monitoring.system_reporter import SystemReporter

T = TypeVar("T")


class RpcResponseError(Exception):
    """Raised when the node answers with a JSON-RPC error object."""


TRANSPORT_ERRORS = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
    Web3Exception,
    RpcResponseError,
)


class Web3ChainReader(IChainReader):
    """
    Chain reader using AsyncWeb3 over HTTP.

    Attributes:
        rpc_url: JSON-RPC endpoint
        timeout_seconds: Per-request timeout
        circuit_breaker: Breaker shared by all requests
    """

    def __init__(
        self,
        rpc_url: str,
        timeout_seconds: float = 10.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        reporter: Optional[SystemReporter] = None,
        w3: Optional[AsyncWeb3] = None,
    ):
        """
        Initialize chain reader.

        Args:
            rpc_url: JSON-RPC endpoint URL
            timeout_seconds: Per-request timeout in seconds
            circuit_breaker: Optional breaker (created with defaults if None)
            reporter: Optional SystemReporter for logging
            w3: Optional preconfigured AsyncWeb3 instance
        """
        self.rpc_url = rpc_url
        self.timeout_seconds = timeout_seconds
        self.reporter = reporter
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            name="rpc", expected_exceptions=TRANSPORT_ERRORS
        )
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))

    # ================================================================
    # IChainReader
    # ================================================================

    async def get_code(self, address: str) -> bytes:
        """Get deployed bytecode at address (empty when none)."""
        checksum = AsyncWeb3.to_checksum_address(address)

        async def operation() -> bytes:
            return bytes(await self.w3.eth.get_code(checksum))

        return await self._guarded("eth_getCode", operation)

    async def call(self, request: CallRequest) -> CallResult:
        """Execute eth_call against the latest block."""
        tx = {
            "to": AsyncWeb3.to_checksum_address(request.to),
            "data": "0x" + request.data.hex(),
        }

        async def operation() -> CallResult:
            try:
                return_data = await self.w3.eth.call(tx)
            except ContractLogicError:
                return CallResult(success=False)
            return CallResult(success=True, return_data=bytes(return_data))

        return await self._guarded("eth_call", operation)

    async def simulate_calls(self, requests: List[CallRequest]) -> List[CallResult]:
        """Simulate calls in one block with eth_simulateV1."""
        params = [
            {
                "blockStateCalls": [
                    {
                        "calls": [
                            {
                                "to": AsyncWeb3.to_checksum_address(request.to),
                                "input": "0x" + request.data.hex(),
                            }
                            for request in requests
                        ]
                    }
                ],
                "validation": False,
            },
            "latest",
        ]

        async def operation() -> List[CallResult]:
            response = await self.w3.provider.make_request("eth_simulateV1", params)
            return self._parse_simulation(response, len(requests))

        return await self._guarded("eth_simulateV1", operation)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.w3.provider.disconnect()

    # ================================================================
    # Helpers
    # ================================================================

    async def _guarded(self, method: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Run operation behind the circuit breaker and timeout."""
        try:
            result = await self.circuit_breaker.call(self._with_timeout, operation)
        except CircuitBreakerError as e:
            metrics.rpc_requests_total.labels(method=method, status="circuit_open").inc()
            raise ChainUnavailableError(str(e), rpc_method=method, cause=e) from e
        except TRANSPORT_ERRORS as e:
            metrics.rpc_requests_total.labels(method=method, status="error").inc()
            if self.reporter:
                self.reporter.warning(
                    f"{method} failed: {type(e).__name__}: {e}",
                    context="Web3ChainReader",
                )
            raise ChainUnavailableError(
                f"RPC request {method} failed", rpc_method=method, cause=e
            ) from e

        metrics.rpc_requests_total.labels(method=method, status="ok").inc()
        return result

    async def _with_timeout(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await asyncio.wait_for(operation(), timeout=self.timeout_seconds)

    @staticmethod
    def _parse_simulation(response: Dict[str, Any], expected: int) -> List[CallResult]:
        """
        Convert an eth_simulateV1 response into CallResults.

        Raises:
            RpcResponseError: If the node returned an error or a malformed result
        """
        if "error" in response:
            error = response["error"]
            raise RpcResponseError(
                f"eth_simulateV1 error {error.get('code')}: {error.get('message')}"
            )

        try:
            calls = response["result"][0]["calls"]
        except (KeyError, IndexError, TypeError) as e:
            raise RpcResponseError(f"Malformed eth_simulateV1 result: {e}") from e

        if len(calls) != expected:
            raise RpcResponseError(
                f"eth_simulateV1 returned {len(calls)} calls, expected {expected}"
            )

        results = []
        for call in calls:
            return_data = call.get("returnData") or "0x"
            results.append(
                CallResult(
                    success=int(call.get("status", "0x0"), 16) == 1,
                    return_data=bytes.fromhex(return_data[2:]),
                )
            )
        return results
