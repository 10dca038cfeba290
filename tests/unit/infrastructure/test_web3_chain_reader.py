"""
Unit tests for Web3ChainReader.

The AsyncWeb3 instance is replaced with an in-memory double so no node
is contacted.
"""

import asyncio
from types import SimpleNamespace

import pytest
from web3.exceptions import ContractLogicError

from gardien.domain.exceptions import ChainUnavailableError
from gardien.domain.services import CallRequest, CallResult
from gardien.infrastructure.blockchain import CircuitBreaker, Web3ChainReader
from gardien.infrastructure.blockchain.web3_chain_reader import (
    TRANSPORT_ERRORS,
    RpcResponseError,
)

ACCOUNT = "0x" + "5a" * 20


class FakeEth:
    def __init__(self):
        self.code = b""
        self.call_return = b""
        self.call_error = None
        self.delay = 0.0
        self.calls = []

    async def get_code(self, address):
        await asyncio.sleep(self.delay)
        if self.call_error is not None:
            raise self.call_error
        return self.code

    async def call(self, tx):
        self.calls.append(tx)
        if self.call_error is not None:
            raise self.call_error
        return self.call_return


class FakeProvider:
    def __init__(self):
        self.response = {"jsonrpc": "2.0", "id": 1, "result": []}
        self.requests = []
        self.disconnected = False

    async def make_request(self, method, params):
        self.requests.append((method, params))
        return self.response

    async def disconnect(self):
        self.disconnected = True


@pytest.fixture
def w3():
    return SimpleNamespace(eth=FakeEth(), provider=FakeProvider())


@pytest.fixture
def reader(w3) -> Web3ChainReader:
    breaker = CircuitBreaker(
        failure_threshold=2, recovery_timeout=60, expected_exceptions=TRANSPORT_ERRORS
    )
    return Web3ChainReader(
        "http://localhost:8545", timeout_seconds=0.5, circuit_breaker=breaker, w3=w3
    )


class TestWeb3ChainReader:
    """Unit tests for Web3ChainReader."""

    # ================================================================
    # Successful requests
    # ================================================================

    async def test_get_code(self, reader, w3):
        """Test deployed code is returned as bytes."""
        w3.eth.code = b"\x60\x80"

        assert await reader.get_code(ACCOUNT) == b"\x60\x80"

    async def test_call_success(self, reader, w3):
        """Test eth_call return data is passed back."""
        w3.eth.call_return = b"\x16\x26\xba\x7e" + b"\x00" * 28

        result = await reader.call(CallRequest(to=ACCOUNT, data=b"\x01\x02"))

        assert result == CallResult(success=True, return_data=w3.eth.call_return)
        assert w3.eth.calls[0]["data"] == "0x0102"

    async def test_call_revert_is_unsuccessful_result(self, reader, w3):
        """Test a contract revert is a failed call, not an error."""
        w3.eth.call_error = ContractLogicError("execution reverted")

        result = await reader.call(CallRequest(to=ACCOUNT, data=b""))

        assert result.success is False
        assert reader.circuit_breaker.failure_count == 0

    async def test_simulate_calls(self, reader, w3):
        """Test eth_simulateV1 request shape and result parsing."""
        w3.provider.response = {
            "jsonrpc": "2.0",
            "id": 1,
            "result": [
                {
                    "calls": [
                        {"status": "0x1", "returnData": "0x"},
                        {"status": "0x1", "returnData": "0x1626ba7e" + "00" * 28},
                    ]
                }
            ],
        }

        results = await reader.simulate_calls(
            [
                CallRequest(to="0x" + "fa" * 20, data=b"\xaa"),
                CallRequest(to=ACCOUNT, data=b"\xbb"),
            ]
        )

        method, params = w3.provider.requests[0]
        calls = params[0]["blockStateCalls"][0]["calls"]
        assert method == "eth_simulateV1"
        assert params[1] == "latest"
        assert [c["input"] for c in calls] == ["0xaa", "0xbb"]
        assert results[0] == CallResult(success=True, return_data=b"")
        assert results[1].return_data[:4] == bytes.fromhex("1626ba7e")

    async def test_simulated_revert_status(self, reader, w3):
        """Test status 0x0 marks a call unsuccessful."""
        w3.provider.response = {
            "result": [{"calls": [{"status": "0x0", "returnData": "0x"}]}]
        }

        (result,) = await reader.simulate_calls([CallRequest(to=ACCOUNT, data=b"")])

        assert result.success is False

    async def test_close_disconnects_provider(self, reader, w3):
        """Test close releases the HTTP session."""
        await reader.close()

        assert w3.provider.disconnected is True

    # ================================================================
    # Failures
    # ================================================================

    async def test_transport_error_raises_chain_unavailable(self, reader, w3):
        """Test transport failure surfaces as ChainUnavailableError."""
        w3.eth.call_error = ConnectionError("connection refused")

        with pytest.raises(ChainUnavailableError) as exc_info:
            await reader.get_code(ACCOUNT)

        assert exc_info.value.rpc_method == "eth_getCode"
        assert exc_info.value.public_message == "Internal server error"

    async def test_timeout_raises_chain_unavailable(self, reader, w3):
        """Test slow node is cut off by the per-call timeout."""
        w3.eth.delay = 2.0

        with pytest.raises(ChainUnavailableError):
            await reader.get_code(ACCOUNT)

    async def test_rpc_error_object_raises_chain_unavailable(self, reader, w3):
        """Test JSON-RPC error response (e.g. method not supported)."""
        w3.provider.response = {
            "error": {"code": -32601, "message": "the method eth_simulateV1 does not exist"}
        }

        with pytest.raises(ChainUnavailableError) as exc_info:
            await reader.simulate_calls([CallRequest(to=ACCOUNT, data=b"")])

        assert isinstance(exc_info.value.cause, RpcResponseError)

    async def test_open_circuit_fails_fast(self, reader, w3):
        """Test repeated failures open the circuit and skip the node."""
        w3.eth.call_error = ConnectionError("connection refused")
        for _ in range(2):
            with pytest.raises(ChainUnavailableError):
                await reader.call(CallRequest(to=ACCOUNT, data=b""))

        calls_before = len(w3.eth.calls)
        with pytest.raises(ChainUnavailableError):
            await reader.call(CallRequest(to=ACCOUNT, data=b""))

        assert len(w3.eth.calls) == calls_before

    def test_result_count_mismatch(self):
        """Test a result with the wrong number of calls is rejected."""
        response = {"result": [{"calls": []}]}

        with pytest.raises(RpcResponseError):
            Web3ChainReader._parse_simulation(response, expected=2)
