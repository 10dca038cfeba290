"""
Chain reader service interface.

Read-only access to an EVM node, used by the contract-wallet
verification paths.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class CallRequest:
    """Single read-only call to simulate."""

    to: str
    data: bytes


@dataclass(frozen=True)
class CallResult:
    """
    Outcome of a read-only call.

    Attributes:
        success: False when the call reverted
        return_data: Raw return (or revert) data
    """

    success: bool
    return_data: bytes = b""


class IChainReader(ABC):
    """
    Abstract service interface for reading EVM chain state.

    Transport failures raise ChainUnavailableError. Reverts are reported
    through CallResult.success, never raised.
    """

    @abstractmethod
    async def get_code(self, address: str) -> bytes:
        """
        Get deployed bytecode at address.

        Args:
            address: Account address

        Returns:
            Bytecode (empty when nothing is deployed)
        """

    @abstractmethod
    async def call(self, request: CallRequest) -> CallResult:
        """
        Execute a read-only call against the latest block.

        Args:
            request: Call target and calldata

        Returns:
            CallResult with return data
        """

    @abstractmethod
    async def simulate_calls(self, requests: List[CallRequest]) -> List[CallResult]:
        """
        Simulate calls in sequence within one block.

        State changes of earlier calls are visible to later ones; nothing
        is broadcast.

        Args:
            requests: Calls in execution order

        Returns:
            One CallResult per request, same order
        """

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
