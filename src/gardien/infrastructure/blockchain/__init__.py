"""
Blockchain infrastructure.

Signature verification for EVM accounts and read-only chain access.
"""

from gardien.infrastructure.blockchain.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerError,
    CircuitState,
)
from gardien.infrastructure.blockchain.evm_signature_verifier import (
    EvmSignatureVerifier,
)
from gardien.infrastructure.blockchain.web3_chain_reader import Web3ChainReader

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerError",
    "CircuitState",
    "EvmSignatureVerifier",
    "Web3ChainReader",
]
