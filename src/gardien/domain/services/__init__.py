"""
Domain service interfaces.
"""

from gardien.domain.services.i_chain_reader import (
    CallRequest,
    CallResult,
    IChainReader,
)
from gardien.domain.services.i_signature_verifier import ISignatureVerifier

__all__ = [
    "CallRequest",
    "CallResult",
    "IChainReader",
    "ISignatureVerifier",
]
