"""
EVM message signature verification.

Implements ISignatureVerifier for every EVM account kind behind one call:

- key-pair accounts (EOA): EIP-191 signature recovery, fully off-chain
- deployed contract accounts: ERC-1271 isValidSignature via eth_call
- undeployed contract accounts: ERC-6492 wrapped signature, verified by
  simulating the factory deployment followed by isValidSignature in one
  simulated block (nothing is broadcast)
"""

from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from gardien.domain.auth import SignedAssertion
from gardien.domain.services import CallRequest, IChainReader, ISignatureVerifier
from gardien.infrastructure.blockchain.signature_formats import (
    Erc6492Signature,
    encode_is_valid_signature,
    hash_personal_message,
    is_erc1271_magic_value,
    is_erc6492_signature,
    parse_hex,
    unwrap_erc6492,
)
from gardien.infrastructure.monitoring.system_reporter import SystemReporter

ECDSA_SIGNATURE_LENGTH = 65


class EvmSignatureVerifier(ISignatureVerifier):
    """
    Signature verifier for EVM accounts.

    Without a chain reader only key-pair accounts can be verified.

    Attributes:
        chain_reader: Optional read access to an EVM node
    """

    def __init__(
        self,
        chain_reader: Optional[IChainReader] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize verifier.

        Args:
            chain_reader: Chain reader for contract-wallet paths
            reporter: Optional SystemReporter for logging
        """
        self.chain_reader = chain_reader
        self.reporter = reporter

    async def verify_message(self, assertion: SignedAssertion) -> bool:
        """
        Verify the assertion signature over its message for its address.

        Args:
            assertion: Claimed address, exact signed message text and
                signature (0x-prefixed hex, plain or ERC-6492)

        Returns:
            True if the address produced the signature, False otherwise

        Raises:
            ChainUnavailableError: If an on-chain check was needed but the
                node could not be reached
        """
        address = assertion.address
        message = assertion.message

        try:
            signature_bytes = parse_hex(assertion.signature)
        except ValueError:
            self._debug("Signature is not valid hex")
            return False

        wrapped: Optional[Erc6492Signature] = None
        if is_erc6492_signature(signature_bytes):
            try:
                wrapped = unwrap_erc6492(signature_bytes)
            except ValueError as e:
                self._debug(f"Rejected ERC-6492 signature: {e}")
                return False
            inner_signature = wrapped.signature
        else:
            inner_signature = signature_bytes
            if self._recovers_to(address, message, signature_bytes):
                return True

        if self.chain_reader is None:
            return False

        message_hash = hash_personal_message(message)
        code = await self.chain_reader.get_code(address)

        if code:
            return await self._verify_deployed(address, message_hash, inner_signature)

        if wrapped is not None:
            return await self._verify_counterfactual(address, message_hash, wrapped)

        return False

    def _recovers_to(self, address: str, message: str, signature: bytes) -> bool:
        """Check EIP-191 recovery of signature yields address."""
        if len(signature) != ECDSA_SIGNATURE_LENGTH:
            return False

        try:
            recovered = Account.recover_message(
                encode_defunct(text=message), signature=signature
            )
        except Exception as e:
            self._debug(f"Signature recovery failed: {e}")
            return False

        return recovered.lower() == address.lower()

    async def _verify_deployed(
        self, address: str, message_hash: bytes, signature: bytes
    ) -> bool:
        """ERC-1271 check against a deployed account contract."""
        result = await self.chain_reader.call(
            CallRequest(
                to=address,
                data=encode_is_valid_signature(message_hash, signature),
            )
        )
        valid = result.success and is_erc1271_magic_value(result.return_data)
        self._debug(f"ERC-1271 validation for {address}: {valid}")
        return valid

    async def _verify_counterfactual(
        self, address: str, message_hash: bytes, wrapped: Erc6492Signature
    ) -> bool:
        """ERC-6492 check: simulate deployment, then ERC-1271 validation."""
        deploy_result, validate_result = await self.chain_reader.simulate_calls(
            [
                CallRequest(to=wrapped.factory, data=wrapped.factory_calldata),
                CallRequest(
                    to=address,
                    data=encode_is_valid_signature(message_hash, wrapped.signature),
                ),
            ]
        )

        if not deploy_result.success:
            self._debug(f"Simulated deployment of {address} reverted")
            return False

        valid = validate_result.success and is_erc1271_magic_value(
            validate_result.return_data
        )
        self._debug(f"ERC-6492 validation for {address}: {valid}")
        return valid

    def _debug(self, msg: str) -> None:
        if self.reporter:
            self.reporter.debug(msg, context="EvmSignatureVerifier", verbose_level=2)
