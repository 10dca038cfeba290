"""
Signature verifier service interface.
"""

from abc import ABC, abstractmethod

from gardien.domain.auth import SignedAssertion


class ISignatureVerifier(ABC):
    """
    Abstract service interface for message signature verification.

    One capability for every account kind. Implementations decide
    internally whether the account is a key-pair account or a contract
    account; callers never branch on it.
    """

    @abstractmethod
    async def verify_message(self, assertion: SignedAssertion) -> bool:
        """
        Verify that the asserted address produced the signature over the
        exact message.

        Args:
            assertion: Address, signed message text and signature
                (0x-prefixed hex)

        Returns:
            True if the signature is valid for the address, False otherwise

        Raises:
            ChainUnavailableError: If an on-chain check was needed but the
                node could not be reached
        """
