"""
EVM signature formats and contract-wallet call encoding.

- EIP-191 personal_sign message hashing
- ERC-1271 isValidSignature(bytes32,bytes) calldata and magic value
- ERC-6492 wrapper for signatures of not-yet-deployed contract accounts
"""

from dataclasses import dataclass

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_account.messages import defunct_hash_message
from eth_utils import decode_hex, is_hex, is_hex_address

# bytes4(keccak256("isValidSignature(bytes32,bytes)"))
ERC1271_MAGIC_VALUE = bytes.fromhex("1626ba7e")
ERC1271_SELECTOR = ERC1271_MAGIC_VALUE

# 0x6492 repeated over 32 bytes, appended to wrapped signatures
ERC6492_MAGIC_SUFFIX = bytes.fromhex("6492" * 16)


@dataclass(frozen=True)
class Erc6492Signature:
    """
    Unwrapped ERC-6492 signature.

    Attributes:
        factory: Contract that deploys the account
        factory_calldata: Calldata that deploys the account
        signature: Signature the deployed account validates
    """

    factory: str
    factory_calldata: bytes
    signature: bytes


def parse_hex(value: str) -> bytes:
    """
    Decode 0x-prefixed hex.

    Args:
        value: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If value is not 0x-prefixed hex
    """
    if not isinstance(value, str) or value[:2].lower() != "0x" or not is_hex(value):
        raise ValueError("Expected 0x-prefixed hex string")
    return decode_hex(value)


def is_evm_address(value: str) -> bool:
    """Check value is a 0x-prefixed 20-byte hex address."""
    return isinstance(value, str) and value[:2] == "0x" and is_hex_address(value)


def hash_personal_message(message: str) -> bytes:
    """
    Hash message the way personal_sign does (EIP-191 version 0x45).

    Args:
        message: Exact message text

    Returns:
        32-byte message hash
    """
    return bytes(defunct_hash_message(text=message))


def is_erc6492_signature(signature: bytes) -> bool:
    """Check signature carries the ERC-6492 magic suffix."""
    return len(signature) > len(ERC6492_MAGIC_SUFFIX) and signature.endswith(
        ERC6492_MAGIC_SUFFIX
    )


def unwrap_erc6492(signature: bytes) -> Erc6492Signature:
    """
    Split an ERC-6492 wrapped signature.

    Layout: abi.encode(address factory, bytes calldata, bytes sig) ++ magic

    Args:
        signature: Wrapped signature bytes

    Returns:
        Erc6492Signature parts

    Raises:
        ValueError: If the suffix is missing or the payload does not decode
    """
    if not is_erc6492_signature(signature):
        raise ValueError("Signature is not ERC-6492 wrapped")

    payload = signature[: -len(ERC6492_MAGIC_SUFFIX)]
    try:
        factory, factory_calldata, inner = decode(
            ["address", "bytes", "bytes"], payload
        )
    except DecodingError as e:
        raise ValueError(f"Malformed ERC-6492 payload: {e}") from e

    return Erc6492Signature(
        factory=factory,
        factory_calldata=bytes(factory_calldata),
        signature=bytes(inner),
    )


def wrap_erc6492(factory: str, factory_calldata: bytes, signature: bytes) -> bytes:
    """
    Build an ERC-6492 wrapped signature.

    Args:
        factory: Contract that deploys the account
        factory_calldata: Calldata that deploys the account
        signature: Signature the deployed account validates

    Returns:
        Wrapped signature bytes
    """
    payload = encode(
        ["address", "bytes", "bytes"], [factory, factory_calldata, signature]
    )
    return payload + ERC6492_MAGIC_SUFFIX


def encode_is_valid_signature(message_hash: bytes, signature: bytes) -> bytes:
    """
    Encode calldata for ERC-1271 isValidSignature(bytes32,bytes).

    Args:
        message_hash: 32-byte hash being validated
        signature: Signature handed to the account contract

    Returns:
        Calldata bytes
    """
    return ERC1271_SELECTOR + encode(["bytes32", "bytes"], [message_hash, signature])


def is_erc1271_magic_value(return_data: bytes) -> bool:
    """Check an isValidSignature return carries the magic value."""
    return len(return_data) >= 4 and return_data[:4] == ERC1271_MAGIC_VALUE
