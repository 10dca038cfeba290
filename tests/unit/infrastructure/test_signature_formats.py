"""
Unit tests for EVM signature format helpers.
"""

import pytest
from eth_abi import decode

from gardien.infrastructure.blockchain.signature_formats import (
    ERC1271_MAGIC_VALUE,
    ERC6492_MAGIC_SUFFIX,
    encode_is_valid_signature,
    hash_personal_message,
    is_erc1271_magic_value,
    is_erc6492_signature,
    is_evm_address,
    parse_hex,
    unwrap_erc6492,
    wrap_erc6492,
)

FACTORY = "0x0ba5ed0c6aa8c49038f819e587e2633c4a9f428a"


class TestHexParsing:
    """Tests for parse_hex and is_evm_address."""

    def test_parse_hex(self):
        """Test 0x-prefixed hex decodes in either case."""
        assert parse_hex("0xdeadBEEF") == bytes.fromhex("deadbeef")
        assert parse_hex("0X00") == b"\x00"

    @pytest.mark.parametrize(
        "value",
        ["deadbeef", "0xzz", "0xabc", None, "0x11 22\n33", " 0x1122", "0x1122\t"],
    )
    def test_parse_hex_rejects(self, value):
        """Test missing prefix, bad digits, odd length and whitespace are rejected."""
        with pytest.raises(ValueError):
            parse_hex(value)

    def test_is_evm_address(self):
        """Test address shape check."""
        assert is_evm_address("0x" + "ab" * 20) is True
        assert is_evm_address("ab" * 20) is False
        assert is_evm_address("0x" + "ab" * 19) is False
        assert is_evm_address("0x" + "zz" * 20) is False


class TestErc6492:
    """Tests for the ERC-6492 wrapper."""

    def test_wrap_then_unwrap(self):
        """Test wrapped parts come back unchanged."""
        calldata = bytes.fromhex("f14ddffc") + b"\x01" * 64
        inner = b"\x02" * 65

        wrapped = wrap_erc6492(FACTORY, calldata, inner)
        parts = unwrap_erc6492(wrapped)

        assert wrapped.endswith(ERC6492_MAGIC_SUFFIX)
        assert parts.factory.lower() == FACTORY.lower()
        assert parts.factory_calldata == calldata
        assert parts.signature == inner

    def test_plain_signature_is_not_wrapped(self):
        """Test a 65-byte ECDSA signature is not detected as ERC-6492."""
        assert is_erc6492_signature(b"\x11" * 65) is False
        assert is_erc6492_signature(ERC6492_MAGIC_SUFFIX) is False

    def test_unwrap_malformed_payload(self):
        """Test suffix on garbage raises ValueError."""
        with pytest.raises(ValueError):
            unwrap_erc6492(b"\x01" * 10 + ERC6492_MAGIC_SUFFIX)

    def test_unwrap_unwrapped_signature(self):
        """Test unwrapping a plain signature raises ValueError."""
        with pytest.raises(ValueError):
            unwrap_erc6492(b"\x11" * 65)


class TestErc1271:
    """Tests for isValidSignature encoding."""

    def test_encode_is_valid_signature(self):
        """Test calldata is selector plus ABI-encoded (bytes32, bytes)."""
        message_hash = hash_personal_message("hello")
        signature = b"\x05" * 65

        calldata = encode_is_valid_signature(message_hash, signature)
        decoded_hash, decoded_sig = decode(["bytes32", "bytes"], calldata[4:])

        assert calldata[:4] == bytes.fromhex("1626ba7e")
        assert decoded_hash == message_hash
        assert decoded_sig == signature

    def test_personal_message_hash_length(self):
        """Test EIP-191 hash is 32 bytes and message dependent."""
        assert len(hash_personal_message("a")) == 32
        assert hash_personal_message("a") != hash_personal_message("b")

    def test_magic_value(self):
        """Test magic value detection on padded return data."""
        assert is_erc1271_magic_value(ERC1271_MAGIC_VALUE + b"\x00" * 28) is True
        assert is_erc1271_magic_value(b"\xff\xff\xff\xff" + b"\x00" * 28) is False
        assert is_erc1271_magic_value(b"") is False
