"""
Shared test helpers: local signing accounts and a scriptable chain reader.
"""

from tests.helpers.fake_chain_reader import FakeChainReader, magic_return
from tests.helpers.wallets import (
    new_wallet,
    sign_message,
    siwe_message,
)

__all__ = [
    "FakeChainReader",
    "magic_return",
    "new_wallet",
    "sign_message",
    "siwe_message",
]
