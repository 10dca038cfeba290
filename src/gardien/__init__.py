"""
Gardien - Sign-In-With-Ethereum challenge server

Clean Architecture implementation of single-use challenge issuance and
signed message verification for EOA and smart-contract wallets.
"""

from gardien.main import GardienApp, create_app, main

__version__ = "0.1.0"
__all__ = ["GardienApp", "create_app", "main"]
