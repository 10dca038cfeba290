"""
Challenge registry infrastructure.
"""

from gardien.infrastructure.nonces.nonce_authority import NonceAuthority

__all__ = ["NonceAuthority"]
