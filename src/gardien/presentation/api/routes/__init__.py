"""
API routes.
"""

from gardien.presentation.api.routes import auth, health, metrics

__all__ = ["auth", "health", "metrics"]
