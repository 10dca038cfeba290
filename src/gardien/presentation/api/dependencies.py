"""
FastAPI dependencies for Gardien API.

Provides dependency injection for routes.
"""

from typing import Optional

from fastapi import Depends

from gardien.application.use_cases import (
    IssueChallengeUseCase,
    VerifySignedMessageUseCase,
)
from gardien.di import Container

# Global container (initialized in main.create_app)
_container: Optional[Container] = None


def get_container() -> Container:
    """
    Get DI container instance.

    Returns:
        Container instance

    Raises:
        RuntimeError: If container not initialized
    """
    if _container is None:
        raise RuntimeError("Container not initialized")
    return _container


def set_container(container: Optional[Container]) -> None:
    """
    Set DI container (called from create_app).

    Args:
        container: Container instance to set globally
    """
    global _container
    _container = container


def get_issue_challenge_use_case(
    container: Container = Depends(get_container),
) -> IssueChallengeUseCase:
    """Provide IssueChallengeUseCase."""
    return container.get_issue_challenge_use_case()


def get_verify_use_case(
    container: Container = Depends(get_container),
) -> VerifySignedMessageUseCase:
    """Provide VerifySignedMessageUseCase."""
    return container.get_verify_signed_message_use_case()
