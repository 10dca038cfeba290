"""
Dependency injection for Gardien.
"""

from gardien.di.container import Container

__all__ = ["Container"]
