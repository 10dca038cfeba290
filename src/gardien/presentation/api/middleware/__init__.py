"""
API middleware.
"""

from gardien.presentation.api.middleware.error_handler import (
    gardien_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from gardien.presentation.api.middleware.metrics_middleware import MetricsMiddleware
from gardien.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)

__all__ = [
    "MetricsMiddleware",
    "RequestIDMiddleware",
    "gardien_exception_handler",
    "unhandled_exception_handler",
    "validation_exception_handler",
]
