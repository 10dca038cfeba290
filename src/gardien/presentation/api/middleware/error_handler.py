"""
Global error handling.

Every error response has the shape {"error": <reason>, "code": <category>}.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gardien.domain.exceptions import GardienException, InternalFailure, RequestMalformed
from gardien.infrastructure.monitoring import SystemReporter

STATUS_CODE_MAP = {
    "REQUEST_MALFORMED": status.HTTP_400_BAD_REQUEST,
    "CHALLENGE_FORMAT_INVALID": status.HTTP_400_BAD_REQUEST,
    "CHALLENGE_INVALID_OR_REUSED": status.HTTP_400_BAD_REQUEST,
    "SIGNATURE_INVALID": status.HTTP_401_UNAUTHORIZED,
    "INTERNAL_FAILURE": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INVALID_BODY_MESSAGE = "Invalid request body"


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code},
    )


def _reporter(request: Request) -> SystemReporter:
    return request.app.state.container.reporter


async def gardien_exception_handler(
    request: Request, exc: GardienException
) -> JSONResponse:
    """
    Handle Gardien domain exceptions.

    Converts domain exceptions to HTTP responses. Internal failures are
    logged with traceback and answered with an opaque message.
    """
    if isinstance(exc, InternalFailure):
        _reporter(request).error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: "
            f"{exc.message}",
            context="ErrorHandler",
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            exc.public_message,
            InternalFailure.code,
        )

    status_code = STATUS_CODE_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return _error_response(status_code, exc.message, exc.code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle unparseable or mistyped request bodies as malformed requests.

    Only absent fields get the missing-fields reason; bad JSON and wrong
    types get a generic one.
    """
    errors = exc.errors()
    _reporter(request).warning(
        f"Malformed request on {request.url.path}: {errors}",
        context="ErrorHandler",
        verbose_level=2,
    )

    if errors and all(error.get("type") == "missing" for error in errors):
        malformed = RequestMalformed()
    else:
        malformed = RequestMalformed(INVALID_BODY_MESSAGE)

    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        malformed.message,
        malformed.code,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected exceptions and return the opaque internal failure."""
    _reporter(request).error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
        context="ErrorHandler",
        exc_info=exc,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        InternalFailure.public_message,
        InternalFailure.code,
    )
