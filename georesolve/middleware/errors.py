"""Error handling middleware."""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from starlette.types import ASGIApp

from georesolve.core.logging import get_logger
from georesolve.geocoding.exceptions import GeocodeError

logger = get_logger()

# Map exception types to status codes (None means use exception's status_code)
ErrorMapping = dict[type[Exception], int | None]

ERROR_MAPPING: ErrorMapping = {
    GeocodeError: None,
    HTTPException: None,
    RequestValidationError: HTTP_422_UNPROCESSABLE_ENTITY,
}


def _status_for(exc: Exception) -> int:
    for exc_type, mapped in ERROR_MAPPING.items():
        if isinstance(exc, exc_type):
            if mapped is not None:
                return mapped
            return int(getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR))
    return HTTP_500_INTERNAL_SERVER_ERROR


def _detail_for(exc: Exception) -> str:
    if isinstance(exc, GeocodeError):
        return exc.message
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    if isinstance(exc, RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            return f"{location}: {first.get('msg', 'invalid value')}"
        return "Invalid request"
    return str(exc.args[0]) if exc.args else exc.__class__.__name__


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """
    Build the JSON error response for an exception and log it.

    Args:
    ----
        request: The request that caused the exception
        exc: The exception to render

    Returns:
    -------
        A JSON response with error details
    """
    error_type = exc.__class__.__name__
    status_code = _status_for(exc)
    detail = _detail_for(exc)
    correlation_id = getattr(request.state, "correlation_id", None)

    log = logger.error if status_code >= HTTP_500_INTERNAL_SERVER_ERROR else logger.info
    log(
        "request_error",
        error_type=error_type,
        error_message=detail,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
        correlation_id=correlation_id,
    )

    response = JSONResponse(
        status_code=status_code,
        content={
            "error": detail,
            "error_type": error_type,
            "status_code": status_code,
            "correlation_id": str(correlation_id) if correlation_id else "unknown",
        },
    )
    if correlation_id:
        response.headers["X-Request-ID"] = str(correlation_id)
    return response


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler entry point registered on the application."""
    return error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Route handled exception types through the shared error renderer."""
    for exc_type in ERROR_MAPPING:
        app.add_exception_handler(exc_type, handle_exception)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware turning uncaught exceptions into JSON error responses."""

    def __init__(self, app: ASGIApp) -> None:
        """
        Initialize middleware.

        Args:
        ----
            app: The ASGI application
        """
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            return await call_next(request)
        except Exception as exc:
            return error_response(request, exc)
