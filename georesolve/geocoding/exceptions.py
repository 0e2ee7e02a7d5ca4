"""Exceptions raised by the address resolution engine.

Each user-facing exception carries the HTTP ``status_code`` that the error
middleware uses when rendering the response.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class GeocodeError(Exception):
    """Base class for resolution errors surfaced to the caller."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GeocodeError):
    """Raised when the inbound request is missing its query text."""

    status_code = HTTP_400_BAD_REQUEST


class NotFoundError(GeocodeError):
    """Raised when every adapter came back without an acceptable answer."""

    status_code = HTTP_404_NOT_FOUND


class InternalError(GeocodeError):
    """Raised for unexpected failures during resolution."""

    status_code = HTTP_500_INTERNAL_SERVER_ERROR


class AdapterFailure(Exception):
    """Raised inside an adapter when its provider call cannot be used.

    Never reaches the caller: the adapter failure boundary turns it into an
    ``AdapterError`` outcome or an empty candidate list.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
