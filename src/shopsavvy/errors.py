from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Dict, Optional, Type

from pydantic import ValidationError

from .schema import APIErrorResponse


class ShopSavvyError(RuntimeError):
    """Base error for everything raised by the ShopSavvy client."""


class ConfigurationError(ShopSavvyError):
    """Raised when the client is constructed with an invalid API key or option."""


class APIError(ShopSavvyError):
    """Raised for non-success HTTP responses."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.status_code == other.status_code
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.status_code))


class AuthenticationError(APIError):
    """HTTP 401 - the API key was rejected."""


class NotFoundError(APIError):
    """HTTP 404 - the product or resource does not exist."""


class APIValidationError(APIError):
    """HTTP 422 - the request parameters were rejected."""


class RateLimitError(APIError):
    """HTTP 429 - too many requests or credits exhausted."""


class NetworkError(ShopSavvyError):
    """Raised when the request failed before any response was received."""


class RequestTimeout(ShopSavvyError):
    """Raised when the request deadline was exceeded."""


STATUS_ERRORS: Dict[int, Type[APIError]] = {
    401: AuthenticationError,
    404: NotFoundError,
    422: APIValidationError,
    429: RateLimitError,
}


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown Status"


def _parse_body(body: Any) -> Any:
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(body, str):
        try:
            return json.loads(body)
        except ValueError:
            return None
    return body


def resolve_error_message(status_code: int, body: Any = None) -> str:
    """
    Pick the message for a failed response.

    Prefers the "error" field of a JSON error body ({"error": "..."}).
    Falls back to "HTTP <code>: <reason phrase>" when the body is missing,
    not JSON, or carries no usable "error" string.
    """
    parsed = _parse_body(body)
    if isinstance(parsed, dict):
        try:
            error = APIErrorResponse.model_validate(parsed).error
        except ValidationError:
            error = None
        if error and error.strip():
            return error
    return f"HTTP {status_code}: {_reason_phrase(status_code)}"


def map_http_error(status_code: int, body: Any = None) -> APIError:
    """
    Translate an HTTP status code and optional error body into an error value.

    Pure: the same inputs always produce an equal error.
    """
    error_cls = STATUS_ERRORS.get(status_code, APIError)
    return error_cls(resolve_error_message(status_code, body), status_code=status_code)
