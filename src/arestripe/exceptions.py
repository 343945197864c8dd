r"""Typed errors raised by the Stripe client.

Every failure surfaced by ``arestripe`` is an instance of ``StripeError``
carrying a stable ``kind`` tag, a human-readable message and, when the
remote service supplied one, the upstream request identifier.

Example:
    ```pycon
    >>> from arestripe.exceptions import ErrorKind, StripeInvalidRequestError
    >>> error = StripeInvalidRequestError(message="No such customer: 'cus_123'")
    >>> error.type
    'StripeInvalidRequestError'
    >>> error.kind is ErrorKind.INVALID_REQUEST
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "TYPE_ERROR_KINDS",
    "ErrorKind",
    "StripeAPIError",
    "StripeAuthenticationError",
    "StripeCardError",
    "StripeConfigurationError",
    "StripeConnectionError",
    "StripeError",
    "StripeIdempotencyError",
    "StripeInvalidRequestError",
    "StripePermissionError",
    "StripeRateLimitError",
    "StripeTimeoutError",
]

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Mapping


class ErrorKind(str, Enum):
    """Stable categorical tag distinguishing classes of failure."""

    AUTHENTICATION = "AuthenticationError"
    INVALID_REQUEST = "InvalidRequestError"
    RATE_LIMIT = "RateLimitError"
    API_CONNECTION = "APIConnectionError"
    API = "APIError"
    CARD = "CardError"
    IDEMPOTENCY = "IdempotencyError"
    PERMISSION = "PermissionError"
    TIMEOUT = "TimeoutError"
    CONFIGURATION = "ConfigurationError"


class StripeError(Exception):
    """Base class of all errors raised by the Stripe client.

    Args:
        message: Human-readable description of the failure.
        http_status: HTTP status code of the response, if any.
        request_id: Upstream request identifier (``request-id`` header).
        code: Machine-readable error code from the error body.
        param: Name of the parameter the error relates to.
        decline_code: Card issuer decline code, for card errors.
        headers: Snapshot of the response headers.
        json_body: The decoded JSON response body.
        raw: The raw ``error`` object from the response body.
    """

    kind: ClassVar[ErrorKind] = ErrorKind.API

    def __init__(
        self,
        message: str | None = None,
        *,
        http_status: int | None = None,
        request_id: str | None = None,
        code: str | None = None,
        param: str | None = None,
        decline_code: str | None = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        raw: Mapping[str, Any] | None = None,
    ) -> None:
        self.message = message or "An error occurred with the Stripe API"
        super().__init__(self.message)
        self.http_status = http_status
        self.request_id = request_id
        self.code = code
        self.param = param
        self.decline_code = decline_code
        self.headers: dict[str, str] = dict(headers or {})
        self.json_body = json_body
        self.raw: dict[str, Any] = dict(raw or {})

    @property
    def type(self) -> str:
        """The concrete error type name, e.g. ``StripeCardError``."""
        return type(self).__name__

    def __str__(self) -> str:
        if self.request_id is not None:
            return f"Request {self.request_id}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"http_status={self.http_status}, request_id={self.request_id!r})"
        )

    @classmethod
    def generate(cls, raw: Mapping[str, Any], **kwargs: Any) -> StripeError:
        """Build the error subclass matching the ``type`` of a raw error
        payload.

        Args:
            raw: The ``error`` object returned by the remote service.
            **kwargs: Extra keyword arguments forwarded to the error.

        Returns:
            The matching ``StripeError`` subclass instance, or a
            ``StripeAPIError`` for unknown types.

        Example:
            ```pycon
            >>> from arestripe.exceptions import StripeError
            >>> error = StripeError.generate({"type": "card_error", "message": "Declined"})
            >>> error.type
            'StripeCardError'

            ```
        """
        error_cls = TYPE_ERROR_KINDS.get(raw.get("type"), StripeAPIError)
        return error_cls(
            message=raw.get("message"),
            code=raw.get("code"),
            param=raw.get("param"),
            decline_code=raw.get("decline_code"),
            raw=raw,
            **kwargs,
        )


class StripeCardError(StripeError):
    """The card or payment method was declined."""

    kind = ErrorKind.CARD


class StripeInvalidRequestError(StripeError):
    """The request had invalid parameters or referenced a missing
    resource."""

    kind = ErrorKind.INVALID_REQUEST


class StripeAPIError(StripeError):
    """Generic upstream failure, or a response that could not be
    parsed."""

    kind = ErrorKind.API


class StripeAuthenticationError(StripeError):
    kind = ErrorKind.AUTHENTICATION


class StripePermissionError(StripeError):
    kind = ErrorKind.PERMISSION


class StripeRateLimitError(StripeError):
    kind = ErrorKind.RATE_LIMIT


class StripeIdempotencyError(StripeError):
    """An idempotency key was reused with different request
    parameters."""

    kind = ErrorKind.IDEMPOTENCY


class StripeConnectionError(StripeError):
    """The request could not reach the remote service (DNS, reset,
    refused)."""

    kind = ErrorKind.API_CONNECTION


class StripeTimeoutError(StripeError):
    """A request attempt or the whole logical operation timed out."""

    kind = ErrorKind.TIMEOUT


class StripeConfigurationError(StripeError, ValueError):
    """Invalid input to a configuration setter.

    Always raised synchronously by the setter, never delivered through a
    completion handle.
    """

    kind = ErrorKind.CONFIGURATION


# Error class for each ``error.type`` of a raw error payload
TYPE_ERROR_KINDS: dict[str, type[StripeError]] = {
    "api_error": StripeAPIError,
    "authentication_error": StripeAuthenticationError,
    "card_error": StripeCardError,
    "idempotency_error": StripeIdempotencyError,
    "invalid_request_error": StripeInvalidRequestError,
    "permission_error": StripePermissionError,
    "rate_limit_error": StripeRateLimitError,
}
