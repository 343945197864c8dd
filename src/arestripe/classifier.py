r"""Mapping of failed HTTP exchanges to typed errors.

A failure is either a completed response with a non-2xx status, or a
transport exception raised by ``httpx``. Both are turned into exactly one
``StripeError``. The status and type tables are plain dictionaries so the
boundary between kinds can be configured per classifier.
"""

from __future__ import annotations

__all__ = [
    "STATUS_ERROR_KINDS",
    "TYPE_ERROR_KINDS",
    "ErrorClassifier",
    "classify_exception",
    "classify_response",
]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from arestripe.exceptions import (
    TYPE_ERROR_KINDS,
    StripeAPIError,
    StripeAuthenticationError,
    StripeCardError,
    StripeConnectionError,
    StripeError,
    StripeIdempotencyError,
    StripeInvalidRequestError,
    StripePermissionError,
    StripeRateLimitError,
    StripeTimeoutError,
)
from arestripe.response import REQUEST_ID_HEADER

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)

STATUS_ERROR_KINDS: dict[int, type[StripeError]] = {
    400: StripeInvalidRequestError,
    401: StripeAuthenticationError,
    402: StripeCardError,
    403: StripePermissionError,
    404: StripeInvalidRequestError,
    429: StripeRateLimitError,
}


class ErrorClassifier:
    """Classifies failed responses and transport exceptions.

    Args:
        status_kinds: Mapping of HTTP status codes to error classes.
            Defaults to ``STATUS_ERROR_KINDS``.
        type_kinds: Mapping of the body's ``error.type`` to error classes,
            used when the status is not in ``status_kinds``. Defaults to
            ``TYPE_ERROR_KINDS``.
    """

    def __init__(
        self,
        status_kinds: Mapping[int, type[StripeError]] | None = None,
        type_kinds: Mapping[str, type[StripeError]] | None = None,
    ) -> None:
        self.status_kinds = dict(STATUS_ERROR_KINDS if status_kinds is None else status_kinds)
        self.type_kinds = dict(TYPE_ERROR_KINDS if type_kinds is None else type_kinds)

    def classify_response(self, response: httpx.Response) -> StripeError:
        """Turn a non-2xx response into a typed error.

        Args:
            response: The completed HTTP response.

        Returns:
            The classified error. Bodies that are not JSON, or that carry
            no ``error`` object, yield a ``StripeAPIError``.
        """
        headers = {key.lower(): value for key, value in response.headers.items()}
        common: dict[str, Any] = {
            "http_status": response.status_code,
            "request_id": headers.get(REQUEST_ID_HEADER),
            "headers": headers,
        }
        try:
            body = response.json()
        except ValueError:
            logger.debug(f"Unparseable error body with status {response.status_code}")
            return StripeAPIError(
                message=(
                    f"Invalid JSON received from the Stripe API "
                    f"(HTTP response code was {response.status_code})"
                ),
                json_body=response.text,
                **common,
            )

        raw = body.get("error") if isinstance(body, dict) else None
        if not isinstance(raw, dict):
            return StripeAPIError(
                message=(
                    f"Invalid response object from the Stripe API "
                    f"(HTTP response code was {response.status_code})"
                ),
                json_body=body,
                **common,
            )

        error_cls = self._error_class(response.status_code, raw.get("type"))
        return error_cls(
            message=raw.get("message"),
            code=raw.get("code"),
            param=raw.get("param"),
            decline_code=raw.get("decline_code"),
            json_body=body,
            raw=raw,
            **common,
        )

    def classify_exception(self, exc: Exception) -> StripeError:
        """Turn a transport exception into a typed error.

        The returned error has ``exc`` set as its ``__cause__``.

        Args:
            exc: The exception raised while sending the request.

        Returns:
            A ``StripeTimeoutError`` for timeouts, otherwise a
            ``StripeConnectionError``.
        """
        if isinstance(exc, httpx.TimeoutException):
            error: StripeError = StripeTimeoutError(
                message=f"Request to the Stripe API timed out ({type(exc).__name__})"
            )
        else:
            error = StripeConnectionError(
                message=(
                    f"An error occurred with our connection to Stripe: "
                    f"{type(exc).__name__}: {exc}"
                )
            )
        error.__cause__ = exc
        return error

    def _error_class(self, status_code: int, error_type: str | None) -> type[StripeError]:
        # the body is more specific than 400 for idempotency conflicts
        if error_type == "idempotency_error":
            return self.type_kinds.get(error_type, StripeIdempotencyError)
        if status_code in self.status_kinds:
            return self.status_kinds[status_code]
        if error_type is not None and error_type in self.type_kinds:
            return self.type_kinds[error_type]
        return StripeAPIError


_DEFAULT_CLASSIFIER = ErrorClassifier()


def classify_response(response: httpx.Response) -> StripeError:
    """Classify a non-2xx response with the default tables.

    Example:
        ```pycon
        >>> import httpx
        >>> from arestripe.classifier import classify_response
        >>> response = httpx.Response(
        ...     404,
        ...     json={"error": {"type": "invalid_request_error", "message": "No such customer"}},
        ...     headers={"request-id": "req_123"},
        ... )
        >>> error = classify_response(response)
        >>> error.type, error.request_id
        ('StripeInvalidRequestError', 'req_123')

        ```
    """
    return _DEFAULT_CLASSIFIER.classify_response(response)


def classify_exception(exc: Exception) -> StripeError:
    """Classify a transport exception with the default classifier."""
    return _DEFAULT_CLASSIFIER.classify_exception(exc)
