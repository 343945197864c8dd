r"""Lifecycle events emitted while executing a logical operation.

Three hooks are available on ``ClientConfig``:
- on_request: Called before each request attempt
- on_response: Called after each response is received, success or not
- on_retry: Called before sleeping ahead of a retry

Example:
    ```pycon
    >>> from arestripe import ClientConfig, Stripe
    >>> from arestripe.events import ResponseEvent
    >>> def log_response(event: ResponseEvent) -> None:
    ...     print(f"{event.method} {event.path} -> {event.status_code} ({event.request_id})")
    ...
    >>> stripe = Stripe(config=ClientConfig(api_key="sk_test_123", on_response=log_response))  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["RequestEvent", "ResponseEvent", "RetryEvent"]

from dataclasses import dataclass


@dataclass
class RequestEvent:
    """Information passed to the on_request callback.

    Attributes:
        method: The HTTP method (e.g., "GET", "POST").
        path: The request path, including the base path.
        api_version: The ``Stripe-Version`` sent, if any.
        idempotency_key: The idempotency key sent, if any.
        attempt: The attempt number (1-indexed).
        max_retries: Maximum number of retries of the operation.
    """

    method: str
    path: str
    api_version: str | None
    idempotency_key: str | None
    attempt: int
    max_retries: int


@dataclass
class ResponseEvent:
    """Information passed to the on_response callback.

    Attributes:
        method: The HTTP method.
        path: The request path.
        status_code: The HTTP status code received.
        request_id: The upstream request identifier, if any.
        attempt: The attempt number (1-indexed).
        elapsed: Seconds between sending the attempt and receiving the
            response.
    """

    method: str
    path: str
    status_code: int
    request_id: str | None
    attempt: int
    elapsed: float


@dataclass
class RetryEvent:
    """Information passed to the on_retry callback.

    Attributes:
        method: The HTTP method.
        path: The request path.
        attempt: The number of the attempt about to be made (1-indexed).
            The first retry is attempt 2.
        max_retries: Maximum number of retries of the operation.
        wait_time: Seconds slept before this retry.
        error: The classified error that triggered the retry.
    """

    method: str
    path: str
    attempt: int
    max_retries: int
    wait_time: float
    error: Exception
