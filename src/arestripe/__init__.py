r"""arestripe - Asynchronous Stripe API client with safe automatic retries.

This package turns resource-oriented calls (e.g. "create a customer")
into authenticated HTTP requests sent with httpx. Failed requests are
retried only when it is safe to do so, and every call delivers exactly one
outcome, either through an awaitable future or a ``callback(error,
result)``.

Key Features:
    - Idempotency keys on state-changing requests, reused across retries
    - Retries honoring ``Stripe-Should-Retry`` and ``Retry-After``
    - Bounded exponential backoff with jitter
    - Typed errors classified from the API error payload
    - A single timeout bounding attempts and backoff delays
    - Lifecycle callbacks for observability (logging, metrics, alerting)

Example:
    ```pycon
    >>> import asyncio
    >>> from arestripe import Stripe
    >>> async def main():
    ...     async with Stripe("sk_test_123") as stripe:
    ...         stripe.set_max_network_retries(2)
    ...         customer = await stripe.customers.create({"description": "Some customer"})
    ...         print(customer.last_response.request_id)
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AppInfo",
    "ClientConfig",
    "RequestOptions",
    "ResponseMetadata",
    "Stripe",
    "StripeAPIError",
    "StripeAuthenticationError",
    "StripeCardError",
    "StripeConfigurationError",
    "StripeConnectionError",
    "StripeError",
    "StripeIdempotencyError",
    "StripeInvalidRequestError",
    "StripeObject",
    "StripePermissionError",
    "StripeRateLimitError",
    "StripeTimeoutError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"

from arestripe.app_info import AppInfo
from arestripe.client import Stripe
from arestripe.core.config import ClientConfig
from arestripe.exceptions import (
    StripeAPIError,
    StripeAuthenticationError,
    StripeCardError,
    StripeConfigurationError,
    StripeConnectionError,
    StripeError,
    StripeIdempotencyError,
    StripeInvalidRequestError,
    StripePermissionError,
    StripeRateLimitError,
    StripeTimeoutError,
)
from arestripe.resources import RequestOptions
from arestripe.response import ResponseMetadata, StripeObject
