r"""Retry eligibility and backoff delays.

This module provides the RetryPolicy class that decides whether a
classified failure may be retried, and how long to wait before the next
attempt.
"""

from __future__ import annotations

__all__ = ["SHOULD_RETRY_HEADER", "RetryPolicy"]

import logging
from typing import TYPE_CHECKING

from arestripe.backoff.exponential import ExponentialBackoff
from arestripe.core.config import (
    DEFAULT_INITIAL_NETWORK_RETRY_DELAY,
    DEFAULT_JITTER_FACTOR,
    DEFAULT_MAX_NETWORK_RETRY_DELAY,
    RETRY_STATUS_CODES,
)
from arestripe.exceptions import (
    StripeConnectionError,
    StripeIdempotencyError,
    StripeTimeoutError,
)
from arestripe.retry.idempotency import is_state_changing
from arestripe.utils.sleep import calculate_sleep_time

if TYPE_CHECKING:
    import httpx

    from arestripe.backoff.base import BaseBackoffStrategy
    from arestripe.core.config import ClientConfig
    from arestripe.exceptions import StripeError

logger: logging.Logger = logging.getLogger(__name__)

# Set by the API to explicitly allow or forbid retrying a response
SHOULD_RETRY_HEADER = "stripe-should-retry"


class RetryPolicy:
    """Decides whether to retry and computes delays between attempts.

    Args:
        max_retries: Maximum number of retries. Total attempts are
            ``max_retries + 1``.
        retry_status_codes: HTTP status codes that may be retried.
        initial_delay: Delay in seconds before the first retry, also the
            lower bound of every delay.
        max_delay: Cap in seconds on the backoff before jitter.
        jitter_factor: Factor for adding random jitter to delays.
        backoff_strategy: Optional custom strategy, replacing the default
            ``ExponentialBackoff(initial_delay, max_delay)``.

    Example:
        ```pycon
        >>> from arestripe.exceptions import StripeConnectionError, StripeInvalidRequestError
        >>> from arestripe.retry.policy import RetryPolicy
        >>> policy = RetryPolicy(max_retries=2, jitter_factor=0.0)
        >>> policy.should_retry(0, StripeConnectionError("reset"), "GET")
        True
        >>> policy.should_retry(2, StripeConnectionError("reset"), "GET")
        False
        >>> policy.should_retry(0, StripeInvalidRequestError("bad", http_status=400), "GET")
        False
        >>> policy.next_delay(1)
        1.0

        ```
    """

    def __init__(
        self,
        max_retries: int = 0,
        retry_status_codes: tuple[int, ...] = RETRY_STATUS_CODES,
        initial_delay: float = DEFAULT_INITIAL_NETWORK_RETRY_DELAY,
        max_delay: float = DEFAULT_MAX_NETWORK_RETRY_DELAY,
        jitter_factor: float = DEFAULT_JITTER_FACTOR,
        backoff_strategy: BaseBackoffStrategy | None = None,
    ) -> None:
        self.max_retries = max_retries
        self.retry_status_codes = retry_status_codes
        self.initial_delay = initial_delay
        self.jitter_factor = jitter_factor
        self.backoff_strategy: BaseBackoffStrategy = (
            backoff_strategy
            if backoff_strategy is not None
            else ExponentialBackoff(initial_delay=initial_delay, max_delay=max_delay)
        )

    @classmethod
    def from_config(cls, config: ClientConfig, max_retries: int | None = None) -> RetryPolicy:
        """Create a policy from a config snapshot."""
        return cls(
            max_retries=config.max_network_retries if max_retries is None else max_retries,
            retry_status_codes=config.retry_status_codes,
            initial_delay=config.initial_network_retry_delay,
            max_delay=config.max_network_retry_delay,
            jitter_factor=config.jitter_factor,
        )

    def should_retry(
        self,
        attempt_number: int,
        error: StripeError,
        method: str,
        *,
        has_idempotency_key: bool = True,
    ) -> bool:
        """Determine whether a failed attempt may be retried.

        Args:
            attempt_number: Number of retries already performed
                (0-indexed).
            error: The classified error of the failed attempt.
            method: The HTTP method of the operation.
            has_idempotency_key: Whether the operation carries an
                idempotency key. State-changing methods without one are
                never retried.

        Returns:
            True if another attempt should be made.
        """
        if attempt_number >= self.max_retries:
            logger.debug(f"{method}: not retrying, max retries ({self.max_retries}) exhausted")
            return False

        if is_state_changing(method) and not has_idempotency_key:
            logger.debug(f"{method}: not retrying, no idempotency key")
            return False

        should_retry_header = error.headers.get(SHOULD_RETRY_HEADER)
        if should_retry_header is not None:
            return should_retry_header == "true"

        if isinstance(error, (StripeConnectionError, StripeTimeoutError)):
            return True
        if isinstance(error, StripeIdempotencyError):
            return False
        return error.http_status is not None and error.http_status in self.retry_status_codes

    def next_delay(self, attempt_number: int, response: httpx.Response | None = None) -> float:
        """Calculate the delay before the next retry.

        Args:
            attempt_number: Number of retries already performed
                (0-indexed).
            response: The failed response, whose ``Retry-After`` header
                takes precedence over the backoff when present.

        Returns:
            Sleep time in seconds.
        """
        return calculate_sleep_time(
            attempt=attempt_number,
            jitter_factor=self.jitter_factor,
            response=response,
            backoff_strategy=self.backoff_strategy,
            min_wait_time=self.initial_delay,
        )
