r"""Sleep time calculation for retries of a logical operation."""

from __future__ import annotations

__all__ = ["calculate_sleep_time"]

import logging
import random
from typing import TYPE_CHECKING

from arestripe.backoff.exponential import ExponentialBackoff
from arestripe.utils.retry_after import parse_retry_after

if TYPE_CHECKING:
    import httpx

    from arestripe.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(
    attempt: int,
    jitter_factor: float,
    response: httpx.Response | None = None,
    backoff_strategy: BaseBackoffStrategy | None = None,
    min_wait_time: float = 0.0,
) -> float:
    """Calculate the sleep time before a retry.

    The sleep time is calculated as follows:
    1. A valid Retry-After header on the response wins; otherwise
       ``backoff_strategy.calculate(attempt)`` is used.
    2. Jitter is added: ``random.uniform(0, jitter_factor) * sleep_time``.
    3. The result is floored at ``min_wait_time``.

    Args:
        attempt: Number of retries already performed (0-indexed).
        jitter_factor: Factor for adding random jitter. 0 disables jitter.
        response: The failed HTTP response, if any.
        backoff_strategy: Strategy to use. Defaults to
            ``ExponentialBackoff()``.
        min_wait_time: Lower bound on the returned value.

    Returns:
        The sleep time in seconds.

    Example:
        ```pycon
        >>> from arestripe.utils.sleep import calculate_sleep_time
        >>> calculate_sleep_time(attempt=0, jitter_factor=0.0)
        0.5
        >>> calculate_sleep_time(attempt=5, jitter_factor=0.0)
        2.0

        ```
    """
    retry_after_sleep: float | None = None
    if response is not None:
        retry_after_sleep = parse_retry_after(response.headers.get("Retry-After"))

    if retry_after_sleep is not None:
        sleep_time = retry_after_sleep
        logger.debug(f"Using Retry-After header value: {sleep_time:.2f}s")
    else:
        if backoff_strategy is None:
            backoff_strategy = ExponentialBackoff()
        sleep_time = backoff_strategy.calculate(attempt)

    if jitter_factor > 0:
        sleep_time += random.uniform(0, jitter_factor) * sleep_time  # noqa: S311

    total_sleep_time = max(sleep_time, min_wait_time)
    logger.debug(f"Waiting {total_sleep_time:.2f}s before retry")
    return total_sleep_time
