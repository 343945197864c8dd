r"""Bounded exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from arestripe.backoff.base import BaseBackoffStrategy
from arestripe.core.config import (
    DEFAULT_INITIAL_NETWORK_RETRY_DELAY,
    DEFAULT_MAX_NETWORK_RETRY_DELAY,
)


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff: ``initial_delay * (2 ** attempt)`` capped at
    ``max_delay``.

    Args:
        initial_delay: Delay in seconds before the first retry.
        max_delay: Upper bound in seconds on any single delay.

    Example:
        ```pycon
        >>> from arestripe.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(initial_delay=0.5, max_delay=2.0)
        >>> [backoff.calculate(attempt) for attempt in range(4)]
        [0.5, 1.0, 2.0, 2.0]

        ```
    """

    def __init__(
        self,
        initial_delay: float = DEFAULT_INITIAL_NETWORK_RETRY_DELAY,
        max_delay: float | None = DEFAULT_MAX_NETWORK_RETRY_DELAY,
    ) -> None:
        if initial_delay < 0:
            msg = f"initial_delay must be non-negative, got {initial_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.initial_delay = initial_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{type(self).__name__}(initial_delay={self.initial_delay}, max_delay={self.max_delay})"

    def calculate(self, attempt: int) -> float:
        delay = self.initial_delay * (2**attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
