r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Computes how long to wait before the next retry of a logical
    operation."""

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the delay before a retry.

        Args:
            attempt: Number of retries already performed (0-indexed), so
                attempt=0 is the delay before the first retry.

        Returns:
            The delay in seconds, before jitter.
        """
