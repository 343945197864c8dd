r"""Parameter validation for client configuration setters.

All functions in this module raise ``StripeConfigurationError``
synchronously so that invalid settings fail fast at the setter call.
"""

from __future__ import annotations

__all__ = ["validate_max_network_retries", "validate_retry_params", "validate_timeout"]

from typing import Any

from arestripe.exceptions import StripeConfigurationError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_timeout(timeout: Any) -> None:
    """Validate a request timeout expressed in milliseconds.

    Args:
        timeout: Timeout in milliseconds. Must be a number > 0.

    Raises:
        StripeConfigurationError: If timeout is not a number or is <= 0.

    Example:
        ```pycon
        >>> from arestripe.core.validation import validate_timeout
        >>> validate_timeout(80000)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        arestripe.exceptions.StripeConfigurationError: timeout must be > 0, got 0

        ```
    """
    if not _is_number(timeout):
        msg = f"timeout must be a number, got {timeout!r}"
        raise StripeConfigurationError(msg)
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise StripeConfigurationError(msg)


def validate_max_network_retries(max_network_retries: Any) -> None:
    """Validate the maximum number of network retries.

    Args:
        max_network_retries: Maximum number of retries. Must be an
            integer >= 0. ``bool`` and ``None`` are rejected.

    Raises:
        StripeConfigurationError: If the value is not an integer or is
            negative.

    Example:
        ```pycon
        >>> from arestripe.core.validation import validate_max_network_retries
        >>> validate_max_network_retries(2)
        >>> validate_max_network_retries("foo")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        arestripe.exceptions.StripeConfigurationError: maxNetworkRetries must be a number

        ```
    """
    if not isinstance(max_network_retries, int) or isinstance(max_network_retries, bool):
        msg = "maxNetworkRetries must be a number"
        raise StripeConfigurationError(msg)
    if max_network_retries < 0:
        msg = f"maxNetworkRetries must be >= 0, got {max_network_retries}"
        raise StripeConfigurationError(msg)


def validate_retry_params(
    jitter_factor: float = 0.0,
    initial_delay: float = 0.0,
    max_delay: float | None = None,
) -> None:
    """Validate the backoff parameters of the retry policy.

    Args:
        jitter_factor: Factor for adding random jitter to backoff delays.
            Must be >= 0.
        initial_delay: Delay before the first retry, in seconds. Must be
            >= 0.
        max_delay: Maximum backoff delay in seconds. Must be > 0 if
            provided.

    Raises:
        StripeConfigurationError: If any parameter is out of range.
    """
    if jitter_factor < 0:
        msg = f"jitter_factor must be >= 0, got {jitter_factor}"
        raise StripeConfigurationError(msg)
    if initial_delay < 0:
        msg = f"initial_network_retry_delay must be >= 0, got {initial_delay}"
        raise StripeConfigurationError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_network_retry_delay must be > 0, got {max_delay}"
        raise StripeConfigurationError(msg)
