r"""Configuration dataclass and defaults for the Stripe client.

This module provides configuration constants and a frozen dataclass
holding everything a logical operation reads from the client. Setters on
``arestripe.Stripe`` replace the config object instead of mutating it,
so every operation works against the snapshot it was created with.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_PATH",
    "DEFAULT_HOST",
    "DEFAULT_INITIAL_NETWORK_RETRY_DELAY",
    "DEFAULT_JITTER_FACTOR",
    "DEFAULT_MAX_NETWORK_RETRIES",
    "DEFAULT_MAX_NETWORK_RETRY_DELAY",
    "DEFAULT_PORT",
    "DEFAULT_PROTOCOL",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ClientConfig",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from arestripe.core.validation import (
    validate_max_network_retries,
    validate_retry_params,
    validate_timeout,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from arestripe.app_info import AppInfo
    from arestripe.events import RequestEvent, ResponseEvent, RetryEvent


DEFAULT_HOST = "api.stripe.com"
DEFAULT_PORT = 443
DEFAULT_PROTOCOL = "https"
DEFAULT_BASE_PATH = "/v1/"

# ``None`` lets the account's default API version apply
DEFAULT_API_VERSION: str | None = None

# Default timeout in milliseconds for a whole logical operation
DEFAULT_TIMEOUT = 80_000

# Retries are opt-in: total attempts = max_network_retries + 1
DEFAULT_MAX_NETWORK_RETRIES = 0

# Backoff in seconds: 0.5s, 1s, 2s, 2s, ... before jitter
DEFAULT_INITIAL_NETWORK_RETRY_DELAY = 0.5
DEFAULT_MAX_NETWORK_RETRY_DELAY = 2.0

# Up to 50% extra random delay on top of the backoff
DEFAULT_JITTER_FACTOR = 0.5

# HTTP status codes that may be retried
# 409: Conflict - concurrent update on the same object
# 429: Too Many Requests - rate limiting
# 500, 502, 503, 504: transient upstream failures
RETRY_STATUS_CODES = (409, 429, 500, 502, 503, 504)


@dataclass(frozen=True)
class ClientConfig:
    """Read-only configuration snapshot for a Stripe client.

    Args:
        api_key: Secret API key used as a bearer credential.
        api_version: Value of the ``Stripe-Version`` header, or ``None``.
        timeout: Timeout in milliseconds bounding a whole logical
            operation, including retries and backoff delays.
        max_network_retries: Maximum number of retries per logical
            operation. Must be an integer >= 0.
        app_info: Optional application metadata.
        host: API host name.
        port: API port.
        protocol: ``https`` or ``http``.
        base_path: Path prefix prepended to every resource path.
        retry_status_codes: HTTP status codes that may be retried.
        initial_network_retry_delay: Delay in seconds before the first
            retry.
        max_network_retry_delay: Cap in seconds on a single backoff delay.
        jitter_factor: Factor for adding random jitter to backoff delays.
        on_request: Optional callback invoked before each attempt.
        on_response: Optional callback invoked after each response.
        on_retry: Optional callback invoked before each backoff sleep.

    Example:
        ```pycon
        >>> from arestripe.core.config import ClientConfig
        >>> config = ClientConfig(api_key="sk_test_123")
        >>> config.max_network_retries
        0
        >>> config.merge(max_network_retries=2).max_network_retries
        2
        >>> config.max_network_retries  # Original unchanged
        0

        ```
    """

    api_key: str | None = None
    api_version: str | None = DEFAULT_API_VERSION
    timeout: float = DEFAULT_TIMEOUT
    max_network_retries: int = DEFAULT_MAX_NETWORK_RETRIES
    app_info: AppInfo | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    protocol: str = DEFAULT_PROTOCOL
    base_path: str = DEFAULT_BASE_PATH
    retry_status_codes: tuple[int, ...] = field(default_factory=lambda: RETRY_STATUS_CODES)
    initial_network_retry_delay: float = DEFAULT_INITIAL_NETWORK_RETRY_DELAY
    max_network_retry_delay: float = DEFAULT_MAX_NETWORK_RETRY_DELAY
    jitter_factor: float = DEFAULT_JITTER_FACTOR
    on_request: Callable[[RequestEvent], None] | None = None
    on_response: Callable[[ResponseEvent], None] | None = None
    on_retry: Callable[[RetryEvent], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            StripeConfigurationError: If any parameter fails validation.
        """
        validate_timeout(self.timeout)
        validate_max_network_retries(self.max_network_retries)
        validate_retry_params(
            jitter_factor=self.jitter_factor,
            initial_delay=self.initial_network_retry_delay,
            max_delay=self.max_network_retry_delay,
        )

    @property
    def base_url(self) -> str:
        """Scheme, host and port of the API endpoint."""
        return f"{self.protocol}://{self.host}:{self.port}"

    @property
    def auth(self) -> str | None:
        """Value of the ``Authorization`` header."""
        if self.api_key is None:
            return None
        return f"Bearer {self.api_key}"

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied, so per-request options
        that were not given leave the client settings in place.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
