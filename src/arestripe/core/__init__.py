r"""Core configuration and validation shared by the client and the
request executor."""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_NETWORK_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ClientConfig",
    "validate_max_network_retries",
    "validate_retry_params",
    "validate_timeout",
]

from arestripe.core.config import (
    DEFAULT_MAX_NETWORK_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    ClientConfig,
)
from arestripe.core.validation import (
    validate_max_network_retries,
    validate_retry_params,
    validate_timeout,
)
