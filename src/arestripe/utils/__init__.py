r"""Helpers for request encoding and retry sleep calculation."""

from __future__ import annotations

__all__ = [
    "MAX_RETRY_AFTER",
    "calculate_sleep_time",
    "encode_params",
    "flatten_params",
    "parse_retry_after",
]

from arestripe.utils.encoding import encode_params, flatten_params
from arestripe.utils.retry_after import MAX_RETRY_AFTER, parse_retry_after
from arestripe.utils.sleep import calculate_sleep_time
