r"""Retry-After header parsing utilities.

The remote service may tell a client how long to wait after a rate
limited or unavailable response. This module parses that hint according
to RFC 7231.
"""

from __future__ import annotations

__all__ = ["MAX_RETRY_AFTER", "parse_retry_after"]

import logging
import math
from contextlib import suppress
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger: logging.Logger = logging.getLogger(__name__)

# Retry-After values above this many seconds are ignored
MAX_RETRY_AFTER = 60.0


def parse_retry_after(retry_after_header: str | None) -> float | None:
    """Parse the Retry-After header value from an HTTP response.

    Two formats are accepted: a number of seconds (``"120"``) and an
    HTTP-date (``"Wed, 21 Oct 2015 07:28:00 GMT"``).

    Args:
        retry_after_header: The header value, or None if absent.

    Returns:
        The number of seconds to wait, or None if the header is absent,
        unparseable, not finite, or larger than ``MAX_RETRY_AFTER``. Dates
        in the past are clamped to 0.0.

    Example:
        ```pycon
        >>> from arestripe.utils import parse_retry_after
        >>> parse_retry_after("2")
        2.0
        >>> parse_retry_after("3600") is None
        True
        >>> parse_retry_after("invalid") is None
        True

        ```
    """
    if retry_after_header is None:
        return None

    seconds: float | None = None
    with suppress(ValueError):
        seconds = float(retry_after_header)

    if seconds is None:
        try:
            retry_date: datetime = parsedate_to_datetime(retry_after_header)
        except (ValueError, TypeError, OverflowError):
            logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
            return None
        seconds = max(0.0, (retry_date - datetime.now(timezone.utc)).total_seconds())

    if not math.isfinite(seconds) or seconds < 0 or seconds > MAX_RETRY_AFTER:
        logger.debug(f"Ignoring out-of-range Retry-After header: {retry_after_header!r}")
        return None
    return seconds
