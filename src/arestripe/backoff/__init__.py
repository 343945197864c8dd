r"""Backoff strategies for delays between retry attempts."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from arestripe.backoff.base import BaseBackoffStrategy
from arestripe.backoff.exponential import ExponentialBackoff
