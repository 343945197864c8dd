r"""Callback manager for logical operation lifecycle events.

This module provides the CallbackManager class that builds event objects
and invokes the hooks configured on a ``ClientConfig`` snapshot.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import logging
from typing import TYPE_CHECKING

from arestripe.events import RequestEvent, ResponseEvent, RetryEvent

if TYPE_CHECKING:
    from arestripe.core.config import ClientConfig
    from arestripe.retry.operation import LogicalOperation

logger: logging.Logger = logging.getLogger(__name__)


class CallbackManager:
    """Invokes the on_request, on_response and on_retry hooks.

    Attributes:
        config: Snapshot holding the hooks. Hooks left to None are
            skipped.
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config

    def on_request(self, operation: LogicalOperation, attempt: int) -> None:
        """Invoke on_request before an attempt.

        Args:
            operation: The logical operation.
            attempt: The attempt number (1-indexed).
        """
        if self.config.on_request is not None:
            self.config.on_request(
                RequestEvent(
                    method=operation.method,
                    path=operation.path,
                    api_version=self.config.api_version,
                    idempotency_key=operation.idempotency_key,
                    attempt=attempt,
                    max_retries=operation.max_retries,
                )
            )

    def on_response(
        self,
        operation: LogicalOperation,
        attempt: int,
        status_code: int,
        request_id: str | None,
        elapsed: float,
    ) -> None:
        """Invoke on_response after a response was received.

        Args:
            operation: The logical operation.
            attempt: The attempt number (1-indexed).
            status_code: The HTTP status code.
            request_id: The upstream request identifier, if any.
            elapsed: Seconds the attempt took.
        """
        if self.config.on_response is not None:
            self.config.on_response(
                ResponseEvent(
                    method=operation.method,
                    path=operation.path,
                    status_code=status_code,
                    request_id=request_id,
                    attempt=attempt,
                    elapsed=elapsed,
                )
            )

    def on_retry(self, operation: LogicalOperation, wait_time: float, error: Exception) -> None:
        """Invoke on_retry before sleeping ahead of a retry.

        Args:
            operation: The logical operation, whose ``retries_so_far``
                has not yet been incremented.
            wait_time: Seconds about to be slept.
            error: The classified error that triggered the retry.
        """
        logger.debug(
            f"{operation.method} {operation.path}: retry {operation.retries_so_far + 1}/"
            f"{operation.max_retries} in {wait_time:.2f}s after {type(error).__name__}"
        )
        if self.config.on_retry is not None:
            self.config.on_retry(
                RetryEvent(
                    method=operation.method,
                    path=operation.path,
                    attempt=operation.retries_so_far + 2,
                    max_retries=operation.max_retries,
                    wait_time=wait_time,
                    error=error,
                )
            )
