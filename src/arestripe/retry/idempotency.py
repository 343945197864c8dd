r"""Idempotency keys for state-changing requests."""

from __future__ import annotations

__all__ = ["IDEMPOTENCY_KEY_HEADER", "STATE_CHANGING_METHODS", "idempotency_key_for", "is_state_changing"]

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arestripe.retry.operation import LogicalOperation

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"

STATE_CHANGING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def is_state_changing(method: str) -> bool:
    return method.upper() in STATE_CHANGING_METHODS


def idempotency_key_for(operation: LogicalOperation) -> str | None:
    """Return the idempotency key of a logical operation.

    The key is assigned the first time this is called for a
    state-changing operation and stored on it, so every retry sends the
    same key. A key already set (e.g. supplied by the caller) is kept.

    Args:
        operation: The logical operation.

    Returns:
        The key, or None for read-only methods without a caller key.

    Example:
        ```pycon
        >>> from arestripe.retry.idempotency import idempotency_key_for
        >>> from arestripe.retry.operation import LogicalOperation
        >>> operation = LogicalOperation(method="POST", path="/v1/charges")
        >>> key = idempotency_key_for(operation)
        >>> key == idempotency_key_for(operation)
        True
        >>> idempotency_key_for(LogicalOperation(method="GET", path="/v1/charges")) is None
        True

        ```
    """
    if operation.idempotency_key is None and is_state_changing(operation.method):
        operation.idempotency_key = str(uuid.uuid4())
    return operation.idempotency_key
