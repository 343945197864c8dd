r"""Logical operations and the physical attempts that back them."""

from __future__ import annotations

__all__ = ["LogicalOperation", "OperationState", "RequestAttempt"]

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OperationState(Enum):
    r"""Lifecycle of a logical operation.

    ``CREATED -> SENDING -> (SUCCEEDED | FAILED_RETRYABLE -> SENDING | FAILED_TERMINAL)``
    """

    CREATED = "created"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED_RETRYABLE = "failed_retryable"
    FAILED_TERMINAL = "failed_terminal"


_TRANSITIONS: dict[OperationState, frozenset[OperationState]] = {
    OperationState.CREATED: frozenset({OperationState.SENDING}),
    OperationState.SENDING: frozenset(
        {
            OperationState.SUCCEEDED,
            OperationState.FAILED_RETRYABLE,
            OperationState.FAILED_TERMINAL,
        }
    ),
    OperationState.FAILED_RETRYABLE: frozenset(
        {OperationState.SENDING, OperationState.FAILED_TERMINAL}
    ),
    OperationState.SUCCEEDED: frozenset(),
    OperationState.FAILED_TERMINAL: frozenset(),
}


@dataclass(frozen=True)
class RequestAttempt:
    """One physical HTTP call, immutable once sent.

    Attributes:
        method: The HTTP method.
        path: The request path, including the base path.
        headers: Headers sent with the attempt.
        body: The encoded request body, or None.
        attempt_number: 1-indexed number of the attempt.
        started_at: Clock value when the attempt was sent.
    """

    method: str
    path: str
    headers: dict[str, str]
    body: str | None
    attempt_number: int
    started_at: float


@dataclass
class LogicalOperation:
    """One caller-visible API call, backed by one or more attempts.

    Args:
        method: The HTTP method (e.g., "POST").
        path: The request path, including the base path.
        params: Request parameters, sent as the form body for POST and
            as the query string otherwise.
        headers: Per-call extra headers (e.g., ``Stripe-Account``).
        idempotency_key: Key reused verbatim by every attempt, or None.
        max_retries: Maximum number of retries of this operation.

    Example:
        ```pycon
        >>> from arestripe.retry.operation import LogicalOperation, OperationState
        >>> operation = LogicalOperation(method="GET", path="/v1/customers/cus_123")
        >>> operation.state
        <OperationState.CREATED: 'created'>
        >>> operation.transition(OperationState.SENDING)
        >>> operation.state
        <OperationState.SENDING: 'sending'>

        ```
    """

    method: str
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    idempotency_key: str | None = None
    max_retries: int = 0
    retries_so_far: int = 0
    state: OperationState = OperationState.CREATED
    attempts: list[RequestAttempt] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @property
    def is_terminal(self) -> bool:
        return self.state in (OperationState.SUCCEEDED, OperationState.FAILED_TERMINAL)

    def transition(self, state: OperationState) -> None:
        """Move to ``state``.

        Raises:
            RuntimeError: If the transition is not allowed from the
                current state.
        """
        if state not in _TRANSITIONS[self.state]:
            msg = f"invalid transition {self.state.name} -> {state.name}"
            raise RuntimeError(msg)
        self.state = state

    def record_attempt(self, headers: dict[str, str], body: str | None, started_at: float) -> RequestAttempt:
        """Record a new physical attempt and return it."""
        attempt = RequestAttempt(
            method=self.method,
            path=self.path,
            headers=dict(headers),
            body=body,
            attempt_number=len(self.attempts) + 1,
            started_at=started_at,
        )
        self.attempts.append(attempt)
        return attempt
