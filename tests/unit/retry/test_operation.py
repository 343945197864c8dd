r"""Unit tests for logical operations and their state machine."""

from __future__ import annotations

import pytest

from arestripe.retry import LogicalOperation, OperationState, RequestAttempt


def test_logical_operation_defaults() -> None:
    """Test the initial state of an operation."""
    operation = LogicalOperation(method="post", path="/v1/customers")
    assert operation.method == "POST"
    assert operation.params == {}
    assert operation.headers == {}
    assert operation.idempotency_key is None
    assert operation.max_retries == 0
    assert operation.retries_so_far == 0
    assert operation.state is OperationState.CREATED
    assert operation.attempts == []
    assert not operation.is_terminal


@pytest.mark.parametrize(
    "path",
    [
        [OperationState.SENDING, OperationState.SUCCEEDED],
        [OperationState.SENDING, OperationState.FAILED_TERMINAL],
        [
            OperationState.SENDING,
            OperationState.FAILED_RETRYABLE,
            OperationState.SENDING,
            OperationState.SUCCEEDED,
        ],
        [
            OperationState.SENDING,
            OperationState.FAILED_RETRYABLE,
            OperationState.FAILED_TERMINAL,
        ],
    ],
)
def test_logical_operation_valid_transitions(path: list[OperationState]) -> None:
    """Test the allowed paths through the state machine."""
    operation = LogicalOperation(method="GET", path="/v1/charges")
    for state in path:
        operation.transition(state)
    assert operation.state is path[-1]
    assert operation.is_terminal


@pytest.mark.parametrize(
    ("start", "target"),
    [
        (OperationState.CREATED, OperationState.SUCCEEDED),
        (OperationState.CREATED, OperationState.FAILED_RETRYABLE),
        (OperationState.SUCCEEDED, OperationState.SENDING),
        (OperationState.FAILED_TERMINAL, OperationState.SENDING),
        (OperationState.FAILED_RETRYABLE, OperationState.SUCCEEDED),
        (OperationState.SENDING, OperationState.SENDING),
    ],
)
def test_logical_operation_invalid_transitions(
    start: OperationState, target: OperationState
) -> None:
    """Test that terminal states are final and steps cannot be
    skipped."""
    operation = LogicalOperation(method="GET", path="/v1/charges", state=start)
    with pytest.raises(RuntimeError, match=r"invalid transition"):
        operation.transition(target)
    assert operation.state is start


def test_logical_operation_record_attempt() -> None:
    """Test that attempts are numbered and immutable."""
    operation = LogicalOperation(method="POST", path="/v1/charges")
    headers = {"Idempotency-Key": "key-1"}
    first = operation.record_attempt(headers, "amount=100", started_at=1.0)
    second = operation.record_attempt(headers, "amount=100", started_at=2.0)

    assert operation.attempts == [first, second]
    assert first == RequestAttempt(
        method="POST",
        path="/v1/charges",
        headers={"Idempotency-Key": "key-1"},
        body="amount=100",
        attempt_number=1,
        started_at=1.0,
    )
    assert second.attempt_number == 2
    assert first.headers is not headers
    with pytest.raises(AttributeError):
        first.body = "amount=200"  # type: ignore[misc]
