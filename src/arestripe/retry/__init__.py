r"""Retry package: logical operations, retry policy and the request
executor.

Public API:
    - LogicalOperation: One caller-visible API call
    - OperationState: Lifecycle states of a logical operation
    - RequestAttempt: One physical HTTP call
    - RetryPolicy: Retry eligibility and backoff delays
    - CallbackManager: Invokes lifecycle hooks
    - RequestExecutor: Drives an operation to a terminal outcome
    - idempotency_key_for: Idempotency key of an operation
"""

from __future__ import annotations

__all__ = [
    "CallbackManager",
    "LogicalOperation",
    "OperationState",
    "RequestAttempt",
    "RequestExecutor",
    "RetryPolicy",
    "idempotency_key_for",
]

from arestripe.retry.executor import RequestExecutor
from arestripe.retry.idempotency import idempotency_key_for
from arestripe.retry.manager import CallbackManager
from arestripe.retry.operation import LogicalOperation, OperationState, RequestAttempt
from arestripe.retry.policy import RetryPolicy
