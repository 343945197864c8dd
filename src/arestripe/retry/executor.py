r"""Asynchronous request executor for logical operations.

This module provides the RequestExecutor class that drives a
``LogicalOperation`` through its state machine: it builds the request,
sends attempts through an ``httpx.AsyncClient``, classifies failures, and
retries them with backoff while the retry policy allows it.
"""

from __future__ import annotations

__all__ = ["RequestExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING, NoReturn

import httpx

from arestripe.classifier import ErrorClassifier
from arestripe.exceptions import StripeAPIError, StripeTimeoutError
from arestripe.response import ResponseMetadata, StripeObject
from arestripe.retry.idempotency import IDEMPOTENCY_KEY_HEADER, idempotency_key_for
from arestripe.retry.manager import CallbackManager
from arestripe.retry.operation import OperationState
from arestripe.retry.policy import RetryPolicy
from arestripe.utils.encoding import encode_params

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from arestripe.core.config import ClientConfig
    from arestripe.exceptions import StripeError
    from arestripe.retry.operation import LogicalOperation
    from arestripe.user_agent import UserAgentBuilder

logger: logging.Logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class RequestExecutor:
    """Executes logical operations with automatic retry logic.

    The executor orchestrates the following components:
    - UserAgentBuilder: Computes the identification headers
    - ErrorClassifier: Turns failed responses and exceptions into typed errors
    - RetryPolicy: Decides whether to retry and how long to wait
    - CallbackManager: Invokes the lifecycle hooks of the config snapshot

    The transport, the sleep function and the clock are injectable so
    every transition can be exercised without network calls or real
    delays.

    Args:
        transport: Client used to send attempts.
        config: Read-only config snapshot of the operation.
        user_agent: Builder of the identification headers.
        sleep: Coroutine function used for backoff delays. Defaults to
            ``asyncio.sleep``.
        clock: Monotonic clock used to time attempts. Defaults to
            ``time.monotonic``.
        policy: Retry policy. Defaults to one built from ``config`` and
            the operation's ``max_retries``.
        classifier: Error classifier. Defaults to ``ErrorClassifier()``.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from arestripe.core.config import ClientConfig
        >>> from arestripe.retry import LogicalOperation, RequestExecutor
        >>> from arestripe.user_agent import UserAgentBuilder
        >>> async def main():
        ...     config = ClientConfig(api_key="sk_test_123", max_network_retries=2)
        ...     async with httpx.AsyncClient() as client:
        ...         executor = RequestExecutor(client, config, UserAgentBuilder())
        ...         operation = LogicalOperation(
        ...             method="POST", path="/v1/customers", params={"description": "Some customer"}
        ...         )
        ...         return await executor.execute(operation)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        transport: httpx.AsyncClient,
        config: ClientConfig,
        user_agent: UserAgentBuilder,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        clock: Callable[[], float] | None = None,
        policy: RetryPolicy | None = None,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        self.transport = transport
        self.config = config
        self.user_agent = user_agent
        self.policy = policy
        self.classifier = classifier if classifier is not None else ErrorClassifier()
        self.callbacks = CallbackManager(config)
        self._sleep = sleep if sleep is not None else asyncio.sleep
        self._clock = clock if clock is not None else time.monotonic

    async def execute(self, operation: LogicalOperation) -> StripeObject:
        """Execute a logical operation until a terminal outcome.

        The whole operation, attempts and backoff delays included, is
        bounded by the snapshot timeout. When it expires the in-flight
        attempt is cancelled and discarded.

        Args:
            operation: The operation to execute, in the CREATED state.

        Returns:
            The decoded response body, with ``last_response`` metadata.

        Raises:
            StripeError: The last classified error when the failure is
                not retryable or retries are exhausted, or a
                ``StripeTimeoutError`` when the timeout expires.
        """
        timeout = self.config.timeout / 1000
        try:
            return await asyncio.wait_for(self._run(operation), timeout)
        except asyncio.TimeoutError:
            operation.state = OperationState.FAILED_TERMINAL
            logger.debug(f"{operation.method} {operation.path}: timed out after {timeout:.2f}s")
            msg = (
                f"Request {operation.method} {operation.path} did not complete within "
                f"{self.config.timeout}ms ({len(operation.attempts)} attempts)"
            )
            raise StripeTimeoutError(message=msg) from None

    async def build_headers(self, operation: LogicalOperation) -> dict[str, str]:
        """Compute the headers shared by every attempt of an operation.

        The idempotency key is assigned here, once per operation.
        """
        headers = {
            "Accept": "application/json",
            "Content-Type": FORM_CONTENT_TYPE,
            "User-Agent": self.user_agent.user_agent(),
            "X-Stripe-Client-User-Agent": await self.user_agent.client_user_agent(),
        }
        if self.config.auth is not None:
            headers["Authorization"] = self.config.auth
        if self.config.api_version is not None:
            headers["Stripe-Version"] = self.config.api_version
        idempotency_key = idempotency_key_for(operation)
        if idempotency_key is not None:
            headers[IDEMPOTENCY_KEY_HEADER] = idempotency_key
        headers.update(operation.headers)
        return headers

    def _prepare(self, operation: LogicalOperation) -> tuple[str, str | None]:
        url = f"{self.config.base_url}{operation.path}"
        encoded = encode_params(operation.params)
        if operation.method == "POST":
            return url, encoded
        if encoded:
            url = f"{url}?{encoded}"
        return url, None

    async def _run(self, operation: LogicalOperation) -> StripeObject:
        policy = self.policy or RetryPolicy.from_config(self.config, max_retries=operation.max_retries)
        headers = await self.build_headers(operation)
        url, body = self._prepare(operation)

        while True:
            operation.transition(OperationState.SENDING)
            attempt = operation.record_attempt(headers, body, started_at=self._clock())
            self.callbacks.on_request(operation, attempt.attempt_number)

            response: httpx.Response | None = None
            try:
                response = await self.transport.request(
                    operation.method,
                    url,
                    content=body,
                    headers=headers,
                    timeout=self.config.timeout / 1000,
                )
            except httpx.RequestError as exc:
                logger.debug(
                    f"{operation.method} {operation.path} encountered {type(exc).__name__} "
                    f"on attempt {attempt.attempt_number}: {exc}"
                )
                error = self.classifier.classify_exception(exc)
            else:
                metadata = ResponseMetadata.from_response(response, operation.idempotency_key)
                self.callbacks.on_response(
                    operation,
                    attempt.attempt_number,
                    response.status_code,
                    metadata.request_id,
                    self._clock() - attempt.started_at,
                )
                if 200 <= response.status_code < 300:
                    return self._succeed(operation, response, metadata)
                error = self.classifier.classify_response(response)

            if policy.should_retry(
                operation.retries_so_far,
                error,
                operation.method,
                has_idempotency_key=operation.idempotency_key is not None,
            ):
                operation.transition(OperationState.FAILED_RETRYABLE)
                delay = policy.next_delay(operation.retries_so_far, response)
                self.callbacks.on_retry(operation, delay, error)
                operation.retries_so_far += 1
                await self._sleep(delay)
                continue

            self._fail(operation, error)

    def _succeed(
        self, operation: LogicalOperation, response: httpx.Response, metadata: ResponseMetadata
    ) -> StripeObject:
        try:
            body = response.json()
        except ValueError:
            self._fail(
                operation,
                StripeAPIError(
                    message=(
                        f"Invalid JSON received from the Stripe API "
                        f"(HTTP response code was {response.status_code})"
                    ),
                    http_status=response.status_code,
                    request_id=metadata.request_id,
                    headers=metadata.headers,
                    json_body=response.text,
                ),
            )
        operation.transition(OperationState.SUCCEEDED)
        logger.debug(
            f"{operation.method} {operation.path} succeeded with status {response.status_code} "
            f"after {len(operation.attempts)} attempts"
        )
        return StripeObject(body if isinstance(body, dict) else {"data": body}, last_response=metadata)

    def _fail(self, operation: LogicalOperation, error: StripeError) -> NoReturn:
        operation.transition(OperationState.FAILED_TERMINAL)
        logger.debug(
            f"{operation.method} {operation.path} failed with {error.type} "
            f"after {len(operation.attempts)} attempts"
        )
        raise error
