r"""Delivery of a logical operation's outcome to the caller.

A call either returns an awaitable future, or takes a ``callback`` invoked
as ``callback(error, result)``. Both styles sit on one internal
``Completion`` contract with ``resolve``/``reject``, which delivers at
most once. The executor never knows which style the caller chose.

Example:
    ```pycon
    >>> import asyncio
    >>> from arestripe.completion import CompletionDispatcher
    >>> async def compute():
    ...     return 42
    ...
    >>> async def main():
    ...     dispatcher = CompletionDispatcher()
    ...     value = await dispatcher.dispatch(compute())
    ...     results = []
    ...     await dispatcher.dispatch(compute(), callback=lambda err, res: results.append((err, res)))
    ...     return value, results
    ...
    >>> asyncio.run(main())
    (42, [(None, 42)])

    ```
"""

from __future__ import annotations

__all__ = ["CallbackCompletion", "Completion", "CompletionDispatcher", "FutureCompletion"]

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

logger: logging.Logger = logging.getLogger(__name__)


class Completion(ABC):
    """Single-delivery completion handle."""

    def __init__(self) -> None:
        self._delivered = False

    @property
    def delivered(self) -> bool:
        return self._delivered

    def resolve(self, value: Any) -> None:
        """Deliver a successful result, unless an outcome was already
        delivered."""
        if self._claim():
            self._on_resolve(value)

    def reject(self, error: BaseException) -> None:
        """Deliver an error, unless an outcome was already delivered."""
        if self._claim():
            self._on_reject(error)

    def _claim(self) -> bool:
        if self._delivered:
            logger.debug(f"{type(self).__name__}: dropping outcome after first delivery")
            return False
        self._delivered = True
        return True

    @abstractmethod
    def _on_resolve(self, value: Any) -> None:
        """Hand a result to the caller."""

    @abstractmethod
    def _on_reject(self, error: BaseException) -> None:
        """Hand an error to the caller."""


class FutureCompletion(Completion):
    """Fulfills or rejects an ``asyncio.Future``.

    Args:
        future: The future returned to the caller.
    """

    def __init__(self, future: asyncio.Future[Any]) -> None:
        super().__init__()
        self.future = future

    def _on_resolve(self, value: Any) -> None:
        if not self.future.done():
            self.future.set_result(value)

    def _on_reject(self, error: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(error)


class CallbackCompletion(Completion):
    """Invokes ``callback(error, result)``.

    Args:
        callback: The caller's callback. Exactly one of ``error`` and
            ``result`` is not None.
    """

    def __init__(self, callback: Callable[[BaseException | None, Any], None]) -> None:
        super().__init__()
        self.callback = callback

    def _on_resolve(self, value: Any) -> None:
        self.callback(None, value)

    def _on_reject(self, error: BaseException) -> None:
        self.callback(error, None)


class CompletionDispatcher:
    """Runs operation coroutines as tasks and delivers their outcome.

    The dispatcher keeps a reference to every pending task until it
    finishes.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(
        self,
        coro: Coroutine[Any, Any, Any],
        callback: Callable[[BaseException | None, Any], None] | None = None,
    ) -> asyncio.Future[Any]:
        """Schedule ``coro`` and route its outcome to the caller.

        Errors raised by ``coro`` are never raised from this call. They
        reject the returned future, or are passed to ``callback``.

        Args:
            coro: Coroutine executing the logical operation.
            callback: Optional ``callback(error, result)``.

        Returns:
            Without a callback, a future resolving to the result. With a
            callback, an awaitable resolving to None once the callback
            has been invoked.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise
        if callback is None:
            future: asyncio.Future[Any] = loop.create_future()
            completion: Completion = FutureCompletion(future)
            self._spawn(loop, coro, completion)
            return future
        return self._spawn(loop, coro, CallbackCompletion(callback))

    def _spawn(
        self,
        loop: asyncio.AbstractEventLoop,
        coro: Coroutine[Any, Any, Any],
        completion: Completion,
    ) -> asyncio.Task[None]:
        task = loop.create_task(self._run(coro, completion))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @staticmethod
    async def _run(coro: Coroutine[Any, Any, Any], completion: Completion) -> None:
        try:
            value = await coro
        except asyncio.CancelledError as exc:
            completion.reject(exc)
            raise
        except Exception as exc:  # noqa: BLE001
            completion.reject(exc)
        else:
            completion.resolve(value)
