r"""Asynchronous Stripe API client.

This module provides the ``Stripe`` class, which holds the client
configuration, exposes the API resources, and runs every resource call as
an independent logical operation. The client owns an
``httpx.AsyncClient`` unless one is injected, and can be used as an async
context manager to close it.
"""

from __future__ import annotations

__all__ = ["Stripe"]

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import httpx

from arestripe.app_info import AppInfo
from arestripe.completion import CompletionDispatcher
from arestripe.core.config import DEFAULT_TIMEOUT, ClientConfig
from arestripe.core.validation import validate_max_network_retries
from arestripe.resources import Charges, Customers, Refunds, RequestOptions
from arestripe.retry import LogicalOperation, RequestExecutor, idempotency_key_for
from arestripe.user_agent import UserAgentBuilder

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable, Mapping
    from types import TracebackType
    from typing import Self

    from arestripe.user_agent import UnameCache

logger: logging.Logger = logging.getLogger(__name__)

# Fields readable through ``Stripe.get_api_field``
_API_FIELDS = {
    "auth": "auth",
    "api_key": "api_key",
    "host": "host",
    "port": "port",
    "protocol": "protocol",
    "base_path": "base_path",
    "version": "api_version",
    "timeout": "timeout",
    "max_network_retries": "max_network_retries",
}


class Stripe:
    r"""Asynchronous client for the Stripe API.

    Setters replace the client's ``ClientConfig`` instead of mutating it.
    Each call takes a snapshot of the config when it starts, so a setter
    only affects calls made after it.

    Args:
        api_key: Secret API key, sent as a bearer credential.
        api_version: Optional API version, sent as ``Stripe-Version``.
        config: Optional base configuration. ``api_key`` and
            ``api_version`` override its values when given.
        http_client: Optional ``httpx.AsyncClient`` to send requests
            with. The client does not close an injected transport.
        uname_cache: Optional cache of the ``uname -a`` lookup. Defaults
            to the process-wide cache.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arestripe import Stripe
        >>> async def main():
        ...     async with Stripe("sk_test_123") as stripe:
        ...         stripe.set_max_network_retries(2)
        ...         charge = await stripe.charges.create(
        ...             {"amount": 2000, "currency": "usd", "source": "tok_visa"}
        ...         )
        ...         return charge.last_response.request_id
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_version: str | None = None,
        *,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        uname_cache: UnameCache | None = None,
    ) -> None:
        base = config if config is not None else ClientConfig()
        self._config = base.merge(api_key=api_key, api_version=api_version)
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._uname_cache = uname_cache
        self._dispatcher = CompletionDispatcher()

        self.customers = Customers(self)
        self.charges = Charges(self)
        self.refunds = Refunds(self)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(host={self._config.host!r}, "
            f"api_version={self._config.api_version!r}, "
            f"max_network_retries={self._config.max_network_retries})"
        )

    async def __aenter__(self) -> Self:
        """Enter the async context manager.

        Returns:
            The client instance.
        """
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager and close the owned httpx
        client.

        Args:
            exc_type: Exception type if an exception occurred.
            exc_val: Exception value if an exception occurred.
            exc_tb: Exception traceback if an exception occurred.
        """
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this client created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    @property
    def config(self) -> ClientConfig:
        """The current configuration snapshot."""
        return self._config

    @property
    def app_info(self) -> dict[str, str] | None:
        """The sanitized application info, or None when unset."""
        if self._config.app_info is None:
            return None
        return self._config.app_info.to_dict()

    def set_api_key(self, api_key: str | None) -> None:
        self._config = replace(self._config, api_key=api_key)

    def set_api_version(self, api_version: str | None) -> None:
        self._config = replace(self._config, api_version=api_version)

    def set_host(self, host: str, port: int | None = None, protocol: str | None = None) -> None:
        """Point the client at another API host.

        Args:
            host: The host name.
            port: Optional port. The current port is kept when omitted.
            protocol: Optional ``http`` or ``https``. The current
                protocol is kept when omitted.
        """
        self._config = self._config.merge(host=host, port=port, protocol=protocol)

    def set_timeout(self, timeout: float | None = None) -> None:
        """Set the timeout in milliseconds of each logical operation.

        Args:
            timeout: The timeout, or None to restore ``DEFAULT_TIMEOUT``.

        Raises:
            StripeConfigurationError: If the timeout is not a positive
                number.
        """
        self._config = replace(self._config, timeout=DEFAULT_TIMEOUT if timeout is None else timeout)

    def set_max_network_retries(self, max_network_retries: Any = None) -> None:
        """Set how many times a failed operation may be retried.

        Raises:
            StripeConfigurationError: If the value is not an integer >= 0.
        """
        validate_max_network_retries(max_network_retries)
        self._config = replace(self._config, max_network_retries=max_network_retries)

    def set_app_info(self, info: Mapping[str, Any] | None = None) -> None:
        """Describe the application embedding the client.

        Only the ``name``, ``version``, ``url`` and ``partner_id`` keys
        are kept.

        Args:
            info: The application info, or None to clear it.

        Raises:
            StripeConfigurationError: If ``info`` has no ``name``.
        """
        app_info = None if info is None else AppInfo.from_mapping(info)
        self._config = replace(self._config, app_info=app_info)

    def get_api_field(self, name: str) -> Any:
        """Return a configuration field by name.

        ``"auth"`` returns the ``Authorization`` header value and
        ``"version"`` the API version.

        Raises:
            KeyError: If the field name is unknown.
        """
        if name not in _API_FIELDS:
            msg = f"unknown API field {name!r}, expected one of {sorted(_API_FIELDS)}"
            raise KeyError(msg)
        return getattr(self._config, _API_FIELDS[name])

    def get_max_network_retries(self) -> int:
        return self._config.max_network_retries

    def get_app_info_as_string(self) -> str:
        """Return the application info as ``name/version (url)``, or an
        empty string when unset."""
        if self._config.app_info is None:
            return ""
        return self._config.app_info.as_string()

    async def get_client_user_agent(self) -> str:
        """Return the ``X-Stripe-Client-User-Agent`` header value."""
        return await self._user_agent(self._config).client_user_agent()

    async def get_client_user_agent_seeded(self, seed: Mapping[str, Any]) -> str:
        """Serialize ``seed`` as a client user-agent record.

        The uname and application fields are added to ``seed``, and every
        top-level value is percent-encoded.
        """
        return await self._user_agent(self._config).seeded(seed)

    def _user_agent(self, config: ClientConfig) -> UserAgentBuilder:
        return UserAgentBuilder(app_info=config.app_info, uname_cache=self._uname_cache)

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
        *,
        callback: Callable[[BaseException | None, Any], None] | None = None,
    ) -> asyncio.Future[Any]:
        """Start one logical operation.

        Must be called from a running event loop. Failures of the
        operation are never raised here: they reject the returned future
        or are passed to ``callback``.

        Args:
            method: The HTTP method.
            path: Path relative to the API base path.
            params: Request parameters.
            options: Per-request overrides.
            callback: Optional ``callback(error, result)``.

        Returns:
            Without a callback, a future resolving to a ``StripeObject``.
            With a callback, an awaitable resolving to None once the
            callback has been invoked.

        Raises:
            TypeError: If ``options`` is malformed.
            StripeConfigurationError: If an option value is invalid.
        """
        opts = RequestOptions.coerce(options)
        config = self._config.merge(
            api_key=opts.api_key,
            api_version=opts.stripe_version,
            max_network_retries=opts.max_network_retries,
            timeout=opts.timeout,
        )
        headers = {}
        if opts.stripe_account is not None:
            headers["Stripe-Account"] = opts.stripe_account

        operation = LogicalOperation(
            method=method,
            path=f"{config.base_path}{path.lstrip('/')}",
            params=dict(params) if params is not None else {},
            headers=headers,
            idempotency_key=opts.idempotency_key,
            max_retries=config.max_network_retries,
        )
        idempotency_key_for(operation)
        logger.debug(
            f"{operation.method} {operation.path}: starting with max_retries={operation.max_retries}"
        )
        executor = RequestExecutor(self._ensure_client(), config, self._user_agent(config))
        return self._dispatcher.dispatch(executor.execute(operation), callback)
