r"""Declarative resource methods and per-request options.

A resource declares each of its operations as a ``StripeMethod`` holding
an HTTP method and a path template relative to the API base path. URL
arguments in the template (e.g. ``{id}``) are filled positionally from
the call, so ``client.customers.retrieve("cus_123")`` sends
``GET /v1/customers/cus_123``.
"""

from __future__ import annotations

__all__ = ["RequestOptions", "StripeMethod", "StripeResource"]

import functools
import re
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable, Mapping

    from arestripe.client import Stripe

_URL_ARG = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class RequestOptions:
    """Per-request overrides of the client settings.

    Options left to None fall back to the client's config snapshot.

    Args:
        api_key: API key used instead of the client's key.
        idempotency_key: Caller-chosen idempotency key, reused by every
            retry of the operation.
        stripe_account: Connected account, sent as the
            ``Stripe-Account`` header.
        stripe_version: API version used instead of the client's version.
        max_network_retries: Maximum number of retries for this call.
        timeout: Timeout in milliseconds for this call.

    Example:
        ```pycon
        >>> from arestripe.resources import RequestOptions
        >>> RequestOptions.coerce({"idempotency_key": "order-42"}).idempotency_key
        'order-42'

        ```
    """

    api_key: str | None = None
    idempotency_key: str | None = None
    stripe_account: str | None = None
    stripe_version: str | None = None
    max_network_retries: int | None = None
    timeout: float | None = None

    @classmethod
    def coerce(cls, options: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        """Normalize the ``options`` argument of a resource call.

        Raises:
            TypeError: If ``options`` is neither a ``RequestOptions`` nor a
                mapping, or holds unknown keys.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not hasattr(options, "keys"):
            msg = f"options must be a RequestOptions or a mapping, got {type(options).__name__}"
            raise TypeError(msg)
        unknown = set(options.keys()) - {f.name for f in fields(cls)}
        if unknown:
            msg = f"unknown request options: {', '.join(sorted(unknown))}"
            raise TypeError(msg)
        return cls(**options)


class StripeMethod:
    """A resource operation bound to an HTTP method and a path template.

    Calling it as ``resource.method(*url_args, params=None, options=None,
    *, callback=None)`` starts one logical operation. ``params`` and
    ``options`` may also be passed positionally after the URL arguments,
    and a trailing callable is taken as the callback.

    Args:
        method: The HTTP method.
        path: Path template relative to the API base path.
    """

    def __init__(self, method: str, path: str) -> None:
        self.method = method.upper()
        self.path = path
        self.url_args = tuple(_URL_ARG.findall(path))
        self.name = "<unbound>"

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = f"{owner.__name__}.{name}"

    def __get__(self, instance: StripeResource | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return functools.partial(self.call, instance)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.method!r}, {self.path!r})"

    def render_path(self, *args: Any) -> str:
        """Fill the URL arguments of the path template.

        Raises:
            TypeError: If a URL argument is missing or empty.
        """
        if len(args) < len(self.url_args):
            missing = ", ".join(repr(name) for name in self.url_args[len(args) :])
            msg = f"{self.name}() missing required URL argument(s): {missing}"
            raise TypeError(msg)
        values = dict(zip(self.url_args, args))
        for name, value in values.items():
            if value is None or value == "":
                msg = f"{self.name}() URL argument {name!r} must be a non-empty string"
                raise TypeError(msg)
        return _URL_ARG.sub(lambda match: quote(str(values[match.group(1)]), safe=""), self.path)

    def call(
        self,
        resource: StripeResource,
        *args: Any,
        params: Mapping[str, Any] | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
        callback: Callable[[BaseException | None, Any], None] | None = None,
    ) -> asyncio.Future[Any]:
        extra = list(args[len(self.url_args) :])
        if extra and callable(extra[-1]) and callback is None:
            callback = extra.pop()
        if len(extra) > 2:
            msg = f"{self.name}() takes at most 2 arguments after the URL arguments ({len(extra)} given)"
            raise TypeError(msg)
        if extra:
            params = extra[0] if params is None else params
        if len(extra) == 2:
            options = extra[1] if options is None else options

        path = self.render_path(*args[: len(self.url_args)])
        return resource.client.request(self.method, path, params, options, callback=callback)


class StripeResource:
    """Base class of the API resources exposed on a client.

    Args:
        client: The client issuing the requests.
    """

    def __init__(self, client: Stripe) -> None:
        self.client = client

    def __repr__(self) -> str:
        methods = sorted(
            name for name, value in vars(type(self)).items() if isinstance(value, StripeMethod)
        )
        return f"{self.__class__.__name__}(methods={methods})"
