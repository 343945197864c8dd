r"""Successful results and the response metadata attached to them."""

from __future__ import annotations

__all__ = ["REQUEST_ID_HEADER", "REQUEST_ID_PATTERN", "ResponseMetadata", "StripeObject"]

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

REQUEST_ID_HEADER = "request-id"

# Request identifiers issued by the API look like ``req_1A2b3C``
REQUEST_ID_PATTERN = re.compile(r"^req_\w+$")


@dataclass(frozen=True)
class ResponseMetadata:
    """HTTP details of the response that produced a result.

    Attributes:
        status_code: The 2xx status code of the response.
        request_id: The upstream request identifier, if the response had
            one.
        headers: Snapshot of the response headers, with lowercase keys.
        idempotency_key: The idempotency key the request was sent with.
    """

    status_code: int
    request_id: str | None
    headers: dict[str, str] = field(default_factory=dict)
    idempotency_key: str | None = None

    @classmethod
    def from_response(
        cls, response: httpx.Response, idempotency_key: str | None = None
    ) -> ResponseMetadata:
        headers = {key.lower(): value for key, value in response.headers.items()}
        return cls(
            status_code=response.status_code,
            request_id=headers.get(REQUEST_ID_HEADER),
            headers=headers,
            idempotency_key=idempotency_key,
        )


class StripeObject(dict):
    """Decoded JSON payload of a successful response.

    Keys are accessible both as items and as attributes, and the HTTP
    details of the response are available as ``last_response``.

    Attribute access only falls back to keys that are not already
    attributes. Keys named like a ``dict`` method, such as ``items`` on a
    subscription or ``keys``, ``values`` and ``update``, must be read with
    item access: ``subscription["items"]``.

    Example:
        ```pycon
        >>> from arestripe.response import ResponseMetadata, StripeObject
        >>> customer = StripeObject(
        ...     {"id": "cus_123", "object": "customer"},
        ...     last_response=ResponseMetadata(status_code=200, request_id="req_abc"),
        ... )
        >>> customer.id
        'cus_123'
        >>> customer.last_response.request_id
        'req_abc'

        ```
    """

    def __init__(self, values: dict[str, Any] | None = None, *, last_response: ResponseMetadata) -> None:
        super().__init__(values or {})
        self.last_response = last_response

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {dict.__repr__(self)}>"
