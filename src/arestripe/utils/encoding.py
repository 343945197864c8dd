r"""Form encoding of request parameters.

The remote API takes ``application/x-www-form-urlencoded`` bodies in which
nested structures use bracket notation, e.g. ``card[exp_month]=12`` and
``expand[0]=customer``.
"""

from __future__ import annotations

__all__ = ["encode_params", "flatten_params"]

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_params(params: Mapping[str, Any], parent_key: str | None = None) -> list[tuple[str, str]]:
    """Flatten nested params into ``(key, value)`` pairs with bracket
    keys.

    ``None`` values are skipped. An empty string is sent as-is so that
    callers can unset fields.

    Example:
        ```pycon
        >>> from arestripe.utils.encoding import flatten_params
        >>> flatten_params({"card": {"exp_month": 12}, "expand": ["customer"]})
        [('card[exp_month]', '12'), ('expand[0]', 'customer')]

        ```
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        full_key = key if parent_key is None else f"{parent_key}[{key}]"
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(flatten_params(value, full_key))
        elif isinstance(value, (list, tuple)):
            pairs.extend(flatten_params({str(i): item for i, item in enumerate(value)}, full_key))
        else:
            pairs.append((full_key, _format_value(value)))
    return pairs


def encode_params(params: Mapping[str, Any] | None) -> str:
    """Encode params as a form-urlencoded string.

    Example:
        ```pycon
        >>> from arestripe.utils.encoding import encode_params
        >>> encode_params({"description": "Some customer", "metadata": {"k": "v"}})
        'description=Some+customer&metadata%5Bk%5D=v'

        ```
    """
    if not params:
        return ""
    return urlencode(flatten_params(params))
