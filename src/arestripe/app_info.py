r"""Application metadata describing the program embedding the client."""

from __future__ import annotations

__all__ = ["APP_INFO_PROPERTIES", "AppInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from arestripe.exceptions import StripeConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

APP_INFO_PROPERTIES = ("name", "version", "url", "partner_id")


@dataclass(frozen=True)
class AppInfo:
    """Identification of the application embedding the client.

    Args:
        name: Application name. Required and non-empty.
        version: Optional application version.
        url: Optional application URL.
        partner_id: Optional Stripe partner identifier.

    Example:
        ```pycon
        >>> from arestripe.app_info import AppInfo
        >>> info = AppInfo.from_mapping({"name": "MyApp", "version": "1.2", "cats": 42})
        >>> info.to_dict()
        {'name': 'MyApp', 'version': '1.2'}
        >>> info.as_string()
        'MyApp/1.2'

        ```
    """

    name: str
    version: str | None = None
    url: str | None = None
    partner_id: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            msg = "AppInfo.name is required"
            raise StripeConfigurationError(msg)

    @classmethod
    def from_mapping(cls, info: Mapping[str, Any]) -> AppInfo:
        """Create an ``AppInfo`` from a mapping, dropping unknown keys.

        Args:
            info: Mapping with a required ``name`` and optional
                ``version``, ``url`` and ``partner_id`` keys.

        Returns:
            The sanitized application info.

        Raises:
            StripeConfigurationError: If ``info`` is not a mapping or has
                no non-empty ``name``.
        """
        if not hasattr(info, "get"):
            msg = "AppInfo must be an object."
            raise StripeConfigurationError(msg)
        if not info.get("name"):
            msg = "AppInfo.name is required"
            raise StripeConfigurationError(msg)
        return cls(**{key: info[key] for key in APP_INFO_PROPERTIES if key in info})

    def to_dict(self) -> dict[str, str]:
        """Return the fields that are set, in declaration order."""
        return {
            key: getattr(self, key)
            for key in APP_INFO_PROPERTIES
            if getattr(self, key) is not None
        }

    def as_string(self) -> str:
        """Format the info as ``name[/version][ (url)]`` for the
        ``User-Agent`` header."""
        formatted = self.name
        if self.version:
            formatted += f"/{self.version}"
        if self.url:
            formatted += f" ({self.url})"
        return formatted
