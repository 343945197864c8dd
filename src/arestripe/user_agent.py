r"""Client identification sent with every request.

Two headers identify the client to the remote service:

- ``User-Agent``: ``Stripe/v1 PythonBindings/<version>``, followed by the
  embedding application when app info is set.
- ``X-Stripe-Client-User-Agent``: a JSON record describing the bindings,
  the Python runtime, the platform and the output of ``uname -a``.

The ``uname`` lookup runs a subprocess, so it is done once per cache and
shared by every concurrent caller. When it fails, or has not finished in
time, the record reports ``"UNKNOWN"``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_UNAME_CACHE",
    "UNAME_TIMEOUT",
    "UNKNOWN_UNAME",
    "UnameCache",
    "UserAgentBuilder",
    "build_client_user_agent",
    "safe_exec",
    "serialize_user_agent",
    "user_agent_string",
]

import asyncio
import json
import logging
import platform
import sys
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from arestripe.app_info import AppInfo

logger: logging.Logger = logging.getLogger(__name__)

UNKNOWN_UNAME = "UNKNOWN"

# Seconds to wait for the uname lookup before reporting it as unknown
UNAME_TIMEOUT = 1.0

UNAME_COMMAND = ("uname", "-a")

# Characters left as-is by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "!'()*"


def _bindings_version() -> str:
    from arestripe import __version__

    return __version__


async def safe_exec(command: Sequence[str]) -> str:
    """Run a command and return its decoded standard output.

    Args:
        command: The program and its arguments.

    Returns:
        The standard output with surrounding whitespace stripped.

    Raises:
        OSError: If the program cannot be started or exits with a
            non-zero status.
    """
    process = await asyncio.create_subprocess_exec(
        *command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.DEVNULL,
    )
    stdout, _ = await process.communicate()
    if process.returncode != 0:
        msg = f"{command[0]} exited with status {process.returncode}"
        raise OSError(msg)
    return stdout.decode("utf-8", errors="replace").strip()


class UnameCache:
    r"""One-shot cache of the ``uname -a`` output.

    The first caller starts the lookup. Later and concurrent callers await
    the same lookup, so the command runs at most once per event loop until
    it succeeds or fails. A failure is cached as ``"UNKNOWN"``.

    Args:
        exec_func: Coroutine function running a command and returning its
            output. Defaults to ``safe_exec``.
        timeout: Seconds a caller waits for a pending lookup before
            getting ``"UNKNOWN"``. The lookup keeps running and its result
            is cached for later callers.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arestripe.user_agent import UnameCache
        >>> async def fake_exec(command):
        ...     return "Linux host 6.1.0"
        ...
        >>> asyncio.run(UnameCache(exec_func=fake_exec).get())
        'Linux host 6.1.0'

        ```
    """

    def __init__(
        self,
        exec_func: Callable[[Sequence[str]], Awaitable[str]] | None = None,
        timeout: float = UNAME_TIMEOUT,
    ) -> None:
        self._exec_func = exec_func
        self._timeout = timeout
        self._value: str | None = None
        self._pending: asyncio.Task[str] | None = None

    @property
    def value(self) -> str | None:
        """The cached result, or None while unresolved."""
        return self._value

    async def get(self) -> str:
        """Return the uname string, starting the lookup if needed."""
        if self._value is not None:
            return self._value

        loop = asyncio.get_running_loop()
        if self._pending is None or self._pending.get_loop() is not loop:
            self._pending = loop.create_task(self._lookup())
        try:
            return await asyncio.wait_for(asyncio.shield(self._pending), self._timeout)
        except asyncio.TimeoutError:
            logger.debug(f"uname lookup still pending after {self._timeout}s")
            return UNKNOWN_UNAME

    def reset(self) -> None:
        """Forget the cached value so the next call looks it up again."""
        self._value = None
        self._pending = None

    async def _lookup(self) -> str:
        exec_func = self._exec_func if self._exec_func is not None else safe_exec
        try:
            value = await exec_func(UNAME_COMMAND)
        except Exception as exc:  # noqa: BLE001
            logger.debug(f"uname lookup failed: {exc!r}")
            value = None
        self._value = value or UNKNOWN_UNAME
        return self._value


DEFAULT_UNAME_CACHE = UnameCache()


def _encode_uri_component(value: Any) -> str:
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def build_client_user_agent(app_info: AppInfo | None, uname: str) -> dict[str, Any]:
    """Build the client user-agent record.

    Args:
        app_info: Optional application metadata.
        uname: Output of the system uname lookup, or ``"UNKNOWN"``.

    Returns:
        A record with ``bindings_version``, ``lang``, ``lang_version``,
        ``platform``, ``publisher`` and ``uname``, plus ``application``
        when app info is set.
    """
    record: dict[str, Any] = {
        "bindings_version": _bindings_version(),
        "lang": "python",
        "lang_version": platform.python_version(),
        "platform": sys.platform,
        "publisher": "stripe",
        "uname": uname,
    }
    if app_info is not None:
        record["application"] = app_info.to_dict()
    return record


def serialize_user_agent(record: Mapping[str, Any]) -> str:
    """Serialize a user-agent record for the
    ``X-Stripe-Client-User-Agent`` header.

    Top-level values are percent-encoded like ``encodeURIComponent`` so
    that non-ASCII characters survive as header values. The
    ``application`` object is kept as-is.

    Example:
        ```pycon
        >>> from arestripe.user_agent import serialize_user_agent
        >>> serialize_user_agent({"lang": "ï", "uname": "foøname"})
        '{"lang": "%C3%AF", "uname": "fo%C3%B8name"}'

        ```
    """
    encoded = {
        key: value if key == "application" else _encode_uri_component(value)
        for key, value in record.items()
    }
    return json.dumps(encoded)


def user_agent_string(app_info: AppInfo | None = None) -> str:
    """Format the ``User-Agent`` header value.

    Example:
        ```pycon
        >>> from arestripe.app_info import AppInfo
        >>> from arestripe.user_agent import user_agent_string
        >>> user_agent_string(AppInfo(name="MyApp", version="1.0")).endswith(" MyApp/1.0")
        True

        ```
    """
    value = f"Stripe/v1 PythonBindings/{_bindings_version()}"
    if app_info is not None:
        value += f" {app_info.as_string()}"
    return value


class UserAgentBuilder:
    """Builds both identification headers for a config snapshot.

    Args:
        app_info: Optional application metadata from the snapshot.
        uname_cache: Cache used for the uname lookup. Defaults to the
            process-wide ``DEFAULT_UNAME_CACHE``.
    """

    def __init__(self, app_info: AppInfo | None = None, uname_cache: UnameCache | None = None) -> None:
        self.app_info = app_info
        self.uname_cache = uname_cache if uname_cache is not None else DEFAULT_UNAME_CACHE

    def user_agent(self) -> str:
        return user_agent_string(self.app_info)

    async def client_user_agent(self) -> str:
        """Return the serialized client user-agent record."""
        uname = await self.uname_cache.get()
        return serialize_user_agent(build_client_user_agent(self.app_info, uname))

    async def seeded(self, seed: Mapping[str, Any]) -> str:
        """Serialize ``seed`` merged with the uname and application
        fields."""
        record = dict(seed)
        record["uname"] = await self.uname_cache.get()
        if self.app_info is not None:
            record["application"] = self.app_info.to_dict()
        return serialize_user_agent(record)
