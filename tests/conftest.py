from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from arestripe import Stripe
from arestripe.user_agent import UnameCache

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

FAKE_UNAME = "Linux testhost 6.1.0 x86_64 GNU/Linux"


def _make_response(
    status_code: int = 200,
    json: Any = None,
    headers: dict[str, str] | None = None,
    request_id: str | None = "req_123",
) -> httpx.Response:
    """Create a real httpx.Response with a ``request-id`` header."""
    all_headers = {} if request_id is None else {"request-id": request_id}
    all_headers.update(headers or {})
    return httpx.Response(
        status_code,
        json={} if json is None else json,
        headers=all_headers,
        request=httpx.Request("GET", "https://api.stripe.com:443/v1/"),
    )


def _error_response(
    status_code: int,
    error_type: str = "invalid_request_error",
    message: str = "Something went wrong",
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Create an error response with a Stripe error body."""
    return _make_response(
        status_code,
        json={"error": {"type": error_type, "message": message}},
        headers=headers,
    )


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_async_client() -> httpx.AsyncClient:
    """Create a mock httpx.AsyncClient for testing."""
    return Mock(spec=httpx.AsyncClient, aclose=AsyncMock())


@pytest.fixture
def mock_exec() -> AsyncMock:
    """Create a mock command runner returning a fixed uname."""
    return AsyncMock(return_value=FAKE_UNAME)


@pytest.fixture
def uname_cache(mock_exec: AsyncMock) -> UnameCache:
    """Create a uname cache that never spawns a subprocess."""
    return UnameCache(exec_func=mock_exec)


@pytest.fixture
def stripe(mock_async_client: httpx.AsyncClient, uname_cache: UnameCache) -> Stripe:
    """Create a client sending requests through ``mock_async_client``."""
    return Stripe("sk_test_123", http_client=mock_async_client, uname_cache=uname_cache)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks.

    Returns:
        A Mock object that can be used as a callback function.
    """
    return Mock()


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Return a factory of real httpx.Response objects."""
    return _make_response


@pytest.fixture
def error_response() -> Callable[..., httpx.Response]:
    """Return a factory of responses carrying a Stripe error body."""
    return _error_response
