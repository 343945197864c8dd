r"""Unit tests for the client configuration."""

from __future__ import annotations

import pytest

from arestripe.app_info import AppInfo
from arestripe.core.config import (
    DEFAULT_BASE_PATH,
    DEFAULT_HOST,
    DEFAULT_INITIAL_NETWORK_RETRY_DELAY,
    DEFAULT_JITTER_FACTOR,
    DEFAULT_MAX_NETWORK_RETRIES,
    DEFAULT_MAX_NETWORK_RETRY_DELAY,
    DEFAULT_PORT,
    DEFAULT_PROTOCOL,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
    ClientConfig,
)
from arestripe.exceptions import StripeConfigurationError


def test_defaults() -> None:
    """Test the default configuration values."""
    config = ClientConfig()
    assert config.api_key is None
    assert config.api_version is None
    assert config.timeout == DEFAULT_TIMEOUT == 80_000
    assert config.max_network_retries == DEFAULT_MAX_NETWORK_RETRIES == 0
    assert config.app_info is None
    assert config.host == DEFAULT_HOST == "api.stripe.com"
    assert config.port == DEFAULT_PORT == 443
    assert config.protocol == DEFAULT_PROTOCOL == "https"
    assert config.base_path == DEFAULT_BASE_PATH == "/v1/"
    assert config.retry_status_codes == RETRY_STATUS_CODES == (409, 429, 500, 502, 503, 504)
    assert config.initial_network_retry_delay == DEFAULT_INITIAL_NETWORK_RETRY_DELAY == 0.5
    assert config.max_network_retry_delay == DEFAULT_MAX_NETWORK_RETRY_DELAY == 2.0
    assert config.jitter_factor == DEFAULT_JITTER_FACTOR == 0.5
    assert config.on_request is None
    assert config.on_response is None
    assert config.on_retry is None


def test_base_url() -> None:
    """Test the endpoint built from protocol, host and port."""
    assert ClientConfig().base_url == "https://api.stripe.com:443"
    config = ClientConfig(host="localhost", port=12111, protocol="http")
    assert config.base_url == "http://localhost:12111"


def test_auth_bearer() -> None:
    """Test that the api key is sent as a bearer credential."""
    assert ClientConfig(api_key="sk_test_123").auth == "Bearer sk_test_123"


def test_auth_without_key() -> None:
    assert ClientConfig().auth is None


def test_config_is_frozen() -> None:
    """Test that the snapshot cannot be mutated in place."""
    config = ClientConfig()
    with pytest.raises(AttributeError):
        config.max_network_retries = 3  # type: ignore[misc]


def test_invalid_timeout() -> None:
    with pytest.raises(StripeConfigurationError, match=r"timeout must be > 0"):
        ClientConfig(timeout=0)


def test_invalid_max_network_retries() -> None:
    with pytest.raises(StripeConfigurationError, match=r"maxNetworkRetries must be a number"):
        ClientConfig(max_network_retries="foo")  # type: ignore[arg-type]


def test_invalid_jitter_factor() -> None:
    with pytest.raises(StripeConfigurationError, match=r"jitter_factor must be >= 0"):
        ClientConfig(jitter_factor=-1.0)


###################################
#     Tests for ClientConfig.merge #
###################################


def test_merge_overrides() -> None:
    """Test that merge returns a new config with overrides applied."""
    config = ClientConfig(api_key="sk_test_123")
    merged = config.merge(max_network_retries=2, timeout=1000)
    assert merged.max_network_retries == 2
    assert merged.timeout == 1000
    assert merged.api_key == "sk_test_123"
    assert config.max_network_retries == 0
    assert config.timeout == DEFAULT_TIMEOUT


def test_merge_ignores_none() -> None:
    """Test that None overrides keep the current values."""
    config = ClientConfig(api_key="sk_test_123", api_version="2024-06-20")
    merged = config.merge(api_key=None, api_version=None)
    assert merged == config


def test_merge_app_info() -> None:
    info = AppInfo(name="MyAwesomeApp")
    assert ClientConfig().merge(app_info=info).app_info is info


def test_merge_validates() -> None:
    """Test that merged values are validated."""
    with pytest.raises(StripeConfigurationError, match=r"maxNetworkRetries must be >= 0"):
        ClientConfig().merge(max_network_retries=-1)
