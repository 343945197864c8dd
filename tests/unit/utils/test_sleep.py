r"""Unit tests for sleep time calculation."""

from __future__ import annotations

from unittest.mock import Mock, patch

import httpx
import pytest

from arestripe.backoff import BaseBackoffStrategy, ExponentialBackoff
from arestripe.utils import calculate_sleep_time


@pytest.mark.parametrize(
    ("attempt", "expected"),
    [(0, 0.5), (1, 1.0), (2, 2.0), (3, 2.0), (8, 2.0)],
)
def test_calculate_sleep_time_default_backoff(attempt: int, expected: float) -> None:
    """Test the default bounded exponential schedule without jitter."""
    assert calculate_sleep_time(attempt=attempt, jitter_factor=0.0) == expected


def test_calculate_sleep_time_custom_strategy() -> None:
    """Test that a custom backoff strategy is used."""
    strategy = Mock(spec=BaseBackoffStrategy)
    strategy.calculate.return_value = 3.0
    assert calculate_sleep_time(attempt=4, jitter_factor=0.0, backoff_strategy=strategy) == 3.0
    strategy.calculate.assert_called_once_with(4)


def test_calculate_sleep_time_with_jitter() -> None:
    """Test that jitter is added on top of the backoff."""
    with patch("arestripe.utils.sleep.random.uniform", return_value=0.5) as mock_uniform:
        sleep_time = calculate_sleep_time(attempt=1, jitter_factor=0.5)
    assert sleep_time == 1.5  # 1.0 + 0.5 * 1.0
    mock_uniform.assert_called_once_with(0, 0.5)


def test_calculate_sleep_time_jitter_bounds() -> None:
    """Test that jitter never shrinks the delay or exceeds the factor."""
    for _ in range(50):
        sleep_time = calculate_sleep_time(attempt=2, jitter_factor=0.5)
        assert 2.0 <= sleep_time <= 3.0


def test_calculate_sleep_time_retry_after() -> None:
    """Test that a Retry-After header takes precedence."""
    response = httpx.Response(429, headers={"Retry-After": "7"})
    assert calculate_sleep_time(attempt=0, jitter_factor=0.0, response=response) == 7.0


def test_calculate_sleep_time_retry_after_too_large() -> None:
    """Test that a Retry-After header above the cap falls back to the
    backoff."""
    response = httpx.Response(429, headers={"Retry-After": "600"})
    assert calculate_sleep_time(attempt=1, jitter_factor=0.0, response=response) == 1.0


def test_calculate_sleep_time_retry_after_nan() -> None:
    """Test that a NaN Retry-After header falls back to the backoff."""
    response = httpx.Response(503, headers={"Retry-After": "nan"})
    sleep_time = calculate_sleep_time(
        attempt=0, jitter_factor=0.0, response=response, min_wait_time=0.5
    )
    assert sleep_time == 0.5


def test_calculate_sleep_time_without_retry_after() -> None:
    response = httpx.Response(503)
    assert calculate_sleep_time(attempt=0, jitter_factor=0.0, response=response) == 0.5


def test_calculate_sleep_time_min_wait_time() -> None:
    """Test that the result is floored at min_wait_time."""
    response = httpx.Response(429, headers={"Retry-After": "0"})
    sleep_time = calculate_sleep_time(
        attempt=0, jitter_factor=0.0, response=response, min_wait_time=0.5
    )
    assert sleep_time == 0.5


def test_calculate_sleep_time_zero_backoff_floored() -> None:
    strategy = ExponentialBackoff(initial_delay=0.0)
    sleep_time = calculate_sleep_time(
        attempt=3, jitter_factor=0.5, backoff_strategy=strategy, min_wait_time=0.25
    )
    assert sleep_time == 0.25
