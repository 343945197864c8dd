r"""Unit tests for ExponentialBackoff strategy."""

from __future__ import annotations

import pytest

from arestripe.backoff import BaseBackoffStrategy, ExponentialBackoff


def test_exponential_backoff_default_values() -> None:
    """Test the default schedule: 0.5s doubling up to 2s."""
    backoff = ExponentialBackoff()
    assert backoff.initial_delay == 0.5
    assert backoff.max_delay == 2.0
    assert backoff.calculate(0) == 0.5  # 0.5 * 2^0
    assert backoff.calculate(1) == 1.0  # 0.5 * 2^1
    assert backoff.calculate(2) == 2.0  # 0.5 * 2^2
    assert backoff.calculate(3) == 2.0  # Would be 4.0, but capped
    assert backoff.calculate(10) == 2.0  # Would be 512.0, but capped


def test_exponential_backoff_custom() -> None:
    """Test exponential backoff with custom values."""
    backoff = ExponentialBackoff(initial_delay=1.0, max_delay=5.0)
    assert backoff.calculate(0) == 1.0
    assert backoff.calculate(1) == 2.0
    assert backoff.calculate(2) == 4.0
    assert backoff.calculate(3) == 5.0


def test_exponential_backoff_without_cap() -> None:
    """Test exponential backoff without max_delay."""
    backoff = ExponentialBackoff(initial_delay=0.5, max_delay=None)
    assert backoff.calculate(6) == 32.0


def test_exponential_backoff_zero_initial_delay() -> None:
    backoff = ExponentialBackoff(initial_delay=0.0)
    assert backoff.calculate(0) == 0.0
    assert backoff.calculate(5) == 0.0


def test_exponential_backoff_invalid_initial_delay() -> None:
    """Test that negative initial_delay raises ValueError."""
    with pytest.raises(ValueError, match=r"initial_delay must be non-negative"):
        ExponentialBackoff(initial_delay=-1.0)


@pytest.mark.parametrize("max_delay", [0, -5.0])
def test_exponential_backoff_invalid_max_delay(max_delay: float) -> None:
    """Test that non-positive max_delay raises ValueError."""
    with pytest.raises(ValueError, match=r"max_delay must be positive"):
        ExponentialBackoff(initial_delay=1.0, max_delay=max_delay)


def test_exponential_backoff_repr() -> None:
    assert repr(ExponentialBackoff()) == "ExponentialBackoff(initial_delay=0.5, max_delay=2.0)"


def test_exponential_backoff_is_strategy() -> None:
    assert isinstance(ExponentialBackoff(), BaseBackoffStrategy)


def test_base_backoff_strategy_is_abstract() -> None:
    """Test that the base class cannot be instantiated."""
    with pytest.raises(TypeError):
        BaseBackoffStrategy()  # type: ignore[abstract]


def test_custom_backoff_strategy() -> None:
    """Test that custom strategies only implement calculate."""

    class ConstantBackoff(BaseBackoffStrategy):
        def calculate(self, attempt: int) -> float:  # noqa: ARG002
            return 1.5

    assert ConstantBackoff().calculate(7) == 1.5
