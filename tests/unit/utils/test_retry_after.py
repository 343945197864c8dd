r"""Unit tests for Retry-After header parsing."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from arestripe.utils import MAX_RETRY_AFTER, parse_retry_after


def test_max_retry_after() -> None:
    assert MAX_RETRY_AFTER == 60.0


def test_parse_retry_after_none() -> None:
    """Test that a missing header yields None."""
    assert parse_retry_after(None) is None


@pytest.mark.parametrize(
    ("header", "expected"),
    [("0", 0.0), ("1", 1.0), ("2.5", 2.5), ("60", 60.0)],
)
def test_parse_retry_after_seconds(header: str, expected: float) -> None:
    """Test parsing integer and decimal seconds."""
    assert parse_retry_after(header) == expected


@pytest.mark.parametrize("header", ["61", "120", "3600"])
def test_parse_retry_after_too_large(header: str) -> None:
    """Test that values above the cap are ignored."""
    assert parse_retry_after(header) is None


def test_parse_retry_after_negative() -> None:
    """Test that negative values are ignored."""
    assert parse_retry_after("-5") is None


@pytest.mark.parametrize("header", ["nan", "NaN", "inf", "-inf", "infinity"])
def test_parse_retry_after_not_finite(header: str) -> None:
    """Test that non-finite values are ignored."""
    assert parse_retry_after(header) is None


@pytest.mark.parametrize("header", ["invalid", "", "soon"])
def test_parse_retry_after_invalid(header: str) -> None:
    """Test that unparseable values are ignored."""
    assert parse_retry_after(header) is None


def test_parse_retry_after_http_date() -> None:
    """Test parsing an HTTP-date in the near future."""
    retry_date = datetime.now(timezone.utc) + timedelta(seconds=30)
    seconds = parse_retry_after(format_datetime(retry_date, usegmt=True))
    assert seconds is not None
    assert 25.0 <= seconds <= 30.0


def test_parse_retry_after_http_date_in_past() -> None:
    """Test that dates in the past are clamped to 0."""
    assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0


def test_parse_retry_after_http_date_too_far() -> None:
    """Test that dates beyond the cap are ignored."""
    retry_date = datetime.now(timezone.utc) + timedelta(hours=1)
    assert parse_retry_after(format_datetime(retry_date, usegmt=True)) is None
