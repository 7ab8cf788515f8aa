"""
Tests for `domain/time.py`.

Covers contract rules:
- Stored timestamps parse to timezone-aware UTC.
- "First seen today" compares UTC calendar dates.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from domain.time import is_same_utc_day, parse_utc_timestamp


def test_parse_utc_timestamp_variants() -> None:
    """Verify Z suffix, offsets and naive values all end up in UTC."""

    expected = datetime(2025, 9, 16, 12, 0, tzinfo=timezone.utc)

    assert parse_utc_timestamp("2025-09-16T12:00:00Z") == expected
    assert parse_utc_timestamp("2025-09-16T07:00:00-05:00") == expected
    assert parse_utc_timestamp("2025-09-16T12:00:00") == expected
    assert parse_utc_timestamp(expected) == expected


def test_parse_utc_timestamp_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        parse_utc_timestamp(1726488000)


def test_is_same_utc_day() -> None:
    """Verify the comparison uses the UTC date, not the local one."""

    now = datetime(2025, 9, 16, 1, 0, tzinfo=timezone.utc)
    late_local = datetime(2025, 9, 15, 21, 30, tzinfo=timezone(timedelta(hours=-4)))

    assert is_same_utc_day(late_local, now) is True
    assert is_same_utc_day(now - timedelta(hours=2), now) is False


def test_is_same_utc_day_requires_utc_reference() -> None:
    with pytest.raises(ValueError):
        is_same_utc_day(datetime(2025, 9, 16, tzinfo=timezone.utc), datetime(2025, 9, 16))
