# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime utilities."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from src.utils.datetime import (
    coerce_timestamp,
    ensure_utc,
    format_date_label,
    format_time_label,
    local_date,
    parse_iso,
    utc_now,
)

APR_3 = datetime(2025, 4, 3, 10, 0, tzinfo=timezone.utc)


class TestEnsureUtc:
    """Tests for ensure_utc."""

    def test_none(self) -> None:
        assert ensure_utc(None) is None

    def test_naive_is_taken_as_utc(self) -> None:
        result = ensure_utc(datetime(2025, 4, 3, 10, 0))

        assert result == APR_3
        assert result.tzinfo == timezone.utc

    def test_aware_is_converted(self) -> None:
        plus_three = datetime(2025, 4, 3, 13, 0, tzinfo=timezone(timedelta(hours=3)))

        assert ensure_utc(plus_three) == APR_3
        assert ensure_utc(plus_three).tzinfo == timezone.utc


class TestIso:
    """Tests for ISO parsing."""

    def test_parse_iso_with_z_suffix(self) -> None:
        assert parse_iso("2025-04-03T10:00:00Z") == APR_3

    def test_parse_iso_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_iso("not a date")


class TestCoerceTimestamp:
    """Tests for coerce_timestamp."""

    @pytest.mark.parametrize(
        "value",
        [
            APR_3,
            datetime(2025, 4, 3, 10, 0),
            "2025-04-03T10:00:00Z",
            "2025-04-03T12:00:00+02:00",
            1743674400,
            1743674400.0,
            1743674400000,
            {"seconds": 1743674400, "nanoseconds": 0},
            {"_seconds": 1743674400, "_nanoseconds": 0},
        ],
    )
    def test_supported_shapes(self, value: object) -> None:
        """Test that every supported shape resolves to the same instant."""
        assert coerce_timestamp(value) == APR_3

    def test_date_is_midnight_utc(self) -> None:
        assert coerce_timestamp(date(2025, 4, 3)) == datetime(2025, 4, 3, tzinfo=timezone.utc)

    def test_nanoseconds_are_kept(self) -> None:
        result = coerce_timestamp({"seconds": 1743674400, "nanoseconds": 500_000_000})

        assert result == APR_3 + timedelta(milliseconds=500)

    def test_to_datetime_objects(self) -> None:
        """Test objects exposing to_datetime(), like document-store timestamps."""

        class StoreTimestamp:
            def to_datetime(self) -> datetime:
                return APR_3

        assert coerce_timestamp(StoreTimestamp()) == APR_3

    @pytest.mark.parametrize(
        "value",
        [None, True, False, "", "   ", "yesterday", float("nan"), float("inf"), {"seconds": "x"}, [1, 2], object()],
    )
    def test_unusable_values(self, value: object) -> None:
        """Test that unusable values become None, never now or the epoch."""
        assert coerce_timestamp(value) is None

    @pytest.mark.parametrize(
        "value",
        [
            "9999-12-31T23:59:59-05:00",
            "0001-01-01T00:00:00+05:00",
            "9999-12-31T23:00:00Z",
            datetime(9999, 12, 31, 23, 59, tzinfo=timezone(timedelta(hours=-5))),
            datetime.min,
            date.min,
            date.max,
        ],
    )
    def test_values_at_the_range_limits(self, value: object) -> None:
        """Test that instants at the edge of the datetime range are unusable."""
        assert coerce_timestamp(value) is None

    def test_to_datetime_out_of_range(self) -> None:
        class SentinelTimestamp:
            def to_datetime(self) -> datetime:
                return datetime.max.replace(tzinfo=timezone(timedelta(hours=-1)))

        assert coerce_timestamp(SentinelTimestamp()) is None


class TestLabels:
    """Tests for date and time display labels."""

    def test_format_date_label(self) -> None:
        assert format_date_label(APR_3) == "Apr 3, 2025"
        assert format_date_label(date(2024, 12, 25)) == "Dec 25, 2024"

    def test_format_date_label_in_timezone(self) -> None:
        late = datetime(2025, 4, 3, 23, 30, tzinfo=timezone.utc)

        assert format_date_label(late, ZoneInfo("Asia/Tokyo")) == "Apr 4, 2025"

    @pytest.mark.parametrize(
        ("hour", "minute", "expected"),
        [(0, 5, "12:05 AM"), (9, 0, "9:00 AM"), (12, 0, "12:00 PM"), (15, 7, "3:07 PM")],
    )
    def test_format_time_label(self, hour: int, minute: int, expected: str) -> None:
        dt = datetime(2025, 4, 3, hour, minute, tzinfo=timezone.utc)

        assert format_time_label(dt) == expected

    def test_local_date(self) -> None:
        early = datetime(2025, 4, 3, 2, 0, tzinfo=timezone.utc)

        assert local_date(early, ZoneInfo("America/New_York")) == date(2025, 4, 2)

    def test_utc_now_is_aware(self) -> None:
        assert utc_now().tzinfo == timezone.utc
