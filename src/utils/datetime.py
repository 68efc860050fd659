# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for LearnFeed.

This module provides standardized datetime operations to ensure consistency
across the entire codebase. All datetime operations should use these utilities.

Design Decisions:
-----------------
1. All timestamps inside the engine are timezone-aware UTC
2. Store timestamps arrive in many shapes and are coerced once, at
   normalization time, by coerce_timestamp()
3. Calendar-day decisions and display labels are made in the configured
   feed timezone, never in the server's local time

Usage:
------
    from src.utils.datetime import utc_now, coerce_timestamp

    now = utc_now()
    ts = coerce_timestamp(raw_event.get("timestamp"))  # None if unusable
"""

import math
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Epoch values at or above this are milliseconds (year 5138 in seconds).
_EPOCH_MS_THRESHOLD = 1e11

# Instants this close to datetime.min or datetime.max cannot be shifted into
# every timezone, so coerce_timestamp treats them as unusable.
_MIN_USABLE = datetime.min.replace(tzinfo=timezone.utc) + timedelta(days=1)
_MAX_USABLE = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def utc_from_timestamp(timestamp: float) -> datetime:
    """Create a timezone-aware UTC datetime from a Unix timestamp.

    Args:
        timestamp: Unix timestamp (seconds since epoch).

    Returns:
        Timezone-aware UTC datetime.

    Example:
        >>> dt = utc_from_timestamp(1703145600)
        >>> dt.tzinfo
        datetime.timezone.utc
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    # Already aware - convert to UTC
    return dt.astimezone(timezone.utc)


def parse_iso(iso_string: str | None) -> datetime | None:
    """Parse an ISO 8601 datetime string.

    Args:
        iso_string: ISO 8601 formatted string.

    Returns:
        Timezone-aware UTC datetime or None.

    Raises:
        ValueError: If the string is not valid ISO 8601.
        OverflowError: If the instant cannot be expressed in UTC.
    """
    if iso_string is None:
        return None

    dt = datetime.fromisoformat(iso_string.strip().replace("Z", "+00:00"))
    return ensure_utc(dt)


def _from_epoch(value: float) -> datetime | None:
    if not math.isfinite(value):
        return None
    if abs(value) >= _EPOCH_MS_THRESHOLD:
        value = value / 1000
    try:
        return _within_range(utc_from_timestamp(value))
    except (OverflowError, OSError, ValueError):
        return None


def _within_range(dt: datetime | None) -> datetime | None:
    """Convert to UTC, or None when outside the usable range."""
    try:
        dt = ensure_utc(dt)
    except (OverflowError, ValueError):
        return None
    if dt is None or not _MIN_USABLE <= dt <= _MAX_USABLE:
        return None
    return dt


def coerce_timestamp(value: Any) -> datetime | None:
    """Convert a store timestamp into an aware UTC datetime.

    Accepted shapes:
    - datetime (naive values are taken as UTC) and date (midnight UTC)
    - ISO 8601 strings, including a trailing "Z"
    - Unix epoch numbers in seconds or milliseconds
    - document-store timestamp mappings with "seconds"/"nanoseconds"
      (or "_seconds"/"_nanoseconds") keys
    - objects exposing to_datetime()

    Args:
        value: Raw timestamp value as stored.

    Returns:
        Aware UTC datetime, or None when the value is missing or unusable.
        A missing timestamp is never replaced by "now" or the epoch.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _within_range(value)

    if isinstance(value, date):
        return _within_range(datetime.combine(value, time.min, tzinfo=timezone.utc))

    if isinstance(value, (int, float)):
        return _from_epoch(float(value))

    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return _within_range(parse_iso(value))
        except (ValueError, OverflowError):
            return None

    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            return None
        if isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
            nanos = 0
        return _from_epoch(float(seconds) + float(nanos) / 1e9)

    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        try:
            converted = to_datetime()
        except (TypeError, ValueError, OverflowError):
            return None
        if isinstance(converted, datetime):
            return _within_range(converted)

    return None


def local_date(dt: datetime, tz: tzinfo) -> date:
    """Calendar date of an aware datetime in the given timezone."""
    return ensure_utc(dt).astimezone(tz).date()


def format_date_label(dt: datetime | date, tz: tzinfo | None = None) -> str:
    """Format a date as an abbreviated month/day/year label.

    Args:
        dt: Datetime (converted to tz first when given) or date.
        tz: Timezone for datetimes; UTC when omitted.

    Returns:
        Label such as "Apr 3, 2025".
    """
    if isinstance(dt, datetime):
        dt = local_date(dt, tz or timezone.utc)
    return f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}"


def format_time_label(dt: datetime, tz: tzinfo | None = None) -> str:
    """Format the time of day on a 12-hour clock, e.g. "3:07 PM"."""
    local = ensure_utc(dt).astimezone(tz or timezone.utc)
    hours = local.hour % 12 or 12
    suffix = "PM" if local.hour >= 12 else "AM"
    return f"{hours}:{local.minute:02d} {suffix}"
