# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global recency ranking of collected records."""

from collections.abc import Iterable
from datetime import datetime, timezone

from src.domains.activity.schemas import ActivityRecord

# Sort key for records without a timestamp: older than any real event.
_ABSENT = (0, datetime.min.replace(tzinfo=timezone.utc))


def _rank_key(record: ActivityRecord) -> tuple[int, datetime]:
    if record.timestamp is None:
        return _ABSENT
    return (1, record.timestamp)


def rank_records(records: Iterable[ActivityRecord]) -> list[ActivityRecord]:
    """Order records by timestamp, newest first.

    Records without a timestamp go after every timestamped record and keep
    the order they were collected in. Equal timestamps also keep their
    collected order.
    """
    return sorted(records, key=_rank_key, reverse=True)


def merge_and_rank(records: Iterable[ActivityRecord], limit: int) -> list[ActivityRecord]:
    """Rank the whole working set, then keep the `limit` most recent records.

    Truncation happens only after the global ranking, so one population
    cannot crowd out the other.

    Raises:
        ValueError: If limit is negative.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    return rank_records(records)[:limit]
