# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Day bucketing of ranked records.

Each timestamped record lands in the bucket of its calendar day, taken in
the feed timezone relative to the moment of bucketing:

- same day as now: "Today"
- the day before: "Yesterday"
- any other day: "Apr 3, 2025"

Buckets come out in the order their first record appears in the ranked
sequence. Records without a timestamp are skipped.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone, tzinfo

from src.domains.activity.schemas import ActivityGroup, ActivityRecord
from src.utils.datetime import format_date_label, local_date, utc_now

TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"


def day_label(day: date, today: date) -> str:
    """Label of a calendar day relative to today."""
    if day == today:
        return TODAY_LABEL
    if day == today - timedelta(days=1):
        return YESTERDAY_LABEL
    return format_date_label(day)


def bucketize(
    records: Iterable[ActivityRecord],
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> list[ActivityGroup]:
    """Group ranked records into labeled day buckets.

    Args:
        records: Records already in rank order.
        now: Moment of bucketing; current UTC time when omitted.
        tz: Timezone deciding calendar days.

    Returns:
        Groups in first-encounter order, each keeping the ranked order.
    """
    today = local_date(now or utc_now(), tz)

    groups: dict[date, ActivityGroup] = {}
    for record in records:
        if record.timestamp is None:
            continue
        day = local_date(record.timestamp, tz)
        group = groups.get(day)
        if group is None:
            group = ActivityGroup(label=day_label(day, today), day=day)
            groups[day] = group
        group.records.append(record)

    return list(groups.values())
