# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed API endpoints.

This module provides the recent-activity feed for admin dashboards:
- GET /recent - Ranked, day-bucketed feed with display metadata
- GET /{actor_id}/{record_id} - Expanded view of one feed record
- POST /classify - Re-derive display metadata for a record

Example:
    GET /api/v1/activity/recent?limit=20

    {
        "run_id": 3,
        "degraded": false,
        "total": 2,
        "groups": [
            {"label": "Today", "day": "2025-04-03", "items": [...]}
        ]
    }
"""

import logging
from datetime import date, datetime

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from src.api.dependencies import FeedServiceDep
from src.domains.activity import (
    ActivityDetails,
    ActivityRecord,
    Classification,
    Population,
    RecordNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class FeedItem(BaseModel):
    """A feed record with its display metadata."""

    record: ActivityRecord
    classification: Classification


class FeedGroupResponse(BaseModel):
    """One day bucket of the feed."""

    label: str = Field(description="Today, Yesterday, or a date such as Apr 3, 2025")
    day: date
    items: list[FeedItem] = Field(default_factory=list)


class RecentFeedResponse(BaseModel):
    """Recent activity feed response.

    Attributes:
        run_id: Monotonic id of the aggregation run that produced the feed.
        generated_at: When the run finished.
        degraded: True when the store, or some actors' logs, were unreadable.
        total: Number of records across all groups.
        groups: Day buckets, most recent first.
    """

    run_id: int
    generated_at: datetime
    degraded: bool
    total: int
    groups: list[FeedGroupResponse] = Field(default_factory=list)


@router.get("/recent", response_model=RecentFeedResponse)
async def get_recent_activity(
    service: FeedServiceDep,
    limit: int | None = Query(
        default=None,
        ge=0,
        description="Number of most recent records; defaults to the configured feed size",
    ),
) -> RecentFeedResponse:
    """Get the most recent activity of learners and instructors.

    Store failures never fail the request; they surface as a degraded,
    possibly empty, feed.

    Args:
        service: Feed service.
        limit: Records to keep after ranking, capped at the configured maximum.

    Returns:
        RecentFeedResponse with the day-bucketed feed.
    """
    run = await service.run(limit)

    groups = [
        FeedGroupResponse(
            label=group.label,
            day=group.day,
            items=[
                FeedItem(record=record, classification=service.classify(record))
                for record in group.records
            ],
        )
        for group in run.groups
    ]

    return RecentFeedResponse(
        run_id=run.run_id,
        generated_at=run.finished_at or run.started_at,
        degraded=run.degraded,
        total=sum(len(group.items) for group in groups),
        groups=groups,
    )


@router.post("/classify", response_model=Classification)
async def classify_activity(
    record: ActivityRecord,
    service: FeedServiceDep,
) -> Classification:
    """Derive category, style, description and metric for a record."""
    return service.classify(record)


@router.get("/{actor_id}/{record_id}", response_model=ActivityDetails)
async def get_activity_details(
    actor_id: str,
    record_id: str,
    service: FeedServiceDep,
    population: Population | None = Query(
        default=None,
        description="Narrow the lookup when the actor id exists in both populations",
    ),
) -> ActivityDetails:
    """Get the expanded view of a record in the current feed.

    Args:
        actor_id: Owning actor id.
        record_id: Record id within the actor's log.
        service: Feed service.
        population: Optional population filter.

    Returns:
        ActivityDetails with score, level and question panels.

    Raises:
        HTTPException: If the record is not in the latest feed.
    """
    try:
        record = service.find_record(actor_id, record_id, population)
    except RecordNotFoundError as e:
        logger.info("Activity not found: actor=%s record=%s", actor_id, record_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return service.describe(record)
