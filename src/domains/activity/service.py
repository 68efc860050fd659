# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed service.

ActivityFeedService runs the full aggregation pipeline:

    collect -> normalize -> merge/rank -> bucketize

and exposes classification and detail projection for single records.

Runs:
    Every get_recent_feed() call is a self-contained FeedRun with its own
    working set. Concurrent runs never share state. When a run completes
    it replaces the published feed, unless a newer run has already
    published, in which case its result is returned to its caller but
    not published.

Example:
    service = ActivityFeedService(store)
    groups = await service.get_recent_feed(limit=20)
    for group in groups:
        for record in group.records:
            print(group.label, service.classify(record).description)
"""

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from src.core.config.settings import FeedSettings
from src.domains.activity.bucketing import bucketize
from src.domains.activity.classifier import classify
from src.domains.activity.collector import ActivityCollector, CollectionResult
from src.domains.activity.details import project_details
from src.domains.activity.exceptions import RecordNotFoundError
from src.domains.activity.ranking import merge_and_rank
from src.domains.activity.schemas import (
    ActivityDetails,
    ActivityGroup,
    ActivityRecord,
    ActorRole,
    Classification,
    Population,
)
from src.domains.activity.store import ActivityStore
from src.utils.datetime import utc_now
from src.utils.logging import feed_run_context, get_logger

logger = get_logger(__name__)


@dataclass
class FeedRun:
    """Result of one aggregation run.

    Attributes:
        run_id: Monotonic id; a higher id means a later start.
        started_at: When the run started.
        limit: Number of records requested.
        ranked: Ranked and truncated records, including untimestamped ones.
        groups: Day buckets of the timestamped ranked records.
        collection: Collector statistics.
        finished_at: When the run finished.
    """

    run_id: int
    started_at: datetime
    limit: int
    ranked: list[ActivityRecord] = field(default_factory=list)
    groups: list[ActivityGroup] = field(default_factory=list)
    collection: CollectionResult = field(default_factory=CollectionResult)
    finished_at: datetime | None = None

    @property
    def degraded(self) -> bool:
        return self.collection.degraded


class ActivityFeedService:
    """Aggregates learner and instructor activity into a ranked, bucketed feed.

    Attributes:
        _collector: Collector reading the store.
        _settings: Feed settings (limits, timezone).
        _clock: Returns the current aware time; used for bucketing.
        _latest: Most recent published run.
    """

    def __init__(
        self,
        store: ActivityStore,
        settings: FeedSettings | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the feed service.

        Args:
            store: Read interface of the actor and event store.
            settings: Feed settings; defaults when omitted.
            clock: Source of "now" for day labels.
        """
        self._settings = settings or FeedSettings()
        self._collector = ActivityCollector(
            store,
            populations=[Population(value) for value in self._settings.populations],
        )
        self._clock = clock
        self._tz = ZoneInfo(self._settings.timezone)
        self._run_ids = itertools.count(1)
        self._latest: FeedRun | None = None

    @property
    def latest_run(self) -> FeedRun | None:
        """Most recently published run, if any."""
        return self._latest

    def resolve_limit(self, limit: int | None) -> int:
        """Apply the default and the upper bound to a requested limit.

        Raises:
            ValueError: If limit is negative.
        """
        if limit is None:
            return self._settings.default_limit
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        return min(limit, self._settings.max_limit)

    async def run(self, limit: int | None = None) -> FeedRun:
        """Execute one complete aggregation run.

        Args:
            limit: Records to keep after ranking; the configured default
                when omitted.

        Returns:
            The finished FeedRun. Store failures degrade the run instead
            of raising.
        """
        run = FeedRun(
            run_id=next(self._run_ids),
            started_at=self._clock(),
            limit=self.resolve_limit(limit),
        )
        with feed_run_context(run.run_id):
            logger.debug("Feed run started", limit=run.limit)

            run.collection = await self._collector.collect()
            run.ranked = merge_and_rank(run.collection.records, run.limit)
            run.groups = bucketize(run.ranked, now=self._clock(), tz=self._tz)
            run.finished_at = self._clock()

            self._publish(run)
            logger.info(
                "Feed run finished",
                collected=len(run.collection.records),
                returned=len(run.ranked),
                groups=len(run.groups),
                degraded=run.degraded,
            )
            return run

    def _publish(self, run: FeedRun) -> None:
        if self._latest is not None and self._latest.run_id > run.run_id:
            logger.debug("Discarding stale feed run", newer_run_id=self._latest.run_id)
            return
        self._latest = run

    async def get_recent_feed(self, limit: int | None = None) -> list[ActivityGroup]:
        """Collect, rank and bucket the most recent activity.

        Args:
            limit: Number of most recent records to include (default 20).

        Returns:
            Day groups in recency order; empty when the store is unavailable.
        """
        run = await self.run(limit)
        return run.groups

    def classify(self, record: ActivityRecord) -> Classification:
        """Derive display metadata for a previously fetched record."""
        return classify(record)

    def describe(self, record: ActivityRecord) -> ActivityDetails:
        """Build the expanded detail view of a record."""
        return project_details(record, tz=self._tz)

    def find_record(
        self,
        actor_id: str,
        record_id: str,
        population: Population | None = None,
    ) -> ActivityRecord:
        """Look up a record in the published feed.

        Record ids are only unique per actor, so the actor id is required;
        the population narrows the match when an id exists in both.

        Raises:
            RecordNotFoundError: If the record is not in the published feed.
        """
        role: ActorRole | None = population.role if population else None
        if self._latest is not None:
            for record in self._latest.ranked:
                if record.actor_id != actor_id or record.id != record_id:
                    continue
                if role is not None and record.actor_role is not role:
                    continue
                return record
        raise RecordNotFoundError(
            f"Activity {record_id} of actor {actor_id} is not in the current feed"
        )
