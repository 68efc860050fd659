# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed domain.

This module aggregates the event logs of learners and instructors into
one feed:
- Collection and normalization of raw store events
- Global recency ranking and truncation
- Day bucketing ("Today", "Yesterday", "Apr 3, 2025")
- Classification (category, color, icon, description, metric)
- Detail projection of a single record

Usage:
    from src.domains.activity import ActivityFeedService, InMemoryActivityStore

    service = ActivityFeedService(store)
    groups = await service.get_recent_feed(limit=20)
    classification = service.classify(groups[0].records[0])
"""

from src.domains.activity.bucketing import bucketize
from src.domains.activity.classifier import classify, resolve_metric
from src.domains.activity.collector import ActivityCollector, CollectionResult
from src.domains.activity.details import project_details
from src.domains.activity.exceptions import (
    ActivityFeedError,
    RecordNotFoundError,
    SourceUnavailableError,
)
from src.domains.activity.normalizer import normalize_event
from src.domains.activity.ranking import merge_and_rank, rank_records
from src.domains.activity.schemas import (
    ActivityCategory,
    ActivityDetails,
    ActivityGroup,
    ActivityRecord,
    ActorProfile,
    ActorRole,
    Classification,
    Mode,
    Population,
)
from src.domains.activity.service import ActivityFeedService, FeedRun
from src.domains.activity.store import ActivityStore, InMemoryActivityStore

__all__ = [
    # Service
    "ActivityFeedService",
    "FeedRun",
    # Pipeline stages
    "ActivityCollector",
    "CollectionResult",
    "normalize_event",
    "rank_records",
    "merge_and_rank",
    "bucketize",
    "classify",
    "resolve_metric",
    "project_details",
    # Store
    "ActivityStore",
    "InMemoryActivityStore",
    # Schemas
    "ActivityCategory",
    "ActivityDetails",
    "ActivityGroup",
    "ActivityRecord",
    "ActorProfile",
    "ActorRole",
    "Classification",
    "Mode",
    "Population",
    # Errors
    "ActivityFeedError",
    "RecordNotFoundError",
    "SourceUnavailableError",
]
