# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event collection across both actor populations.

The Collector enumerates every actor of every configured population,
fetches each actor's event log and normalizes every event. Fetches for
distinct actors are independent and run concurrently; collect() returns
only once every fetch has completed or failed.

Failures never reach the caller:
- A failing list_actors call means the source is unavailable. The run
  degrades to an empty record set with source_unavailable set.
- A failing list_events call drops that one actor. Every other actor
  still contributes its records and the actor is listed in failed_actors.
- An event that cannot be normalized is skipped and logged; the rest of
  that actor's log is kept.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from src.domains.activity.normalizer import normalize_event
from src.domains.activity.schemas import ActivityRecord, ActorProfile, Population
from src.domains.activity.store import ActivityStore, RawEvent

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """Unordered working set of one collection pass.

    Attributes:
        records: Normalized records, in no particular order.
        actors_seen: Number of actors enumerated across populations.
        failed_actors: (population, actor_id) pairs whose log could not be read.
        source_unavailable: True when the store could not be enumerated.
        error: Description of the source failure, if any.
    """

    records: list[ActivityRecord] = field(default_factory=list)
    actors_seen: int = 0
    failed_actors: list[tuple[Population, str]] = field(default_factory=list)
    source_unavailable: bool = False
    error: str | None = None

    @property
    def degraded(self) -> bool:
        """Whether any part of the source could not be read."""
        return self.source_unavailable or bool(self.failed_actors)


class ActivityCollector:
    """Fetches and normalizes raw events from an ActivityStore.

    Attributes:
        _store: Store to read from.
        _populations: Populations enumerated on every pass.
    """

    def __init__(
        self,
        store: ActivityStore,
        populations: Iterable[Population] = (Population.LEARNER, Population.INSTRUCTOR),
    ) -> None:
        """Initialize the collector.

        Args:
            store: Store to read actors and events from.
            populations: Populations to collect, in order.
        """
        self._store = store
        self._populations = tuple(populations)

    async def collect(self) -> CollectionResult:
        """Collect and normalize every event of every actor.

        Returns:
            CollectionResult; never raises for store failures.
        """
        try:
            listings = await asyncio.gather(
                *[self._store.list_actors(population) for population in self._populations]
            )
        except Exception as e:
            logger.error("Activity source unavailable: %s", str(e), exc_info=True)
            return CollectionResult(source_unavailable=True, error=str(e))

        owners: list[tuple[Population, ActorProfile]] = [
            (population, actor)
            for population, actors in zip(self._populations, listings)
            for actor in actors
        ]

        fetched = await asyncio.gather(
            *[self._store.list_events(actor.id, population) for population, actor in owners],
            return_exceptions=True,
        )

        result = CollectionResult(actors_seen=len(owners))
        for (population, actor), events in zip(owners, fetched):
            if isinstance(events, BaseException):
                logger.warning(
                    "Failed to fetch events for %s %s: %s",
                    population.value,
                    actor.id,
                    str(events),
                )
                result.failed_actors.append((population, actor.id))
                continue
            result.records.extend(self._normalize_all(events, actor))

        logger.debug(
            "Collected %d records from %d actors (%d failed)",
            len(result.records),
            result.actors_seen,
            len(result.failed_actors),
        )
        return result

    @staticmethod
    def _normalize_all(
        events: Sequence[RawEvent] | None,
        actor: ActorProfile,
    ) -> list[ActivityRecord]:
        records: list[ActivityRecord] = []
        for raw in events or ():
            if not isinstance(raw, Mapping):
                logger.warning("Skipping non-mapping event for actor %s", actor.id)
                continue
            try:
                records.append(normalize_event(raw, actor))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed event for actor %s: %s", actor.id, str(e))
        return records
