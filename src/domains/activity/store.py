# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read interface of the actor and event store.

The feed engine consumes, and never mutates, a store that exposes two
operations per population:

- list_actors(population): every actor profile of that population
- list_events(actor_id, population): the actor's raw events, newest first
  (best effort; the engine re-ranks regardless)

Any backend satisfying ActivityStore works. The SQL backend lives in
src.infrastructure.database.activity_store; InMemoryActivityStore below
serves fixtures, demos and tests.

Example:
    store = InMemoryActivityStore()
    store.add_actor(Population.LEARNER, ActorProfile(id="s1", role=ActorRole.LEARNER))
    store.add_event(Population.LEARNER, "s1", {"id": "e1", "mode": "pretest"})
"""

import copy
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from src.domains.activity.schemas import ActorProfile, Population
from src.utils.datetime import coerce_timestamp

RawEvent = Mapping[str, Any]

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@runtime_checkable
class ActivityStore(Protocol):
    """Read-only access to actors and their event logs."""

    async def list_actors(self, population: Population) -> Sequence[ActorProfile]:
        """List every actor of a population.

        Raises:
            SourceUnavailableError: If the store cannot be read.
        """
        ...

    async def list_events(self, actor_id: str, population: Population) -> Sequence[RawEvent]:
        """List one actor's raw events ordered by timestamp descending.

        Raises:
            SourceUnavailableError: If the store cannot be read.
        """
        ...


class InMemoryActivityStore:
    """ActivityStore kept in process memory.

    Values handed out are deep copies, so callers cannot alter the stored
    events.
    """

    def __init__(self) -> None:
        self._actors: dict[Population, dict[str, ActorProfile]] = {
            population: {} for population in Population
        }
        self._events: dict[tuple[Population, str], list[dict[str, Any]]] = {}

    def add_actor(self, population: Population, profile: ActorProfile) -> None:
        """Register an actor in a population."""
        self._actors[population][profile.id] = profile
        self._events.setdefault((population, profile.id), [])

    def add_event(self, population: Population, actor_id: str, event: RawEvent) -> None:
        """Append a raw event to an actor's log.

        Raises:
            KeyError: If the actor is not registered in the population.
        """
        if actor_id not in self._actors[population]:
            raise KeyError(f"Unknown {population.value} actor: {actor_id}")
        self._events[(population, actor_id)].append(copy.deepcopy(dict(event)))

    async def list_actors(self, population: Population) -> list[ActorProfile]:
        return list(self._actors[population].values())

    async def list_events(self, actor_id: str, population: Population) -> list[dict[str, Any]]:
        events = self._events.get((population, actor_id), [])
        ordered = sorted(
            events,
            key=lambda event: coerce_timestamp(event.get("timestamp")) or _OLDEST,
            reverse=True,
        )
        return copy.deepcopy(ordered)
