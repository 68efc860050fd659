# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQL-backed ActivityStore.

Reads actors and event logs through SQLAlchemy async sessions. Every call
opens its own short-lived session, so concurrent fetches of one feed run
do not share a connection.

Example:
    store = SQLActivityStore(get_feed_sessionmaker())
    service = ActivityFeedService(store)
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domains.activity.exceptions import SourceUnavailableError
from src.domains.activity.schemas import ActorProfile, Population
from src.infrastructure.database.models import ActivityEventRow, ActorRow

logger = logging.getLogger(__name__)


class SQLActivityStore:
    """ActivityStore implementation over the event store tables.

    Attributes:
        _sessionmaker: Factory for read sessions.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the store.

        Args:
            sessionmaker: Async sessionmaker bound to the event store.
        """
        self._sessionmaker = sessionmaker

    async def list_actors(self, population: Population) -> list[ActorProfile]:
        """List every actor of a population.

        Raises:
            SourceUnavailableError: If the query fails.
        """
        query = (
            select(ActorRow)
            .where(ActorRow.population == population.value)
            .order_by(ActorRow.id)
        )
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(query)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise SourceUnavailableError(f"Failed to list {population.value} actors", e) from e

        return [
            ActorProfile(id=row.id, display_name=row.display_name, role=population.role)
            for row in rows
        ]

    async def list_events(self, actor_id: str, population: Population) -> list[dict[str, Any]]:
        """List one actor's raw events, newest first.

        The stored JSON fields are returned as-is, with "id" set to the event
        id and "timestamp" set from the occurred_at column when present.

        Raises:
            SourceUnavailableError: If the query fails.
        """
        query = (
            select(ActivityEventRow)
            .where(ActivityEventRow.population == population.value)
            .where(ActivityEventRow.actor_id == actor_id)
            .order_by(ActivityEventRow.occurred_at.desc().nulls_last())
        )
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(query)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise SourceUnavailableError(
                f"Failed to list events of {population.value} {actor_id}", e
            ) from e

        events: list[dict[str, Any]] = []
        for row in rows:
            raw = dict(row.data or {})
            raw["id"] = row.event_id
            if row.occurred_at is not None:
                raw["timestamp"] = row.occurred_at
            events.append(raw)

        logger.debug("Read %d events of %s %s", len(events), population.value, actor_id)
        return events
