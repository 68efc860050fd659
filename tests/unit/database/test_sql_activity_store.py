# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the SQL-backed activity store."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.domains.activity import ActivityStore, ActorRole, Population, SourceUnavailableError
from src.infrastructure.database.activity_store import SQLActivityStore
from src.infrastructure.database.models import ActivityEventRow, ActorRow


def create_mock_sessionmaker(rows=None, error=None):
    """Create a sessionmaker whose session returns rows or raises error."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows or []

    session = AsyncMock()
    if error is not None:
        session.execute.side_effect = error
    else:
        session.execute.return_value = result

    sessionmaker = MagicMock()
    sessionmaker.return_value.__aenter__.return_value = session
    sessionmaker.return_value.__aexit__.return_value = False
    return sessionmaker, session


class TestSQLActivityStore:
    """Tests for SQLActivityStore."""

    def test_satisfies_protocol(self):
        """Verify the store implements ActivityStore."""
        sessionmaker, _ = create_mock_sessionmaker()

        assert isinstance(SQLActivityStore(sessionmaker), ActivityStore)

    @pytest.mark.asyncio
    async def test_list_actors(self):
        """Test actor rows become profiles with the population's role."""
        rows = [
            ActorRow(population="instructor", id="t1", display_name="Mr. Lee"),
            ActorRow(population="instructor", id="t2", display_name=None),
        ]
        sessionmaker, session = create_mock_sessionmaker(rows)

        actors = await SQLActivityStore(sessionmaker).list_actors(Population.INSTRUCTOR)

        assert [actor.id for actor in actors] == ["t1", "t2"]
        assert actors[0].display_name == "Mr. Lee"
        assert actors[1].display_name is None
        assert all(actor.role is ActorRole.INSTRUCTOR for actor in actors)
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_events(self):
        """Test event rows become raw events with id and timestamp."""
        occurred = datetime(2025, 4, 3, 10, 0, tzinfo=timezone.utc)
        rows = [
            ActivityEventRow(
                event_id="e1",
                population="learner",
                actor_id="s1",
                occurred_at=occurred,
                data={"mode": "pretest", "accuracyRate": 83.4},
            ),
            ActivityEventRow(
                event_id="e2",
                population="learner",
                actor_id="s1",
                occurred_at=None,
                data={"mode": "story", "timestamp": "garbled"},
            ),
        ]
        sessionmaker, _ = create_mock_sessionmaker(rows)

        events = await SQLActivityStore(sessionmaker).list_events("s1", Population.LEARNER)

        assert events[0] == {"mode": "pretest", "accuracyRate": 83.4, "id": "e1", "timestamp": occurred}
        assert events[1] == {"mode": "story", "timestamp": "garbled", "id": "e2"}

    @pytest.mark.asyncio
    async def test_list_actors_failure(self):
        """Test that database errors surface as SourceUnavailableError."""
        error = OperationalError("SELECT", {}, Exception("connection refused"))
        sessionmaker, _ = create_mock_sessionmaker(error=error)

        with pytest.raises(SourceUnavailableError, match="Failed to list learner actors") as exc_info:
            await SQLActivityStore(sessionmaker).list_actors(Population.LEARNER)

        assert exc_info.value.original_error is error

    @pytest.mark.asyncio
    async def test_list_events_failure(self):
        """Test that a failing event query names the actor."""
        error = OperationalError("SELECT", {}, Exception("timeout"))
        sessionmaker, _ = create_mock_sessionmaker(error=error)

        with pytest.raises(SourceUnavailableError, match="learner s1"):
            await SQLActivityStore(sessionmaker).list_events("s1", Population.LEARNER)
