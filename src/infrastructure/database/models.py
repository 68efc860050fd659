# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event store tables.

Actors of both populations live in one table keyed by (population, id).
Each actor owns an event log; an event keeps its loosely structured fields
in a JSON column, with the event time lifted into its own column so logs
can be read newest first.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKeyConstraint, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for event store tables."""

    pass


class ActorRow(Base):
    """A learner or instructor."""

    __tablename__ = "actors"

    population: Mapped[str] = mapped_column(String(20), primary_key=True)
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)


class ActivityEventRow(Base):
    """One entry of an actor's event log."""

    __tablename__ = "activity_events"
    __table_args__ = (
        ForeignKeyConstraint(
            ["population", "actor_id"],
            ["actors.population", "actors.id"],
            ondelete="CASCADE",
        ),
        Index("ix_activity_events_actor_time", "population", "actor_id", "occurred_at"),
    )

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(String(128), nullable=False)
    population: Mapped[str] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[str] = mapped_column(String(128), nullable=False)
    occurred_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
