# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the event store.

This package provides SQLAlchemy async database access to the store
holding actors and their event logs, and an ActivityStore implementation
over it.

Example:
    from src.infrastructure.database import (
        SQLActivityStore,
        get_feed_sessionmaker,
        init_feed_database,
    )

    await init_feed_database(settings)
    store = SQLActivityStore(get_feed_sessionmaker())
"""

from src.infrastructure.database.activity_store import SQLActivityStore
from src.infrastructure.database.connection import (
    DatabaseError,
    check_feed_database_connection,
    close_feed_database,
    get_feed_sessionmaker,
    init_feed_database,
)
from src.infrastructure.database.models import ActivityEventRow, ActorRow, Base

__all__ = [
    # Connection
    "DatabaseError",
    "init_feed_database",
    "close_feed_database",
    "get_feed_sessionmaker",
    "check_feed_database_connection",
    # Tables
    "Base",
    "ActorRow",
    "ActivityEventRow",
    # Store
    "SQLActivityStore",
]
