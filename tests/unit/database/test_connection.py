# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for event store connection management."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import ArgumentError

from src.core.config.settings import Settings
from src.infrastructure.database import connection
from src.infrastructure.database.connection import (
    DatabaseError,
    check_feed_database_connection,
    close_feed_database,
    get_feed_sessionmaker,
    init_feed_database,
)


@pytest.fixture(autouse=True)
def reset_connection_state():
    """Ensure every test starts and ends without an engine."""
    connection._feed_engine = None
    connection._feed_sessionmaker = None
    yield
    connection._feed_engine = None
    connection._feed_sessionmaker = None


class TestDatabaseError:
    """Tests for DatabaseError."""

    def test_str_with_original_error(self):
        error = DatabaseError("Query failed", ValueError("bad"))

        assert str(error) == "Query failed: bad"

    def test_str_without_original_error(self):
        assert str(DatabaseError("Query failed")) == "Query failed"


class TestUninitialized:
    """Tests for access before init_feed_database."""

    def test_get_sessionmaker_raises(self):
        with pytest.raises(DatabaseError, match="not initialized"):
            get_feed_sessionmaker()

    @pytest.mark.asyncio
    async def test_check_connection_false(self):
        assert await check_feed_database_connection() is False

    @pytest.mark.asyncio
    async def test_close_is_noop(self):
        await close_feed_database()


class TestInitFeedDatabase:
    """Tests for init_feed_database and close_feed_database."""

    @pytest.mark.asyncio
    async def test_init_and_close(self):
        """Test engine creation from settings and disposal on close."""
        engine = MagicMock()
        engine.dispose = AsyncMock()
        settings = Settings()

        with patch.object(connection, "create_async_engine", return_value=engine) as create:
            await init_feed_database(settings)

        create.assert_called_once()
        assert create.call_args.args[0] == settings.database.url
        assert create.call_args.kwargs["pool_size"] == settings.database.pool_size
        assert connection._feed_engine is engine
        assert get_feed_sessionmaker() is not None

        await close_feed_database()

        engine.dispose.assert_awaited_once()
        assert connection._feed_engine is None
        with pytest.raises(DatabaseError):
            get_feed_sessionmaker()

    @pytest.mark.asyncio
    async def test_init_failure_wrapped(self):
        """Test that SQLAlchemy errors become DatabaseError."""
        with patch.object(
            connection,
            "create_async_engine",
            side_effect=ArgumentError("bad url"),
        ):
            with pytest.raises(DatabaseError, match="Failed to initialize"):
                await init_feed_database(Settings())
