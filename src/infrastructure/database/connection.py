# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event store database connection management using SQLAlchemy async.

This module provides async database connections for the store holding
actors and their event logs. The feed engine only reads from it.

Uses SQLAlchemy 2.0 async API with asyncpg driver.

Example:
    from src.infrastructure.database.connection import (
        init_feed_database,
        get_feed_sessionmaker,
    )

    # Initialize at application startup
    await init_feed_database(settings)

    # Each store call opens its own short session
    async with get_feed_sessionmaker()() as session:
        result = await session.execute(select(ActorRow))
        actors = result.scalars().all()
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.infrastructure.database.models import Base

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Module-level state for the event store connection
_feed_engine: Optional[AsyncEngine] = None
_feed_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


async def init_feed_database(settings: "Settings", create_schema: bool = False) -> None:
    """Initialize the event store connection pool.

    This should be called once at application startup.

    Args:
        settings: Application settings containing database configuration.
        create_schema: Create missing tables (development setups).

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _feed_engine, _feed_sessionmaker

    try:
        _feed_engine = create_async_engine(
            settings.database.url,
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
            echo=settings.database.echo,
        )

        _feed_sessionmaker = async_sessionmaker(
            bind=_feed_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        if create_schema:
            async with _feed_engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize event store connection", e) from e


async def close_feed_database() -> None:
    """Close the event store connection pool.

    This should be called at application shutdown to properly
    close all connections in the pool.
    """
    global _feed_engine, _feed_sessionmaker

    if _feed_engine is not None:
        await _feed_engine.dispose()
        _feed_engine = None
        _feed_sessionmaker = None


def get_feed_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the event store sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _feed_sessionmaker is None:
        raise DatabaseError(
            "Event store database not initialized. Call init_feed_database() first."
        )
    return _feed_sessionmaker


async def check_feed_database_connection() -> bool:
    """Check if the event store is reachable.

    Performs a simple query to verify database connectivity.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _feed_engine is None:
        return False

    try:
        async with _feed_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
