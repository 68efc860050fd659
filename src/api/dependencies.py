# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the feed service bound to the event store
- Get application settings

Example:
    @router.get("/recent")
    async def recent(
        service: ActivityFeedService = Depends(get_feed_service),
    ):
        ...
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from src.core.config import Settings, get_settings
from src.domains.activity import ActivityFeedService
from src.infrastructure.database import (
    SQLActivityStore,
    close_feed_database,
    get_feed_sessionmaker,
    init_feed_database,
)

logger = logging.getLogger(__name__)

# Feed service singleton
_feed_service: ActivityFeedService | None = None


async def init_db() -> None:
    """Initialize the event store connection and the feed service."""
    global _feed_service
    settings = get_settings()

    await init_feed_database(settings, create_schema=settings.is_development)

    _feed_service = ActivityFeedService(
        SQLActivityStore(get_feed_sessionmaker()),
        settings=settings.feed,
    )


async def close_db() -> None:
    """Close the event store connection and drop the feed service."""
    global _feed_service

    _feed_service = None
    await close_feed_database()


def get_feed_service() -> ActivityFeedService:
    """Get the feed service.

    Returns:
        The application-wide ActivityFeedService.

    Raises:
        HTTPException: If the event store was never initialized.
    """
    if _feed_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Activity feed is not available",
        )
    return _feed_service


# Type aliases for dependency injection
FeedServiceDep = Annotated[ActivityFeedService, Depends(get_feed_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
