# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from collections.abc import Callable, Generator
from datetime import datetime, timezone
from typing import Any

import pytest

from src.core.config import clear_settings_cache
from src.domains.activity import (
    ActivityRecord,
    ActorProfile,
    ActorRole,
    InMemoryActivityStore,
    Population,
)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (in-memory store)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Reload settings for every test so environment patches take effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Clock Fixtures
# =============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Provide a fixed "now": Thursday Apr 3, 2025, 15:00 UTC."""
    return datetime(2025, 4, 3, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(fixed_now: datetime) -> Callable[[], datetime]:
    """Provide a clock that always returns fixed_now."""
    return lambda: fixed_now


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def make_record() -> Callable[..., ActivityRecord]:
    """Provide a factory for ActivityRecords.

    Keyword arguments not matching a record field go into the payload.
    """

    def _make(
        *,
        id: str | None = "e1",
        actor_id: str = "s1",
        actor_name: str = "Ada",
        role: ActorRole = ActorRole.LEARNER,
        timestamp: datetime | None = None,
        **payload: Any,
    ) -> ActivityRecord:
        return ActivityRecord(
            id=id,
            actor_id=actor_id,
            actor_name=actor_name,
            actor_role=role,
            timestamp=timestamp,
            payload=payload,
        )

    return _make


@pytest.fixture
def learner() -> ActorProfile:
    """Provide a learner profile."""
    return ActorProfile(id="s1", display_name="Ada", role=ActorRole.LEARNER)


@pytest.fixture
def instructor() -> ActorProfile:
    """Provide an instructor profile."""
    return ActorProfile(id="t1", display_name="Mr. Lee", role=ActorRole.INSTRUCTOR)


@pytest.fixture
def memory_store(learner: ActorProfile, instructor: ActorProfile) -> InMemoryActivityStore:
    """Provide an in-memory store with one learner and one instructor."""
    store = InMemoryActivityStore()
    store.add_actor(Population.LEARNER, learner)
    store.add_actor(Population.INSTRUCTOR, instructor)
    return store
