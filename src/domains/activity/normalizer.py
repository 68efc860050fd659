# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event normalization.

Turns one raw store event plus the profile of the actor that owns it into
an ActivityRecord. Raw fields are carried over untouched apart from their
keys, which become strings. Only the timestamp is converted, and an
unusable timestamp becomes None.
"""

import copy

from src.domains.activity.schemas import (
    ActivityRecord,
    ActorProfile,
    ActorRole,
    Population,
)
from src.domains.activity.store import RawEvent
from src.utils.datetime import coerce_timestamp


def default_actor_name(role: ActorRole) -> str:
    """Fallback display name for an actor without one."""
    if role is ActorRole.INSTRUCTOR:
        return Population.INSTRUCTOR.default_actor_name
    return Population.LEARNER.default_actor_name


def normalize_event(raw: RawEvent, actor: ActorProfile) -> ActivityRecord:
    """Build an ActivityRecord from a raw event.

    Args:
        raw: Raw event mapping as returned by the store.
        actor: Profile of the actor owning the event.

    Returns:
        A new, independent ActivityRecord.

    Raises:
        ValueError: If the event cannot form a record.
        TypeError: If a field value cannot be copied.
    """
    payload = {
        str(key): copy.deepcopy(value) for key, value in raw.items() if key != "timestamp"
    }

    raw_id = payload.get("id")
    record_id = str(raw_id) if raw_id is not None else None

    return ActivityRecord(
        id=record_id,
        actor_id=actor.id,
        actor_name=actor.display_name or default_actor_name(actor.role),
        actor_role=actor.role,
        timestamp=coerce_timestamp(raw.get("timestamp")),
        payload=payload,
    )
