# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed schemas.

This module defines the models that flow through the feed pipeline:
- ActorProfile: a learner or instructor as read from the store
- ActivityRecord: one normalized event, immutable once built
- ActivityGroup: records sharing a day label
- Classification: display metadata derived from one record
- ActivityDetails and its panels: the expanded view of one record

Raw events are loosely structured and vary by population and by their
mode/action discriminator. ActivityRecord keeps every raw field verbatim
in ``payload`` and exposes typed accessors that return None for any field
that is missing or has the wrong type, so downstream stages never fail on
an incomplete event.
"""

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

Number = int | float


class ActorRole(str, Enum):
    """Display role of the actor that produced an event."""

    LEARNER = "Learner"
    INSTRUCTOR = "Instructor"


class Population(str, Enum):
    """Actor population with its own event-log storage."""

    LEARNER = "learner"
    INSTRUCTOR = "instructor"

    @property
    def role(self) -> ActorRole:
        """Role carried by every actor of this population."""
        if self is Population.INSTRUCTOR:
            return ActorRole.INSTRUCTOR
        return ActorRole.LEARNER

    @property
    def default_actor_name(self) -> str:
        """Name used when an actor profile has no display name."""
        if self is Population.INSTRUCTOR:
            return "Teacher"
        return "Student"


class Mode(str, Enum):
    """Learning mode of a learner quiz result."""

    PRETEST = "pretest"
    LEVEL_BASED = "level-based"
    THEMATIC = "thematic"
    STORY = "story"

    @classmethod
    def resolve(cls, value: Any) -> "Mode | None":
        """Resolve a stored mode string to a Mode.

        The store also uses the short codes "LBLM" (level-based) and "TLM"
        (thematic). Matching ignores case and treats "_" and spaces as "-".

        Returns:
            The matching Mode, or None for absent or unknown values.
        """
        if not isinstance(value, str):
            return None
        key = value.strip().lower().replace("_", "-").replace(" ", "-")
        return _MODE_ALIASES.get(key)


_MODE_ALIASES: dict[str, Mode] = {
    "pretest": Mode.PRETEST,
    "level-based": Mode.LEVEL_BASED,
    "levelbased": Mode.LEVEL_BASED,
    "lblm": Mode.LEVEL_BASED,
    "thematic": Mode.THEMATIC,
    "tlm": Mode.THEMATIC,
    "story": Mode.STORY,
}


def as_number(value: Any) -> Number | None:
    """Return value if it is a finite real number (bools excluded), else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def as_text(value: Any) -> str | None:
    """Return value if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


class ActorProfile(BaseModel):
    """An actor as stored: a learner or an instructor.

    Attributes:
        id: Actor identifier within its population.
        display_name: Name shown in the feed, if the profile has one.
        role: Learner or Instructor.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str | None = None
    role: ActorRole


class ActivityRecord(BaseModel):
    """One normalized event of one actor.

    Attributes:
        id: Event id, unique within the owning actor's log only.
        actor_id: Owning actor id.
        actor_name: Owning actor display name.
        actor_role: Owning actor role.
        timestamp: Aware UTC time of the event, or None when the store had
            no usable timestamp.
        payload: Every raw field except the timestamp, verbatim, behind a
            read-only mapping.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    actor_id: str
    actor_name: str
    actor_role: ActorRole
    timestamp: datetime | None = None
    payload: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("payload", mode="after")
    @classmethod
    def freeze_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("payload")
    def serialize_payload(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    @property
    def is_instructor(self) -> bool:
        return self.actor_role is ActorRole.INSTRUCTOR

    @property
    def mode(self) -> str | None:
        """Raw mode string as stored."""
        return as_text(self.payload.get("mode"))

    @property
    def resolved_mode(self) -> Mode | None:
        return Mode.resolve(self.payload.get("mode"))

    @property
    def action(self) -> str | None:
        return as_text(self.payload.get("action"))

    @property
    def accuracy_rate(self) -> Number | None:
        return as_number(self.payload.get("accuracyRate"))

    @property
    def total_exp(self) -> Number | None:
        return as_number(self.payload.get("totalExp"))

    @property
    def percentage(self) -> Number | None:
        return as_number(self.payload.get("percentage"))

    @property
    def score(self) -> Number | None:
        return as_number(self.payload.get("score"))

    @property
    def total_questions(self) -> Number | None:
        return as_number(self.payload.get("totalQuestions"))

    @property
    def current_level(self) -> Number | None:
        return as_number(self.payload.get("currentLevel"))

    @property
    def previous_level(self) -> Number | None:
        return as_number(self.payload.get("previousLevel"))

    @property
    def details(self) -> Mapping[str, Any] | None:
        """Instructor action details mapping."""
        value = self.payload.get("details")
        return value if isinstance(value, Mapping) else None

    @property
    def answers(self) -> Sequence[Any] | None:
        """Per-question answers of a learner quiz result."""
        value = self.payload.get("answers")
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return None
        return value

    @property
    def leveled_up(self) -> bool:
        """Whether the current level exceeds the previous one (default 0)."""
        current = self.current_level
        if current is None:
            return False
        return current > (self.previous_level or 0)


class ActivityGroup(BaseModel):
    """Records sharing one day label, in rank order.

    Attributes:
        label: "Today", "Yesterday", or a date such as "Apr 3, 2025".
        day: Calendar date of the bucket in the feed timezone.
        records: Records of that day, most recent first.
    """

    label: str
    day: date
    records: list[ActivityRecord] = Field(default_factory=list)


class ActivityCategory(str, Enum):
    """Display category of a record."""

    ENROLLMENT = "Enrollment"
    QUIZ_CREATION = "QuizCreation"
    CONTENT_UPLOAD = "ContentUpload"
    ASSIGNMENT = "Assignment"
    GENERIC_ACTION = "GenericAction"
    LEVEL_UP = "LevelUp"
    PRETEST_RESULT = "PretestResult"
    LEVEL_BASED_QUIZ = "LevelBasedQuiz"
    THEMATIC_QUIZ = "ThematicQuiz"
    STORY_QUIZ = "StoryQuiz"
    QUIZ_RESULT = "QuizResult"


class Classification(BaseModel):
    """Presentation metadata derived from one record.

    Attributes:
        category: Display category.
        color_class: Background style class for the category.
        icon_key: Icon name for the category.
        description_html: Action text with emphasis spans.
        description: Same text without markup.
        metric: Progress-style number, or None.
    """

    model_config = ConfigDict(frozen=True)

    category: ActivityCategory
    color_class: str
    icon_key: str
    description_html: str
    description: str
    metric: Number | None = None


class ScoreTone(str, Enum):
    """Banding of a score in the detail view."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    LOW = "low"


class ScorePanel(BaseModel):
    """Score breakdown of a quiz result."""

    title: str
    metric: Number | None = None
    metric_label: str
    fraction: str | None = None
    total_exp: Number | None = None
    tone: ScoreTone


class LevelPanel(BaseModel):
    """Level reached by a learner."""

    current_level: Number
    previous_level: Number = 0
    leveled_up: bool = False


class QuestionResult(BaseModel):
    """One answered question of a learner quiz result."""

    index: int
    question: str
    answer: str
    correct: bool
    correct_answer: str | None = None


class ActivityDetails(BaseModel):
    """Expanded view of one record.

    Panels that do not apply to the record are None.
    """

    record: ActivityRecord
    classification: Classification
    date_label: str
    time_label: str | None = None
    score: ScorePanel | None = None
    level: LevelPanel | None = None
    instructor_details: dict[str, Any] | None = None
    questions: list[QuestionResult] | None = None
