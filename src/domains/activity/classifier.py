# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record classification for display.

classify() is a pure, total function: every ActivityRecord, complete or
not, yields exactly one Classification, and the same record always yields
the same result. The decision order, first match wins:

1. Instructor records, by substring of ``action``:
   enroll, quiz/test, theme, assign, anything else.
2. Learner records whose current level exceeds the previous level (0 when
   absent) are level-ups. Level-ups carry no metric.
3. Other learner records are quiz results, categorized and scored by mode.

Free text taken from records is HTML-escaped before it is placed in
description_html.
"""

import html
import math
import re
from collections.abc import Mapping
from typing import Any

from src.domains.activity.schemas import (
    ActivityCategory,
    ActivityRecord,
    Classification,
    Mode,
    Number,
    as_number,
    as_text,
)

_STYLES: dict[ActivityCategory, tuple[str, str]] = {
    ActivityCategory.ENROLLMENT: ("bg-gradient-to-br from-green-400 to-green-600", "users"),
    ActivityCategory.QUIZ_CREATION: ("bg-gradient-to-br from-purple-400 to-purple-600", "file-plus"),
    ActivityCategory.CONTENT_UPLOAD: ("bg-gradient-to-br from-amber-400 to-amber-600", "puzzle"),
    ActivityCategory.ASSIGNMENT: ("bg-gradient-to-br from-blue-400 to-blue-600", "play"),
    ActivityCategory.GENERIC_ACTION: ("bg-gradient-to-br from-gray-400 to-gray-600", "activity"),
    ActivityCategory.LEVEL_UP: ("bg-gradient-to-br from-yellow-400 to-orange-500", "award"),
    ActivityCategory.LEVEL_BASED_QUIZ: ("bg-gradient-to-br from-blue-400 to-blue-600", "target"),
    ActivityCategory.THEMATIC_QUIZ: ("bg-gradient-to-br from-purple-400 to-purple-600", "zap"),
    ActivityCategory.STORY_QUIZ: ("bg-gradient-to-br from-indigo-400 to-indigo-600", "book-open"),
    ActivityCategory.PRETEST_RESULT: ("bg-gradient-to-br from-teal-400 to-teal-600", "bar-chart-3"),
    ActivityCategory.QUIZ_RESULT: ("bg-gradient-to-br from-green-400 to-green-600", "trending-up"),
}

_QUIZ_CATEGORIES: dict[Mode | None, ActivityCategory] = {
    Mode.PRETEST: ActivityCategory.PRETEST_RESULT,
    Mode.LEVEL_BASED: ActivityCategory.LEVEL_BASED_QUIZ,
    Mode.THEMATIC: ActivityCategory.THEMATIC_QUIZ,
    Mode.STORY: ActivityCategory.STORY_QUIZ,
    None: ActivityCategory.QUIZ_RESULT,
}

_QUIZ_NAMES: dict[Mode | None, str] = {
    Mode.PRETEST: "Pretest",
    Mode.LEVEL_BASED: "Level-Based Learning Quiz",
    Mode.THEMATIC: "Thematic Learning Quiz",
    Mode.STORY: "Story Mode Quiz",
    None: "a quiz",
}

_ASSIGNMENT_NAMES: dict[Mode | None, str] = {
    Mode.THEMATIC: "Thematic Learning",
    Mode.LEVEL_BASED: "Level-Based Learning",
}

POSITIVE = "text-green-600"
NEUTRAL = "text-blue-600"
ATTENTION = "text-orange-600"

_TAG = re.compile(r"<[^>]+>")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (83.5 -> 84)."""
    return math.floor(value + 0.5)


def format_number(value: Number) -> str:
    """Render a number without a trailing ".0" for integral values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _integral(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def resolve_metric(record: ActivityRecord) -> Number | None:
    """Progress metric of a learner quiz result, chosen by mode.

    - pretest: accuracy rate, rounded
    - level-based: experience points, capped at 100
    - anything else: percentage, rounded

    Returns:
        The metric, or None when the mode's source field is absent.
    """
    mode = record.resolved_mode
    if mode is Mode.PRETEST:
        accuracy = record.accuracy_rate
        return round_half_up(accuracy) if accuracy is not None else None
    if mode is Mode.LEVEL_BASED:
        exp = record.total_exp
        return _integral(min(100, exp)) if exp is not None else None
    percentage = record.percentage
    return round_half_up(percentage) if percentage is not None else None


def score_emphasis(metric: Number) -> str:
    """Emphasis class of a score: positive, neutral or attention."""
    if metric >= 80:
        return POSITIVE
    if metric >= 60:
        return NEUTRAL
    return ATTENTION


def _strong(text: str, css: str | None = None) -> str:
    if css:
        return f'<strong class="{css}">{text}</strong>'
    return f"<strong>{text}</strong>"


def _students(count: Number) -> str:
    suffix = "" if count == 1 else "s"
    return f"{format_number(count)} student{suffix}"


def _detail_text(details: Mapping[str, Any] | None, key: str, default: str) -> str:
    value = details.get(key) if details is not None else None
    if as_number(value) is not None:
        value = format_number(value)
    text = as_text(value)
    return html.escape(text if text is not None else default)


def _detail_count(details: Mapping[str, Any] | None, key: str) -> Number:
    """Stored count, accepting numeric strings such as "5"; 1 when unusable."""
    value = details.get(key) if details is not None else None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            value = None
    count = as_number(value)
    return count if count is not None else 1


def _build(
    category: ActivityCategory,
    description_html: str,
    metric: Number | None = None,
) -> Classification:
    color_class, icon_key = _STYLES[category]
    return Classification(
        category=category,
        color_class=color_class,
        icon_key=icon_key,
        description_html=description_html,
        description=html.unescape(_TAG.sub("", description_html)),
        metric=metric,
    )


def _classify_instructor(record: ActivityRecord) -> Classification:
    action = (record.action or "").lower()
    details = record.details

    if "enroll" in action:
        count = _detail_count(details, "count")
        return _build(
            ActivityCategory.ENROLLMENT,
            f"enrolled {_strong(_students(count), 'text-green-600')}",
            metric=_integral(count),
        )

    if "quiz" in action or "test" in action:
        theme = _detail_text(details, "themeName", "a new quiz")
        return _build(
            ActivityCategory.QUIZ_CREATION,
            f"created a quiz in {_strong(theme, 'text-purple-600')}",
        )

    if "theme" in action:
        name = _detail_text(details, "name", "a theme")
        return _build(
            ActivityCategory.CONTENT_UPLOAD,
            f"uploaded {_strong(name, 'text-amber-600')}",
        )

    if "assign" in action:
        mode = Mode.resolve(details.get("mode")) if details is not None else None
        mode_name = _ASSIGNMENT_NAMES.get(mode, "Story Mode")
        count = _detail_count(details, "studentCount")
        return _build(
            ActivityCategory.ASSIGNMENT,
            f"assigned {_strong(mode_name, 'text-blue-600')} to {_strong(_students(count))}",
        )

    return _build(ActivityCategory.GENERIC_ACTION, "performed an action")


def _classify_learner(record: ActivityRecord) -> Classification:
    if record.leveled_up:
        level = format_number(record.current_level)
        return _build(
            ActivityCategory.LEVEL_UP,
            f"leveled up to {_strong(f'Level {level}', 'text-yellow-600')}",
        )

    mode = record.resolved_mode
    mode_name = _QUIZ_NAMES[mode]
    metric = resolve_metric(record)
    if metric is None:
        description = f"completed {mode_name}"
    else:
        score = _strong(f"{format_number(metric)}% score", score_emphasis(metric))
        description = f"completed {mode_name} with {score}"
    return _build(_QUIZ_CATEGORIES[mode], description, metric=metric)


def classify(record: ActivityRecord) -> Classification:
    """Derive display metadata for one record.

    Args:
        record: Any ActivityRecord; missing fields take their defaults.

    Returns:
        The record's Classification.
    """
    if record.is_instructor:
        return _classify_instructor(record)
    return _classify_learner(record)
