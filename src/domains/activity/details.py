# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Detail projection of a single record.

project_details() selects every supplemental panel that applies to a
record, in this order:

- score: quiz results (pretest or level-based mode, or a percentage)
- level: records carrying a current level
- instructor_details: instructor records with a details mapping
- questions: records with per-question answers

Several panels can apply at once. The record is never modified.
"""

import copy
from collections.abc import Mapping
from datetime import timezone, tzinfo
from typing import Any

from src.domains.activity.classifier import classify, format_number, resolve_metric
from src.domains.activity.schemas import (
    ActivityDetails,
    ActivityRecord,
    LevelPanel,
    Mode,
    Number,
    QuestionResult,
    ScorePanel,
    ScoreTone,
    as_number,
    as_text,
)
from src.utils.datetime import format_date_label, format_time_label

NOT_AVAILABLE = "Not available"
NO_ANSWER = "No answer provided"


def score_tone(metric: Number | None) -> ScoreTone:
    """Band a score for the detail view; a missing score counts as 0."""
    value = metric if metric is not None else 0
    if value >= 90:
        return ScoreTone.EXCELLENT
    if value >= 75:
        return ScoreTone.GOOD
    if value >= 60:
        return ScoreTone.FAIR
    return ScoreTone.LOW


def _fraction(record: ActivityRecord) -> str:
    score = record.score
    total = record.total_questions
    score_text = format_number(score) if score is not None else "?"
    # A zero total is shown as unknown, like a missing one.
    total_text = format_number(total) if total else "?"
    return f"{score_text}/{total_text}"


def _score_panel(record: ActivityRecord) -> ScorePanel | None:
    mode = record.resolved_mode
    percentage = record.percentage
    if mode not in (Mode.PRETEST, Mode.LEVEL_BASED) and percentage is None:
        return None

    metric = resolve_metric(record)
    fraction = None
    total_exp = None
    if mode is Mode.PRETEST:
        title = "Pretest Accuracy"
        if record.score is not None:
            fraction = _fraction(record)
    elif mode is Mode.LEVEL_BASED:
        title = "Quiz Experience Points"
        total_exp = record.total_exp
    else:
        title = "Performance Score"
        fraction = _fraction(record)

    return ScorePanel(
        title=title,
        metric=metric,
        metric_label=f"{format_number(metric)}%" if metric is not None else "—",
        fraction=fraction,
        total_exp=total_exp,
        tone=score_tone(metric),
    )


def _level_panel(record: ActivityRecord) -> LevelPanel | None:
    current = record.current_level
    if current is None:
        return None
    return LevelPanel(
        current_level=current,
        previous_level=record.previous_level or 0,
        leveled_up=record.leveled_up,
    )


def _answer_text(answer: Mapping[str, Any]) -> str:
    user_answer = answer.get("userAnswer")
    if user_answer not in (None, ""):
        return str(user_answer)

    selected = answer.get("selectedOption")
    options = answer.get("options")
    if (
        isinstance(selected, int)
        and not isinstance(selected, bool)
        and isinstance(options, list)
        and 0 <= selected < len(options)
        and options[selected] not in (None, "")
    ):
        return str(options[selected])

    return NO_ANSWER


def _question_result(index: int, answer: Any) -> QuestionResult:
    if not isinstance(answer, Mapping):
        return QuestionResult(
            index=index,
            question=f"Question {index + 1}",
            answer=NO_ANSWER,
            correct=False,
        )

    question = as_text(answer.get("question")) or as_text(answer.get("word"))
    correct = bool(answer.get("correct"))
    correct_answer = answer.get("correctAnswer")
    return QuestionResult(
        index=index,
        question=question or f"Question {index + 1}",
        answer=_answer_text(answer),
        correct=correct,
        correct_answer=None if correct or correct_answer in (None, "") else str(correct_answer),
    )


def _questions(record: ActivityRecord) -> list[QuestionResult] | None:
    answers = record.answers
    if answers is None:
        return None
    return [_question_result(index, answer) for index, answer in enumerate(answers)]


def _instructor_details(record: ActivityRecord) -> dict[str, Any] | None:
    if not record.is_instructor:
        return None
    details = record.details
    if details is None:
        return None
    return copy.deepcopy(dict(details))


def project_details(record: ActivityRecord, tz: tzinfo = timezone.utc) -> ActivityDetails:
    """Build the expanded view of one record.

    Args:
        record: Record to inspect.
        tz: Timezone for the date and time labels.

    Returns:
        ActivityDetails with every applicable panel filled in.
    """
    timestamp = record.timestamp
    return ActivityDetails(
        record=record,
        classification=classify(record),
        date_label=format_date_label(timestamp, tz) if timestamp else NOT_AVAILABLE,
        time_label=format_time_label(timestamp, tz) if timestamp else None,
        score=_score_panel(record),
        level=_level_panel(record),
        instructor_details=_instructor_details(record),
        questions=_questions(record),
    )
