"""Scoring of a finished attempt.

Scoring is a pure function of the question snapshot and the recorded
answers: it never mutates its inputs and can be re-run on the same data
with the same outcome.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from drill_app.constants.quiz_constants import (
    FEEDBACK_BANDS,
    FEEDBACK_BELOW_PASS,
    PASS_THRESHOLD_PERCENT,
    RECOMMENDATION_FAILED,
    RECOMMENDATION_PASSED,
)
from drill_app.core.models import QuizQuestion, RecordedAnswer, ScoredAnswer
from drill_app.utils.rounding import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    """Everything the scoring pass derives for one attempt."""

    validated_answers: tuple[ScoredAnswer, ...]
    score: int
    max_score: int
    percentage: int
    passed: bool
    feedback: str
    recommendation: str
    orphan_question_ids: tuple[str, ...] = ()


def score_answers(
    questions: Sequence[QuizQuestion],
    answers: Sequence[RecordedAnswer],
) -> ScoreSummary:
    """Validate recorded answers against the question snapshot and aggregate them.

    Skipped questions still count toward `max_score`. An answer whose
    question id is not in the snapshot is scored as incorrect and kept in
    the result so the caller can inspect it.
    """
    questions_by_id = {question.id: question for question in questions}

    validated: list[ScoredAnswer] = []
    orphans: list[str] = []
    for answer in answers:
        question = questions_by_id.get(answer.question_id)
        if question is None:
            orphans.append(answer.question_id)
            is_correct = False
        else:
            is_correct = question.correct_option_id == answer.selected_option_id
        validated.append(ScoredAnswer.from_recorded(answer, is_correct))

    if orphans:
        logger.warning("Scoring %d answer(s) for unknown questions as incorrect: %s", len(orphans), orphans)

    score = sum(1 for answer in validated if answer.is_correct)
    max_score = len(questions)
    percentage = compute_percentage(score, max_score)
    passed = is_passing(percentage)

    return ScoreSummary(
        validated_answers=tuple(validated),
        score=score,
        max_score=max_score,
        percentage=percentage,
        passed=passed,
        feedback=feedback_for(percentage),
        recommendation=recommendation_for(passed),
        orphan_question_ids=tuple(orphans),
    )


def compute_percentage(score: int, max_score: int) -> int:
    if max_score <= 0:
        return 0
    return round_half_up(score / max_score * 100)


def is_passing(percentage: int) -> bool:
    return percentage >= PASS_THRESHOLD_PERCENT


def feedback_for(percentage: int) -> str:
    for threshold, message in FEEDBACK_BANDS:
        if percentage >= threshold:
            return message
    return FEEDBACK_BELOW_PASS


def recommendation_for(passed: bool) -> str:
    return RECOMMENDATION_PASSED if passed else RECOMMENDATION_FAILED
