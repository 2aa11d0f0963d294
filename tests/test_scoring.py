import logging

import pytest

from conftest import make_question
from drill_app.core.models import RecordedAnswer
from drill_app.core.services.scoring import (
    compute_percentage,
    feedback_for,
    recommendation_for,
    score_answers,
)


def _answer(question_id: str, option_id: str, time_taken: int = 5) -> RecordedAnswer:
    return RecordedAnswer(question_id=question_id, selected_option_id=option_id, time_taken=time_taken)


def test_all_correct_scores_full_marks(questions) -> None:
    answers = [_answer(q.id, q.correct_option_id) for q in questions]

    summary = score_answers(questions, answers)

    assert summary.score == 5
    assert summary.max_score == 5
    assert summary.percentage == 100
    assert summary.passed is True
    assert "mastered" in summary.feedback
    assert all(a.is_correct for a in summary.validated_answers)


def test_three_of_five_fails_with_keep_studying(questions) -> None:
    answers = [
        _answer("q1", "b"),
        _answer("q2", "a"),
        _answer("q3", "b"),
        _answer("q4", "b"),
        _answer("q5", "d"),
    ]

    summary = score_answers(questions, answers)

    assert summary.score == 3
    assert summary.percentage == 60
    assert summary.passed is False
    assert summary.feedback.startswith("Keep studying")
    assert summary.recommendation == "Review the material and try again."
    assert [a.is_correct for a in summary.validated_answers] == [True, False, True, True, False]


def test_no_answers_scores_zero_against_full_denominator(questions) -> None:
    summary = score_answers(questions, [])
    assert summary.score == 0
    assert summary.max_score == 5
    assert summary.percentage == 0
    assert summary.passed is False
    assert summary.validated_answers == ()


def test_orphan_answer_is_incorrect_and_retained(questions, caplog) -> None:
    answers = [_answer("q1", "b"), _answer("ghost", "b")]

    with caplog.at_level(logging.WARNING):
        summary = score_answers(questions, answers)

    assert summary.score == 1
    assert summary.max_score == 5
    orphan = next(a for a in summary.validated_answers if a.question_id == "ghost")
    assert orphan.is_correct is False
    assert summary.orphan_question_ids == ("ghost",)
    assert "unknown questions" in caplog.text


def test_scoring_does_not_mutate_inputs(questions) -> None:
    answers = [_answer("q1", "b")]
    score_answers(questions, answers)
    assert answers == [_answer("q1", "b")]
    assert len(questions) == 5


def test_skipped_question_counts_toward_max_score() -> None:
    questions = [make_question("q1"), make_question("q2")]
    summary = score_answers(questions, [_answer("q1", "b")])
    assert summary.max_score == 2
    assert summary.percentage == 50


@pytest.mark.parametrize(
    ("percentage", "fragment"),
    [
        (100, "mastered"),
        (90, "mastered"),
        (89, "solid understanding"),
        (80, "solid understanding"),
        (79, "room for improvement"),
        (70, "room for improvement"),
        (69, "Keep studying"),
        (0, "Keep studying"),
    ],
)
def test_feedback_bands(percentage: int, fragment: str) -> None:
    assert fragment in feedback_for(percentage)


def test_pass_threshold_boundary() -> None:
    questions = [make_question(f"q{i}") for i in range(10)]
    seven = [_answer(f"q{i}", "b") for i in range(7)]
    six = [_answer(f"q{i}", "b") for i in range(6)]

    assert score_answers(questions, seven).passed is True
    assert score_answers(questions, six).passed is False


def test_percentage_rounding() -> None:
    assert compute_percentage(1, 3) == 33
    assert compute_percentage(2, 3) == 67
    assert compute_percentage(1, 8) == 13
    assert compute_percentage(0, 0) == 0


def test_recommendation_text() -> None:
    assert "increase difficulty" in recommendation_for(True)
    assert "try again" in recommendation_for(False)
