import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from conftest import raw_question
from drill_app.constants.quiz_constants import DEFAULT_QUESTIONS_PER_QUIZ
from drill_app.constants.storage_constants import QUESTION_BANK_PATH
from drill_app.constants.topics import QUIZ_TOPICS
from drill_app.core.errors import QuestionSourceError
from drill_app.core.models import Difficulty
from drill_app.core.question_source import (
    QuestionBankSource,
    QuestionRequest,
    parse_question_set,
)


def test_parse_question_set_builds_immutable_questions() -> None:
    payload = {"success": True, "questions": [raw_question("q1", correct="c", difficulty="hard")]}

    [question] = parse_question_set(payload)

    assert question.id == "q1"
    assert question.correct_option_id == "c"
    assert question.difficulty is Difficulty.HARD
    assert len(question.options) == 4
    assert isinstance(question.options, tuple)


def test_unsuccessful_generation_is_rejected() -> None:
    with pytest.raises(QuestionSourceError):
        parse_question_set({"success": False, "questions": []})


@pytest.mark.parametrize(
    "mutate",
    [
        lambda q: q["options"].pop(),
        lambda q: q["options"].append({"id": "e", "text": "Option e"}),
        lambda q: q["options"][1].update(id="a"),
        lambda q: q.update(correctAnswerId="z"),
        lambda q: q.update(difficulty="impossible"),
        lambda q: q.update(id=""),
    ],
)
def test_malformed_questions_are_rejected(mutate) -> None:
    question = raw_question("q1")
    mutate(question)
    with pytest.raises(QuestionSourceError):
        parse_question_set({"success": True, "questions": [question]})


def test_question_request_bounds() -> None:
    assert QuestionRequest(topic_id="gemma").num_questions == 5
    with pytest.raises(ValidationError):
        QuestionRequest(topic_id="gemma", num_questions=0)
    with pytest.raises(ValidationError):
        QuestionRequest(topic_id="gemma", num_questions=21)


def test_bank_source_filters_by_difficulty_and_truncates(tmp_path: Path) -> None:
    bank_file = tmp_path / "bank.json"
    bank_file.write_text(
        json.dumps(
            {
                "gemma": [
                    raw_question("g1"),
                    raw_question("g2", difficulty="easy"),
                    raw_question("g3"),
                    raw_question("g4"),
                ]
            }
        ),
        encoding="utf-8",
    )
    source = QuestionBankSource.from_file(bank_file)

    medium = source.fetch_questions(QuestionRequest(topic_id="gemma", num_questions=2))
    easy = source.fetch_questions(QuestionRequest(topic_id="gemma", difficulty=Difficulty.EASY))

    assert [q.id for q in medium] == ["g1", "g3"]
    assert [q.id for q in easy] == ["g2"]


def test_bank_source_shuffle_is_deterministic_for_seed(question_source) -> None:
    first = QuestionBankSource(bank=question_source.bank, shuffle_seed=7)
    second = QuestionBankSource(bank=question_source.bank, shuffle_seed=7)
    request = QuestionRequest(topic_id="gemma", num_questions=5)

    assert [q.id for q in first.fetch_questions(request)] == [q.id for q in second.fetch_questions(request)]
    assert [q.id for q in question_source.bank["gemma"]] == [f"gemma-{i}" for i in range(1, 6)]


def test_bank_source_without_matching_questions_fails(question_source) -> None:
    with pytest.raises(QuestionSourceError):
        question_source.fetch_questions(QuestionRequest(topic_id="adk"))


def test_unreadable_bank_file_fails(tmp_path: Path) -> None:
    bad = tmp_path / "bank.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(QuestionSourceError):
        QuestionBankSource.from_file(bad)
    with pytest.raises(QuestionSourceError):
        QuestionBankSource.from_file(tmp_path / "missing.json")


def test_bundled_bank_covers_every_topic() -> None:
    source = QuestionBankSource.from_file(QUESTION_BANK_PATH)
    for topic in QUIZ_TOPICS:
        assert source.bank.get(topic.id), topic.id


def test_bank_source_warns_when_topic_runs_short(question_source, caplog) -> None:
    request = QuestionRequest(topic_id="genkit", difficulty=Difficulty.EASY, num_questions=5)

    with caplog.at_level(logging.WARNING, logger="drill_app.core.question_source"):
        questions = question_source.fetch_questions(request)

    assert len(questions) == 1
    assert "only 1 easy question(s); 5 were requested" in caplog.text


def test_bundled_bank_serves_default_drill_for_every_topic(caplog) -> None:
    source = QuestionBankSource.from_file(QUESTION_BANK_PATH)

    with caplog.at_level(logging.WARNING, logger="drill_app.core.question_source"):
        for topic in QUIZ_TOPICS:
            questions = source.fetch_questions(QuestionRequest(topic_id=topic.id))
            assert len(questions) == DEFAULT_QUESTIONS_PER_QUIZ, topic.id

    assert "were requested" not in caplog.text
