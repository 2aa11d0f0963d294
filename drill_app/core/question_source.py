"""Question source boundary: schema validation and the JSON question bank.

Question sets arrive as loosely-typed JSON (from an AI generator or a
bank file). They are validated here against a strict schema so that the
engine only ever sees immutable, well-formed `QuizQuestion` values.

Bank file format (topic id -> list of raw questions):

    {
      "gemma": [
        {
          "id": "gemma-1",
          "question": "Which organisation released Gemma?",
          "options": [{"id": "a", "text": "Google"}, ...],   # exactly four
          "correctAnswerId": "a",
          "explanation": "optional",
          "difficulty": "easy"
        }
      ]
    }
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import random
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from drill_app.constants.quiz_constants import (
    DEFAULT_QUESTIONS_PER_QUIZ,
    MAX_QUESTIONS_PER_QUIZ,
    MIN_QUESTIONS_PER_QUIZ,
    OPTIONS_PER_QUESTION,
)
from drill_app.core.errors import QuestionSourceError
from drill_app.core.models import Difficulty, QuizOption, QuizQuestion

logger = logging.getLogger(__name__)


class QuestionRequest(BaseModel):
    """Parameters sent to the question source."""

    topic_id: str = Field(..., min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    num_questions: int = Field(
        DEFAULT_QUESTIONS_PER_QUIZ,
        ge=MIN_QUESTIONS_PER_QUIZ,
        le=MAX_QUESTIONS_PER_QUIZ,
    )


class OptionSchema(BaseModel):
    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class QuestionSchema(BaseModel):
    """Strict schema of a single generated question."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    options: list[OptionSchema]
    correct_answer_id: str = Field(..., alias="correctAnswerId", min_length=1)
    explanation: str | None = None
    difficulty: Difficulty

    @field_validator("options")
    @classmethod
    def _check_options(cls, options: list[OptionSchema]) -> list[OptionSchema]:
        if len(options) != OPTIONS_PER_QUESTION:
            raise ValueError(f"Each question must have exactly {OPTIONS_PER_QUESTION} options.")
        ids = [option.id for option in options]
        if len(set(ids)) != len(ids):
            raise ValueError("Option ids must be unique within a question.")
        return options

    @model_validator(mode="after")
    def _check_correct_answer(self) -> QuestionSchema:
        if self.correct_answer_id not in {option.id for option in self.options}:
            raise ValueError(f"Correct answer '{self.correct_answer_id}' is not one of the options.")
        return self

    def to_question(self) -> QuizQuestion:
        return QuizQuestion(
            id=self.id,
            prompt=self.question.strip(),
            options=tuple(QuizOption(id=o.id, text=o.text.strip()) for o in self.options),
            correct_option_id=self.correct_answer_id,
            difficulty=self.difficulty,
            explanation=self.explanation,
        )


class QuestionSetSchema(BaseModel):
    """Envelope returned by the question generator."""

    success: bool
    questions: list[QuestionSchema] = Field(default_factory=list)


def parse_question_set(payload: dict[str, Any]) -> list[QuizQuestion]:
    """Validate a generator response and convert it to engine questions."""
    try:
        envelope = QuestionSetSchema.model_validate(payload)
    except ValidationError as exc:
        raise QuestionSourceError(f"Question set failed validation: {exc}") from exc
    if not envelope.success:
        raise QuestionSourceError("Failed to generate quiz questions.")
    return [question.to_question() for question in envelope.questions]


def parse_questions(raw_questions: list[dict[str, Any]]) -> list[QuizQuestion]:
    return parse_question_set({"success": True, "questions": raw_questions})


class QuestionSource(Protocol):
    """Anything able to supply an ordered, validated question set."""

    def fetch_questions(self, request: QuestionRequest) -> list[QuizQuestion]:
        ...


@dataclass(slots=True)
class QuestionBankSource:
    """Serves questions from a pre-authored bank keyed by topic id."""

    bank: dict[str, list[QuizQuestion]]
    shuffle_seed: int | None = None

    @classmethod
    def from_file(cls, file_path: Path, shuffle_seed: int | None = None) -> QuestionBankSource:
        try:
            raw = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise QuestionSourceError(f"Could not read question bank {file_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise QuestionSourceError("Question bank must map topic ids to question lists.")

        bank = {topic_id: parse_questions(questions) for topic_id, questions in raw.items()}
        logger.info(
            "Loaded question bank %s with %d topic(s)",
            file_path,
            len(bank),
        )
        return cls(bank=bank, shuffle_seed=shuffle_seed)

    def fetch_questions(self, request: QuestionRequest) -> list[QuizQuestion]:
        candidates = [
            question
            for question in self.bank.get(request.topic_id, [])
            if question.difficulty == request.difficulty
        ]
        if not candidates:
            raise QuestionSourceError(
                f"No {request.difficulty.value} questions available for topic '{request.topic_id}'."
            )
        if self.shuffle_seed is not None:
            random.Random(self.shuffle_seed).shuffle(candidates)
        if len(candidates) < request.num_questions:
            logger.warning(
                "Topic %s has only %d %s question(s); %d were requested",
                request.topic_id,
                len(candidates),
                request.difficulty.value,
                request.num_questions,
            )
        return candidates[: request.num_questions]
