from datetime import datetime, timedelta, timezone

import pytest

from drill_app.core.attempt_store import InMemoryAttemptStore
from drill_app.core.models import Difficulty, QuizOption, QuizQuestion
from drill_app.core.question_source import QuestionBankSource
from drill_app.core.quiz_engine import QuizEngine
from drill_app.core.services.attempt_state_machine import AttemptStateMachine


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 6, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_question(question_id: str, correct: str = "b", difficulty: Difficulty = Difficulty.MEDIUM) -> QuizQuestion:
    return QuizQuestion(
        id=question_id,
        prompt=f"Prompt for {question_id}?",
        options=tuple(QuizOption(id=letter, text=f"Option {letter}") for letter in "abcd"),
        correct_option_id=correct,
        difficulty=difficulty,
    )


def raw_question(question_id: str, correct: str = "a", difficulty: str = "medium") -> dict:
    return {
        "id": question_id,
        "question": f"Prompt for {question_id}?",
        "options": [{"id": letter, "text": f"Option {letter}"} for letter in "abcd"],
        "correctAnswerId": correct,
        "difficulty": difficulty,
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def questions() -> list[QuizQuestion]:
    return [make_question(f"q{i}") for i in range(1, 6)]


@pytest.fixture
def machine(clock: FakeClock) -> AttemptStateMachine:
    return AttemptStateMachine(clock=clock)


@pytest.fixture
def attempt_store() -> InMemoryAttemptStore:
    return InMemoryAttemptStore()


@pytest.fixture
def question_source() -> QuestionBankSource:
    return QuestionBankSource(
        bank={
            "gemma": [make_question(f"gemma-{i}") for i in range(1, 6)],
            "genkit": [make_question("genkit-1", difficulty=Difficulty.EASY)],
        }
    )


@pytest.fixture
def engine(question_source: QuestionBankSource, attempt_store: InMemoryAttemptStore, clock: FakeClock) -> QuizEngine:
    return QuizEngine(question_source=question_source, attempt_store=attempt_store, clock=clock)
