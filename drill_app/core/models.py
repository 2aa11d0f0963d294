"""Domain models for the quiz session engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from drill_app.utils.rounding import round_half_up


class Difficulty(str, Enum):
    """Difficulty level requested from the question source."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class QuizOption:
    id: str
    text: str


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    """Multiple-choice question with exactly four options. Immutable once generated."""

    id: str
    prompt: str
    options: tuple[QuizOption, ...]
    correct_option_id: str
    difficulty: Difficulty = Difficulty.MEDIUM
    explanation: str | None = None


@dataclass(frozen=True, slots=True)
class QuizTopic:
    """Entry of the static topic catalog."""

    id: str
    name: str
    description: str
    icon: str
    color: str


@dataclass(frozen=True, slots=True)
class RecordedAnswer:
    """A raw selection and its timing; correctness is not known yet."""

    question_id: str
    selected_option_id: str
    time_taken: int  # seconds


@dataclass(frozen=True, slots=True)
class ScoredAnswer:
    """A recorded answer annotated with correctness by the scoring pass."""

    question_id: str
    selected_option_id: str
    time_taken: int
    is_correct: bool

    @classmethod
    def from_recorded(cls, answer: RecordedAnswer, is_correct: bool) -> ScoredAnswer:
        return cls(
            question_id=answer.question_id,
            selected_option_id=answer.selected_option_id,
            time_taken=answer.time_taken,
            is_correct=is_correct,
        )


@dataclass(frozen=True, slots=True)
class QuizProgress:
    """Advisory cursor used for progress display only."""

    current: int
    total: int

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        return round_half_up(self.current / self.total * 100)


@dataclass(frozen=True, slots=True)
class QuizAttempt:
    """A finalized attempt. `max_score` always equals the number of questions."""

    id: str
    navigator_id: str
    topic_id: str
    topic_name: str
    questions: tuple[QuizQuestion, ...]
    answers: tuple[ScoredAnswer, ...]
    score: int
    max_score: int
    percentage: int
    started_at: datetime
    completed_at: datetime
    duration: int  # seconds


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Outcome handed to the caller exactly once per attempt."""

    attempt: QuizAttempt
    passed: bool
    feedback: str
    next_recommendation: str


@dataclass(frozen=True, slots=True)
class AttemptSnapshot:
    """Read-only view of the attempt while it is in progress."""

    id: str
    navigator_id: str
    topic_id: str
    topic_name: str
    questions: tuple[QuizQuestion, ...]
    answers: tuple[RecordedAnswer, ...]
    max_score: int
    started_at: datetime
