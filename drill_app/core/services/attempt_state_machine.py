"""State machine owning the single live quiz attempt.

States: ``Idle -> InProgress -> Completed -> Idle``. ``clear`` returns to
``Idle`` from anywhere. Every operation validates before it mutates, so a
failed call leaves the machine exactly as it was.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging

from drill_app.core.errors import InvalidQuestionSet, InvalidState, NoActiveAttempt
from drill_app.core.models import (
    AttemptSnapshot,
    QuizAttempt,
    QuizProgress,
    QuizQuestion,
    QuizResult,
    RecordedAnswer,
)
from drill_app.core.services.answer_recorder import AnswerRecorder
from drill_app.core.services.progress_tracker import ProgressTracker
from drill_app.core.services.scoring import score_answers
from drill_app.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ActiveAttempt:
    """The attempt while it is being taken. Only the state machine mutates it."""

    id: str
    navigator_id: str
    topic_id: str
    topic_name: str
    questions: tuple[QuizQuestion, ...]
    max_score: int
    started_at: datetime
    recorder: AnswerRecorder = field(default_factory=AnswerRecorder)

    def recorded_answers(self) -> list[RecordedAnswer]:
        return self.recorder.answers()

    def snapshot(self) -> AttemptSnapshot:
        return AttemptSnapshot(
            id=self.id,
            navigator_id=self.navigator_id,
            topic_id=self.topic_id,
            topic_name=self.topic_name,
            questions=self.questions,
            answers=tuple(self.recorder.answers()),
            max_score=self.max_score,
            started_at=self.started_at,
        )


@dataclass(frozen=True, slots=True)
class Idle:
    name = "idle"


@dataclass(frozen=True, slots=True)
class InProgress:
    attempt: ActiveAttempt
    progress: ProgressTracker
    name = "in_progress"


@dataclass(frozen=True, slots=True)
class Completed:
    result: QuizResult
    name = "completed"


AttemptState = Idle | InProgress | Completed


class AttemptStateMachine:
    """Runs one attempt at a time from start through scoring."""

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._state: AttemptState = Idle()

    @property
    def state(self) -> AttemptState:
        return self._state

    def is_in_progress(self) -> bool:
        return isinstance(self._state, InProgress)

    def start(
        self,
        navigator_id: str,
        topic_id: str,
        topic_name: str,
        questions: Sequence[QuizQuestion],
        replace: bool = False,
    ) -> str:
        """Begin a new attempt over a snapshot of `questions` and return its id.

        An unfinished attempt is only discarded when `replace` is set;
        otherwise starting while in progress raises `InvalidState`.
        """
        snapshot = tuple(questions)
        if not snapshot:
            raise InvalidQuestionSet("A quiz attempt needs at least one question.")
        if isinstance(self._state, InProgress):
            if not replace:
                raise InvalidState(
                    f"Attempt '{self._state.attempt.id}' is still in progress; clear it first."
                )
            logger.info("Discarding unfinished attempt %s", self._state.attempt.id)

        started_at = self._clock()
        attempt = ActiveAttempt(
            id=f"{navigator_id}_{topic_id}_{int(started_at.timestamp() * 1000)}",
            navigator_id=navigator_id,
            topic_id=topic_id,
            topic_name=topic_name,
            questions=snapshot,
            max_score=len(snapshot),
            started_at=started_at,
        )
        progress = ProgressTracker()
        progress.reset(len(snapshot))
        self._state = InProgress(attempt=attempt, progress=progress)
        logger.info(
            "Started attempt %s on topic %s with %d question(s)",
            attempt.id,
            topic_id,
            attempt.max_score,
        )
        return attempt.id

    def record_answer(self, question_id: str, selected_option_id: str, time_taken: int) -> bool:
        """Store an answer, replacing any earlier one for the same question."""
        active = self._require_in_progress("record_answer")
        return active.attempt.recorder.record(question_id, selected_option_id, time_taken)

    def advance(self, index: int) -> QuizProgress:
        active = self._require_in_progress("advance")
        return active.progress.advance(index)

    def complete(self) -> QuizResult:
        """Score the live attempt and move to `Completed`.

        Answers must have been recorded by the caller beforehand; nothing is
        saved automatically and an attempt with no answers simply scores 0.
        """
        active = self._require_in_progress("complete")
        attempt = active.attempt

        completed_at = self._clock()
        elapsed_ms = (completed_at - attempt.started_at).total_seconds() * 1000
        duration = max(0, round_half_up(elapsed_ms / 1000))

        summary = score_answers(attempt.questions, attempt.recorded_answers())
        finalized = QuizAttempt(
            id=attempt.id,
            navigator_id=attempt.navigator_id,
            topic_id=attempt.topic_id,
            topic_name=attempt.topic_name,
            questions=attempt.questions,
            answers=summary.validated_answers,
            score=summary.score,
            max_score=attempt.max_score,
            percentage=summary.percentage,
            started_at=attempt.started_at,
            completed_at=completed_at,
            duration=duration,
        )
        result = QuizResult(
            attempt=finalized,
            passed=summary.passed,
            feedback=summary.feedback,
            next_recommendation=summary.recommendation,
        )
        self._state = Completed(result=result)
        logger.info(
            "Completed attempt %s: %d/%d (%d%%) in %ds",
            finalized.id,
            finalized.score,
            finalized.max_score,
            finalized.percentage,
            duration,
        )
        return result

    def clear(self) -> None:
        self._state = Idle()

    # --- Read-only views ---

    def active_attempt(self) -> AttemptSnapshot | None:
        if isinstance(self._state, InProgress):
            return self._state.attempt.snapshot()
        return None

    def progress(self) -> QuizProgress | None:
        if isinstance(self._state, InProgress):
            return self._state.progress.snapshot()
        return None

    def result(self) -> QuizResult | None:
        if isinstance(self._state, Completed):
            return self._state.result
        return None

    def _require_in_progress(self, operation: str) -> InProgress:
        state = self._state
        if isinstance(state, InProgress):
            return state
        if isinstance(state, Completed):
            raise InvalidState(
                f"Attempt '{state.result.attempt.id}' is already completed; '{operation}' is not allowed."
            )
        raise NoActiveAttempt(operation)
