"""Facade tying the attempt state machine to its collaborators."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any

from drill_app.constants.quiz_constants import (
    DEFAULT_QUESTIONS_PER_QUIZ,
    HISTORY_LIMIT,
)
from drill_app.constants.topics import QUIZ_TOPICS
from drill_app.core.attempt_store import AttemptStore, SaveReceipt
from drill_app.core.errors import AttemptPersistenceError, UnknownTopicError
from drill_app.core.models import (
    AttemptSnapshot,
    Difficulty,
    QuizProgress,
    QuizQuestion,
    QuizResult,
    QuizTopic,
)
from drill_app.core.question_source import QuestionRequest, QuestionSource
from drill_app.core.services.attempt_state_machine import AttemptStateMachine, Clock, utc_now

logger = logging.getLogger(__name__)


class QuizEngine:
    """Facade for the drills: topic catalog, question source, attempt state and storage.

    A single navigator session runs at a time. All state machine calls are
    serialized by a lock because the API server handles requests on worker
    threads. Collaborator calls run outside the lock and never touch the
    live attempt when they fail.
    """

    def __init__(
        self,
        question_source: QuestionSource,
        attempt_store: AttemptStore,
        topics: tuple[QuizTopic, ...] = QUIZ_TOPICS,
        clock: Clock = utc_now,
    ) -> None:
        self._lock = Lock()
        self._machine = AttemptStateMachine(clock=clock)
        self._question_source = question_source
        self._attempt_store = attempt_store
        self._topics = topics

    # --- Topic catalog ---

    def get_topics(self) -> list[QuizTopic]:
        return list(self._topics)

    def get_topic(self, topic_id: str) -> QuizTopic:
        topic = next((t for t in self._topics if t.id == topic_id), None)
        if topic is None:
            raise UnknownTopicError(topic_id)
        return topic

    # --- Question source ---

    def generate_questions(
        self,
        topic_id: str,
        difficulty: Difficulty = Difficulty.MEDIUM,
        num_questions: int = DEFAULT_QUESTIONS_PER_QUIZ,
    ) -> list[QuizQuestion]:
        self.get_topic(topic_id)
        request = QuestionRequest(topic_id=topic_id, difficulty=difficulty, num_questions=num_questions)
        try:
            return self._question_source.fetch_questions(request)
        except Exception:
            logger.exception("Error generating quiz questions for topic %s", topic_id)
            raise

    # --- Attempt lifecycle ---

    def start_quiz(self, navigator_id: str, topic_id: str, questions: list[QuizQuestion]) -> str:
        """Start an attempt, discarding any unfinished one (single-session model)."""
        topic = self.get_topic(topic_id)
        with self._lock:
            return self._machine.start(
                navigator_id=navigator_id,
                topic_id=topic.id,
                topic_name=topic.name,
                questions=questions,
                replace=True,
            )

    def start_generated_quiz(
        self,
        navigator_id: str,
        topic_id: str,
        difficulty: Difficulty = Difficulty.MEDIUM,
        num_questions: int = DEFAULT_QUESTIONS_PER_QUIZ,
    ) -> str:
        questions = self.generate_questions(topic_id, difficulty, num_questions)
        return self.start_quiz(navigator_id, topic_id, questions)

    def record_answer(self, question_id: str, selected_option_id: str, time_taken: int) -> bool:
        with self._lock:
            return self._machine.record_answer(question_id, selected_option_id, time_taken)

    def advance_to(self, question_index: int) -> QuizProgress:
        with self._lock:
            return self._machine.advance(question_index)

    def complete_quiz(self) -> QuizResult:
        """Score the attempt, then return the engine to idle and hand back the result."""
        with self._lock:
            result = self._machine.complete()
            self._machine.clear()
            return result

    def quit_quiz(self) -> None:
        with self._lock:
            current = self._machine.active_attempt()
            self._machine.clear()
        if current is not None:
            logger.info("Attempt %s abandoned", current.id)

    # --- Read-only state ---

    def has_active_quiz(self) -> bool:
        with self._lock:
            return self._machine.is_in_progress()

    def get_current_attempt(self) -> AttemptSnapshot | None:
        with self._lock:
            return self._machine.active_attempt()

    def get_progress(self) -> QuizProgress | None:
        with self._lock:
            return self._machine.progress()

    def get_progress_percentage(self) -> int:
        progress = self.get_progress()
        return progress.percentage if progress else 0

    def get_state_name(self) -> str:
        with self._lock:
            return self._machine.state.name

    # --- Storage ---

    def save_result(self, result: QuizResult) -> SaveReceipt:
        """Hand a completed attempt to the store. Failures are raised, never retried."""
        try:
            receipt = self._attempt_store.save(result.attempt)
        except AttemptPersistenceError:
            raise
        except Exception as exc:
            logger.exception("Error saving quiz attempt %s", result.attempt.id)
            raise AttemptPersistenceError(f"Failed to save quiz attempt '{result.attempt.id}'.") from exc
        if not receipt.success:
            raise AttemptPersistenceError(f"Failed to save quiz attempt '{result.attempt.id}'.")
        logger.info("Quiz attempt saved: %s", receipt.attempt_id)
        return receipt

    def get_history(self, navigator_id: str, limit: int = HISTORY_LIMIT) -> list[dict[str, Any]]:
        return self._attempt_store.recent_attempts(navigator_id, limit)
