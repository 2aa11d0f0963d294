"""Persistence sinks for completed attempts.

Attempts are stored in the same camelCase shape the web client sends to
the backend, with ISO-8601 timestamps at the serialization boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any, Protocol

from drill_app.constants.quiz_constants import HISTORY_LIMIT
from drill_app.core.errors import AttemptPersistenceError
from drill_app.core.models import QuizAttempt

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SaveReceipt:
    success: bool
    attempt_id: str


class AttemptSink(Protocol):
    def save(self, attempt: QuizAttempt) -> SaveReceipt:
        ...


class AttemptStore(AttemptSink, Protocol):
    def recent_attempts(self, navigator_id: str, limit: int = HISTORY_LIMIT) -> list[dict[str, Any]]:
        ...


def serialize_attempt(attempt: QuizAttempt) -> dict[str, Any]:
    """Convert a finalized attempt into its stored document form."""
    return {
        "id": attempt.id,
        "navigatorId": attempt.navigator_id,
        "topicId": attempt.topic_id,
        "topicName": attempt.topic_name,
        "questions": [
            {
                "id": question.id,
                "question": question.prompt,
                "options": [{"id": option.id, "text": option.text} for option in question.options],
                "correctAnswerId": question.correct_option_id,
                "explanation": question.explanation,
                "difficulty": question.difficulty.value,
            }
            for question in attempt.questions
        ],
        "answers": [
            {
                "questionId": answer.question_id,
                "selectedOptionId": answer.selected_option_id,
                "isCorrect": answer.is_correct,
                "timeTaken": answer.time_taken,
            }
            for answer in attempt.answers
        ],
        "score": attempt.score,
        "maxScore": attempt.max_score,
        "percentage": attempt.percentage,
        "startedAt": attempt.started_at.isoformat(),
        "completedAt": attempt.completed_at.isoformat(),
        "duration": attempt.duration,
    }


def _most_recent_first(documents: list[dict[str, Any]], limit: int) -> list[dict[str, Any]]:
    if limit < 1:
        raise ValueError(f"History limit must be at least 1, got {limit}.")
    ordered = sorted(
        documents,
        key=lambda doc: datetime.fromisoformat(doc["completedAt"]),
        reverse=True,
    )
    return ordered[:limit]


class InMemoryAttemptStore:
    """Keeps stored attempt documents in process memory."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._documents: dict[str, dict[str, Any]] = {}

    def save(self, attempt: QuizAttempt) -> SaveReceipt:
        document = serialize_attempt(attempt)
        with self._lock:
            self._documents[attempt.id] = document
        return SaveReceipt(success=True, attempt_id=attempt.id)

    def recent_attempts(self, navigator_id: str, limit: int = HISTORY_LIMIT) -> list[dict[str, Any]]:
        with self._lock:
            documents = [doc for doc in self._documents.values() if doc["navigatorId"] == navigator_id]
        return _most_recent_first(documents, limit)


class JsonFileAttemptStore:
    """Writes one JSON document per attempt into a directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory.resolve()
        self._lock = Lock()

    def save(self, attempt: QuizAttempt) -> SaveReceipt:
        document = serialize_attempt(attempt)
        target = self._directory / f"{attempt.id}.json"
        if target.resolve().parent != self._directory:
            logger.error("Refusing to save quiz attempt %s outside %s", attempt.id, self._directory)
            raise AttemptPersistenceError(f"Attempt id '{attempt.id}' is not a valid file name.")
        try:
            with self._lock:
                self._directory.mkdir(parents=True, exist_ok=True)
                target.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Error saving quiz attempt %s: %s", attempt.id, exc)
            raise AttemptPersistenceError(f"Failed to save quiz attempt '{attempt.id}'.") from exc
        return SaveReceipt(success=True, attempt_id=attempt.id)

    def recent_attempts(self, navigator_id: str, limit: int = HISTORY_LIMIT) -> list[dict[str, Any]]:
        if not self._directory.exists():
            return []
        documents: list[dict[str, Any]] = []
        with self._lock:
            for path in self._directory.glob("*.json"):
                try:
                    document = json.loads(path.read_text(encoding="utf-8"))
                except (OSError, json.JSONDecodeError) as exc:
                    logger.warning("Skipping unreadable quiz attempt file %s: %s", path.name, exc)
                    continue
                if not isinstance(document, dict) or "completedAt" not in document:
                    logger.warning("Skipping malformed quiz attempt file %s", path.name)
                    continue
                if document.get("navigatorId") == navigator_id:
                    documents.append(document)
        return _most_recent_first(documents, limit)
