"""Exceptions raised by the quiz session engine and its collaborators."""

from __future__ import annotations


class QuizEngineError(Exception):
    """Base class for quiz engine errors."""


class NoActiveAttempt(QuizEngineError):
    """Raised when an attempt operation is called while no attempt is live."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"No active quiz attempt for '{operation}'.")
        self.operation = operation


class InvalidState(QuizEngineError):
    """Raised when an operation is not allowed in the current attempt state."""


class InvalidQuestionSet(QuizEngineError):
    """Raised when an attempt is started without any questions."""


class UnknownTopicError(QuizEngineError):
    """Raised when a topic id is not part of the catalog."""

    def __init__(self, topic_id: str) -> None:
        super().__init__(f"Unknown quiz topic '{topic_id}'.")
        self.topic_id = topic_id


class QuestionSourceError(QuizEngineError):
    """Raised when questions cannot be obtained or fail schema validation."""


class AttemptPersistenceError(QuizEngineError):
    """Raised when a completed attempt cannot be stored."""
