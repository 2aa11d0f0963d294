"""Service for collecting answers of the in-progress attempt."""

from __future__ import annotations

from drill_app.core.models import RecordedAnswer


class AnswerRecorder:
    """Stores at most one recorded answer per question, latest write wins.

    The recorder never looks at question content, so correctness is left
    for the scoring pass.
    """

    def __init__(self) -> None:
        self._answers: list[RecordedAnswer] = []

    def record(self, question_id: str, selected_option_id: str, time_taken: int) -> bool:
        """Record an answer. Returns True if it's a new answer, False if it replaced one."""
        if time_taken < 0:
            raise ValueError("Time taken must not be negative.")

        answer = RecordedAnswer(
            question_id=question_id,
            selected_option_id=selected_option_id,
            time_taken=time_taken,
        )
        remaining = [a for a in self._answers if a.question_id != question_id]
        is_new = len(remaining) == len(self._answers)
        remaining.append(answer)
        self._answers = remaining
        return is_new

    def answers(self) -> list[RecordedAnswer]:
        return list(self._answers)

    def answer_for(self, question_id: str) -> RecordedAnswer | None:
        return next((a for a in self._answers if a.question_id == question_id), None)

    def count(self) -> int:
        return len(self._answers)

    def clear(self) -> None:
        self._answers = []
