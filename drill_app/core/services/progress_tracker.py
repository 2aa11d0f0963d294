"""Service tracking how far the navigator has moved through an attempt."""

from __future__ import annotations

from drill_app.core.models import QuizProgress


class ProgressTracker:
    """Maintains the advisory `{current, total}` cursor.

    `current` is one past the index of the question being shown, so reaching
    the last question reports 100%.
    """

    def __init__(self) -> None:
        self._current: int = 0
        self._total: int = 0

    def reset(self, total: int) -> None:
        if total < 0:
            raise ValueError("Total must not be negative.")
        self._total = total
        self._current = 0

    def advance(self, index: int) -> QuizProgress:
        self._current = min(max(index + 1, 0), self._total)
        return self.snapshot()

    def snapshot(self) -> QuizProgress:
        return QuizProgress(current=self._current, total=self._total)

    def percentage(self) -> int:
        return self.snapshot().percentage

    def clear(self) -> None:
        self._current = 0
        self._total = 0
