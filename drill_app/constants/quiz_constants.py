"""Quiz-related constants shared across the engine and API layers."""

PASS_THRESHOLD_PERCENT: int = 70

# Checked high to low, first match wins.
FEEDBACK_BANDS: tuple[tuple[int, str], ...] = (
    (90, "Excellent work! You have mastered this topic."),
    (80, "Great job! You have a solid understanding of this topic."),
    (70, "Good work! You passed, but there's room for improvement."),
)
FEEDBACK_BELOW_PASS: str = "Keep studying! Review the materials and try again."

RECOMMENDATION_PASSED: str = "Try another topic or increase difficulty!"
RECOMMENDATION_FAILED: str = "Review the material and try again."

OPTIONS_PER_QUESTION: int = 4
MIN_QUESTIONS_PER_QUIZ: int = 1
MAX_QUESTIONS_PER_QUIZ: int = 20
DEFAULT_QUESTIONS_PER_QUIZ: int = 5

HISTORY_LIMIT: int = 10
MAX_HISTORY_LIMIT: int = 100
