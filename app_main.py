"""Application entry point for the NavDrills quiz service."""

from __future__ import annotations

from drill_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from drill_app.constants.storage_constants import ATTEMPTS_DIR, QUESTION_BANK_PATH
from drill_app.core.attempt_store import JsonFileAttemptStore
from drill_app.core.question_source import QuestionBankSource
from drill_app.core.quiz_engine import QuizEngine
from drill_app.server.api_server import start_api_server
from drill_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, wire the engine to its collaborators and serve the API."""
    logger = configure_logging()
    logger.info("Starting NavDrills…")

    quiz_engine = QuizEngine(
        question_source=QuestionBankSource.from_file(QUESTION_BANK_PATH),
        attempt_store=JsonFileAttemptStore(ATTEMPTS_DIR),
    )
    server_thread = start_api_server(quiz_engine=quiz_engine, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Drills API available on port %d; attempts stored in %s", DEFAULT_PORT, ATTEMPTS_DIR)

    try:
        server_thread.join()
    except KeyboardInterrupt:
        logger.info("Shutting down NavDrills.")


if __name__ == "__main__":
    main()
