"""FastAPI server that exposes the drill endpoints."""

from __future__ import annotations

import logging
from threading import Thread
from typing import NoReturn

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
import uvicorn

from drill_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from drill_app.constants.quiz_constants import (
    DEFAULT_QUESTIONS_PER_QUIZ,
    HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    MAX_QUESTIONS_PER_QUIZ,
    MIN_QUESTIONS_PER_QUIZ,
)
from drill_app.constants.storage_constants import SAFE_ID_PATTERN
from drill_app.core.attempt_store import serialize_attempt
from drill_app.core.errors import (
    AttemptPersistenceError,
    InvalidQuestionSet,
    InvalidState,
    NoActiveAttempt,
    QuestionSourceError,
    UnknownTopicError,
)
from drill_app.core.models import (
    AttemptSnapshot,
    Difficulty,
    QuizProgress,
    QuizQuestion,
    QuizTopic,
)
from drill_app.core.quiz_engine import QuizEngine

logger = logging.getLogger(__name__)


class StartPayload(BaseModel):
    """Payload schema for starting a drill."""

    navigator_id: str = Field(..., min_length=1, pattern=SAFE_ID_PATTERN)
    topic_id: str = Field(..., min_length=1, pattern=SAFE_ID_PATTERN)
    difficulty: Difficulty = Difficulty.MEDIUM
    num_questions: int = Field(
        DEFAULT_QUESTIONS_PER_QUIZ,
        ge=MIN_QUESTIONS_PER_QUIZ,
        le=MAX_QUESTIONS_PER_QUIZ,
    )


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    question_id: str = Field(..., min_length=1)
    selected_option_id: str = Field(..., min_length=1)
    time_taken: int = Field(0, ge=0)


class AdvancePayload(BaseModel):
    question_index: int = Field(..., ge=0)


def _topic_to_dict(topic: QuizTopic) -> dict[str, object]:
    return {
        "id": topic.id,
        "name": topic.name,
        "description": topic.description,
        "icon": topic.icon,
        "color": topic.color,
    }


def _question_to_dict(question: QuizQuestion) -> dict[str, object]:
    # The correct option stays on the server while the attempt is running.
    return {
        "id": question.id,
        "question": question.prompt,
        "options": [{"id": option.id, "text": option.text} for option in question.options],
        "difficulty": question.difficulty.value,
    }


def _progress_to_dict(progress: QuizProgress | None) -> dict[str, object]:
    if progress is None:
        return {"current": 0, "total": 0, "percentage": 0}
    return {
        "current": progress.current,
        "total": progress.total,
        "percentage": progress.percentage,
    }


def _attempt_to_dict(attempt: AttemptSnapshot) -> dict[str, object]:
    return {
        "id": attempt.id,
        "navigator_id": attempt.navigator_id,
        "topic_id": attempt.topic_id,
        "topic_name": attempt.topic_name,
        "max_score": attempt.max_score,
        "started_at": attempt.started_at.isoformat(),
        "questions": [_question_to_dict(q) for q in attempt.questions],
        "answers": [
            {
                "question_id": answer.question_id,
                "selected_option_id": answer.selected_option_id,
                "time_taken": answer.time_taken,
            }
            for answer in attempt.answers
        ],
    }


def _raise_http(exc: Exception) -> NoReturn:
    if isinstance(exc, (NoActiveAttempt, InvalidState)):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if isinstance(exc, UnknownTopicError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, (InvalidQuestionSet, ValueError)):
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if isinstance(exc, QuestionSourceError):
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    raise exc


def _get_quiz_engine_dependency(quiz_engine: QuizEngine):
    def dependency() -> QuizEngine:
        return quiz_engine

    return dependency


def create_api_app(quiz_engine: QuizEngine) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz engine."""
    app = FastAPI(title="NavDrills API", version="0.1.0")
    engine_dep = _get_quiz_engine_dependency(quiz_engine)

    @app.get("/topics")
    def list_topics(engine: QuizEngine = Depends(engine_dep)) -> list[dict[str, object]]:
        return [_topic_to_dict(topic) for topic in engine.get_topics()]

    @app.post("/quiz/start", status_code=201)
    def start_quiz(
        payload: StartPayload,
        engine: QuizEngine = Depends(engine_dep),
    ) -> dict[str, object]:
        try:
            attempt_id = engine.start_generated_quiz(
                navigator_id=payload.navigator_id,
                topic_id=payload.topic_id,
                difficulty=payload.difficulty,
                num_questions=payload.num_questions,
            )
        except (UnknownTopicError, QuestionSourceError, InvalidQuestionSet) as exc:
            _raise_http(exc)
        attempt = engine.get_current_attempt()
        return {
            "attempt_id": attempt_id,
            "attempt": _attempt_to_dict(attempt) if attempt else None,
            "progress": _progress_to_dict(engine.get_progress()),
        }

    @app.get("/quiz")
    def get_current_quiz(engine: QuizEngine = Depends(engine_dep)) -> dict[str, object]:
        attempt = engine.get_current_attempt()
        if attempt is None:
            raise HTTPException(status_code=404, detail="No active quiz attempt.")
        return {
            "state": engine.get_state_name(),
            "attempt": _attempt_to_dict(attempt),
            "progress": _progress_to_dict(engine.get_progress()),
        }

    @app.post("/quiz/answer", status_code=201)
    def submit_answer(
        payload: AnswerPayload,
        engine: QuizEngine = Depends(engine_dep),
    ) -> dict[str, object]:
        try:
            is_new = engine.record_answer(
                payload.question_id,
                payload.selected_option_id,
                payload.time_taken,
            )
        except (NoActiveAttempt, InvalidState, ValueError) as exc:
            _raise_http(exc)
        return {"question_id": payload.question_id, "replaced": not is_new}

    @app.post("/quiz/advance")
    def advance(
        payload: AdvancePayload,
        engine: QuizEngine = Depends(engine_dep),
    ) -> dict[str, object]:
        try:
            progress = engine.advance_to(payload.question_index)
        except (NoActiveAttempt, InvalidState) as exc:
            _raise_http(exc)
        return _progress_to_dict(progress)

    @app.get("/quiz/progress")
    def get_progress(engine: QuizEngine = Depends(engine_dep)) -> dict[str, object]:
        return _progress_to_dict(engine.get_progress())

    @app.post("/quiz/complete")
    def complete_quiz(engine: QuizEngine = Depends(engine_dep)) -> dict[str, object]:
        try:
            result = engine.complete_quiz()
        except (NoActiveAttempt, InvalidState) as exc:
            _raise_http(exc)

        saved = True
        save_error = None
        try:
            engine.save_result(result)
        except AttemptPersistenceError as exc:
            logger.error("Error saving quiz attempt %s: %s", result.attempt.id, exc)
            saved = False
            save_error = str(exc)

        return {
            "attempt": serialize_attempt(result.attempt),
            "passed": result.passed,
            "feedback": result.feedback,
            "next_recommendation": result.next_recommendation,
            "saved": saved,
            "save_error": save_error,
        }

    @app.post("/quiz/quit", status_code=204)
    def quit_quiz(engine: QuizEngine = Depends(engine_dep)) -> None:
        engine.quit_quiz()

    @app.get("/navigators/{navigator_id}/history")
    def get_history(
        navigator_id: str,
        limit: int = Query(HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT),
        engine: QuizEngine = Depends(engine_dep),
    ) -> list[dict[str, object]]:
        try:
            return engine.get_history(navigator_id, limit)
        except AttemptPersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    return app


def start_api_server(
    quiz_engine: QuizEngine,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_engine)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="DrillsApiServer", daemon=True)
    thread.start()
    return thread
