"""FastAPI application factory."""
from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import Callable, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from flashcards.api.v1 import api_router
from flashcards.config import settings
from flashcards.db import models  # noqa: F401  registers tables on Base.metadata
from flashcards.db.base import Base
from flashcards.db.session import SessionLocal, engine
from flashcards.services.word_data import WordDataService
from flashcards.utils.exceptions import (
    FlashcardsException,
    GameStateError,
    InsufficientCandidatesError,
    PersistenceError,
    QuestionGenerationError,
    ValidationError,
    WordNotFoundError,
    handle_game_state_error,
    handle_insufficient_candidates_error,
    handle_not_found_error,
    handle_persistence_error,
    handle_question_generation_error,
    handle_validation_error,
)


tags_metadata: List[dict[str, str]] = [
    {"name": "words", "description": "Manage words, sync the published word list and export progress."},
    {"name": "review", "description": "Due cards, Leitner answers and exposure updates."},
    {"name": "lists", "description": "Study lists for the game modes."},
    {"name": "hard-words", "description": "Words the learner flagged as hard."},
    {"name": "incomplete-words", "description": "Extracted words waiting for a translation."},
    {"name": "stats", "description": "Session and daily answer statistics."},
    {"name": "games", "description": "Game readiness and question builders."},
]

ERROR_HANDLERS: dict[type[FlashcardsException], Callable] = {
    PersistenceError: handle_persistence_error,
    ValidationError: handle_validation_error,
    WordNotFoundError: handle_not_found_error,
    InsufficientCandidatesError: handle_insufficient_candidates_error,
    QuestionGenerationError: handle_question_generation_error,
    GameStateError: handle_game_state_error,
}


def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())


def bootstrap_word_list() -> None:
    """Create tables and sync the bundled word list, as configured."""

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    if not settings.BOOTSTRAP_ON_STARTUP:
        return
    if not settings.WORD_LIST_PATH.exists():
        logger.info(f"No word list at {settings.WORD_LIST_PATH}; skipping bootstrap")
        return
    db = SessionLocal()
    try:
        result = WordDataService(db).sync_from_file(settings.WORD_LIST_PATH)
        if result.error:
            logger.warning(result.error)
    except FlashcardsException as exc:
        logger.error(f"Word list bootstrap failed: {exc.message}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap_word_list()
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    configure_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Spaced-repetition backend for Spanish vocabulary flashcards and games.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors()), "message": "Validation failed"},
        )

    @app.exception_handler(FlashcardsException)
    async def flashcards_exception_handler(request: Request, exc: FlashcardsException) -> JSONResponse:
        handler = next(
            (handler for error_cls, handler in ERROR_HANDLERS.items() if isinstance(exc, error_cls)),
            None,
        )
        if handler is None:
            logger.error(f"Unhandled application error: {exc.message}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": exc.message},
            )
        http_exc = handler(exc)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": jsonable_encoder(http_exc.detail)})

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
