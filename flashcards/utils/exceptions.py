"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from loguru import logger


class FlashcardsException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class PersistenceError(FlashcardsException):
    """Word store read/write failures."""
    pass


class ValidationError(FlashcardsException):
    """Data validation errors."""
    pass


class WordNotFoundError(FlashcardsException):
    """Raised when a word record cannot be located."""
    pass


class InsufficientCandidatesError(FlashcardsException):
    """Not enough eligible words to start a game mode."""
    pass


class QuestionGenerationError(FlashcardsException):
    """A game could not build a question within its allowed attempts."""
    pass


class GameStateError(FlashcardsException):
    """A game action was requested from a phase that does not allow it."""
    pass


def handle_persistence_error(error: PersistenceError) -> HTTPException:
    """Handle store errors and return appropriate HTTP response."""
    logger.error(f"Persistence error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Saving your progress failed. Please try again later."
    )


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_not_found_error(error: WordNotFoundError) -> HTTPException:
    """Handle missing word records."""
    logger.warning(f"Word not found: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message
    )


def handle_insufficient_candidates_error(error: InsufficientCandidatesError) -> HTTPException:
    """Handle game modes that cannot start with the current word list."""
    logger.info(f"Game not started: {error.message}")
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_question_generation_error(error: QuestionGenerationError) -> HTTPException:
    """Handle question searches that ran out of attempts."""
    logger.warning(f"Question generation exhausted: {error.message}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=error.message
    )


def handle_game_state_error(error: GameStateError) -> HTTPException:
    """Handle out-of-order game actions."""
    logger.warning(f"Game state error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message
    )
