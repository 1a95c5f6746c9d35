"""Pydantic schemas for review and scheduling endpoints."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from flashcards.core.records import ExposureLevel
from flashcards.schemas.words import WordRead


class NextCardResponse(BaseModel):
    """Next due card, or a "nothing due" message."""

    word: Optional[WordRead] = None
    nothing_due: bool = False
    message: Optional[str] = None
    due_count: int = 0
    active_count: int = 0


class ReviewAnswerRequest(BaseModel):
    """Answer to a flashcard.

    Either send the learner's typed ``answer`` to be graded, or the
    already graded ``is_correct``.
    """

    word_id: int
    is_correct: Optional[bool] = None
    answer: Optional[str] = None
    direction: Literal["spa-eng", "eng-spa"] = "spa-eng"

    @model_validator(mode="after")
    def _require_outcome(self) -> "ReviewAnswerRequest":
        if self.is_correct is None and self.answer is None:
            raise ValueError("Provide either is_correct or answer")
        return self


class ReviewAnswerResponse(BaseModel):
    word: WordRead
    is_correct: bool
    correct_answer: str
    persisted: bool
    error: Optional[str] = None


class ExposureAnswerRequest(BaseModel):
    word_id: int
    is_correct: bool
    game_type: str = Field("flashcards", max_length=30)


class ExposureAnswerResponse(BaseModel):
    word: WordRead
    previous_level: ExposureLevel
    new_level: ExposureLevel
    has_leveled_up: bool
    has_regressed: bool
    persisted: bool
    error: Optional[str] = None


class MarkKnownResponse(BaseModel):
    word: WordRead
    persisted: bool
    error: Optional[str] = None
