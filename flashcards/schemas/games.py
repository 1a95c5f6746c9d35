"""Pydantic schemas for game endpoints."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from flashcards.schemas.words import WordRead


class ReadinessResponse(BaseModel):
    mode: str
    ready: bool
    candidate_count: int
    required: int
    message: Optional[str] = None


class MatchOptionRead(BaseModel):
    id: int
    text: str


class MatchingBoardResponse(BaseModel):
    spanish_options: List[MatchOptionRead]
    english_options: List[MatchOptionRead]


class BlankQuestionResponse(BaseModel):
    word: WordRead
    sentence_with_blank: str
    choices: List[str]
    correct_answer: str
    original_sentence_spa: str
    original_sentence_eng: str


class ConjugationQuestionResponse(BaseModel):
    word: WordRead
    question: str
    answer: str
    full_answer: str
    tense: str
    person: str
    mood: str
    english_meaning: str
