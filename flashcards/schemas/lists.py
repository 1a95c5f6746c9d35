"""Pydantic schemas for study list endpoints."""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from flashcards.schemas.words import WordRead
from flashcards.services.study_lists import StudyList


class StudyListRead(BaseModel):
    id: str
    name: str
    description: str
    words: List[WordRead]
    algorithm_used: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    excluded_ids: List[int] = Field(default_factory=list)
    error: bool = False

    @classmethod
    def from_study_list(cls, study_list: StudyList) -> "StudyListRead":
        return cls(
            id=study_list.id,
            name=study_list.name,
            description=study_list.description,
            words=[WordRead.from_record(word) for word in study_list.words],
            algorithm_used=study_list.algorithm_used,
            metadata=study_list.metadata,
            excluded_ids=sorted(study_list.excluded_ids),
            error=study_list.error,
        )


class SessionListRequest(BaseModel):
    """Ask for the next batch of a repeat-free flashcard session."""

    max_words: int = Field(20, ge=1, le=500)
    exclude_ids: List[int] = Field(default_factory=list)


class VerbFamilyRead(BaseModel):
    infinitive: str
    english_meaning: str
    frequency_rank: int
    forms: List[WordRead]


class VerbFamiliesResponse(BaseModel):
    id: str
    name: str
    description: str
    algorithm_used: str
    groups: List[VerbFamilyRead]


class SourceBreakdownResponse(BaseModel):
    total: int
    sources: Dict[str, int]
