"""Pydantic schemas for hard words and the translation queue."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HardWordPair(BaseModel):
    spanish: str = Field(min_length=1, max_length=255)
    english: str = Field(min_length=1, max_length=255)


class HardWordToggleResponse(BaseModel):
    spanish: str
    english: str
    is_hard: bool


class HardWordListResponse(BaseModel):
    total: int
    items: List[HardWordPair]


class ExtractionContext(BaseModel):
    """Where a batch of extracted words came from."""

    source_text: str = ""
    source_category: str = ""
    source_length: int = 0
    comprehension_level: float = 0
    unknown_word_count: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractedWordsRequest(BaseModel):
    words: List[str] = Field(min_length=1)
    context: ExtractionContext = Field(default_factory=ExtractionContext)


class IncompleteWordRead(BaseModel):
    id: int
    spanish: str
    status: str
    extracted_at: Optional[datetime] = None
    extraction_metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class ExtractedWordsResponse(BaseModel):
    added: List[IncompleteWordRead]
    duplicates: List[str]
    failed: List[str]
    message: str


class CompleteWordRequest(BaseModel):
    english: str = Field(min_length=1, max_length=255)
    notes: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    synonyms_spanish: List[str] = Field(default_factory=list)
    synonyms_english: List[str] = Field(default_factory=list)
