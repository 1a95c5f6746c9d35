"""Words extracted from text that still need an English translation."""
from sqlalchemy import Column, Integer, String
from sqlalchemy.sql import func

from flashcards.db.base import Base
from flashcards.db.types import JSONDocument, UTCDateTime

NEEDS_TRANSLATION = "needs_translation"


class IncompleteWord(Base):
    """Translation queue entry created by the vocabulary extraction workflow."""

    __tablename__ = "incomplete_words"

    id = Column(Integer, primary_key=True, autoincrement=True)
    spanish = Column(String(255), nullable=False, index=True)
    # sourceText, extractionDate, sourceCategory, sourceLength,
    # comprehensionLevel, unknownWordCount
    extraction_metadata = Column(JSONDocument, nullable=False, default=dict)
    status = Column(String(30), nullable=False, default=NEEDS_TRANSLATION)
    extracted_at = Column(UTCDateTime, nullable=False, server_default=func.now())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<IncompleteWord spanish={self.spanish!r} status={self.status!r}>"
