"""User-flagged difficult pairs."""
from sqlalchemy import Column, String
from sqlalchemy.sql import func

from flashcards.db.base import Base
from flashcards.db.types import UTCDateTime


class HardWord(Base):
    """Marker keyed by the (spanish, english) pair, with no scheduling data."""

    __tablename__ = "hard_words"

    spanish = Column(String(255), primary_key=True)
    english = Column(String(255), primary_key=True)
    created_at = Column(UTCDateTime, server_default=func.now())
