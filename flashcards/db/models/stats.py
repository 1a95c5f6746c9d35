"""Daily answer statistics."""
from sqlalchemy import Column, Date, Integer

from flashcards.db.base import Base
from flashcards.db.types import JSONDocument


class DailyStats(Base):
    """Answer counters for one calendar day (UTC)."""

    __tablename__ = "daily_stats"

    date = Column(Date, primary_key=True)
    cards_reviewed = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)
    incorrect_answers = Column(Integer, nullable=False, default=0)
    # {gameType: {"correct": n, "incorrect": n}}
    game_type_stats = Column(JSONDocument, nullable=False, default=dict)
