"""Vocabulary database models."""
from __future__ import annotations

from typing import Any

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.sql import func

from flashcards.core.records import (
    DEFAULT_FREQUENCY_RANK,
    ExposureLevel,
    ExposureState,
    GameScore,
    LeitnerState,
    WordRecord,
)
from flashcards.db.base import Base
from flashcards.db.types import JSONDocument, UTCDateTime


class Word(Base):
    """A learning pair with both the Leitner and exposure scheduling columns.

    A NULL ``leitner_box`` means the word has no Leitner state; a NULL
    ``exposure_level`` means it has no exposure state.
    """

    __tablename__ = "words"

    id = Column(Integer, primary_key=True, autoincrement=True)
    spanish = Column(String(255), nullable=False, index=True)
    english = Column(String(255), nullable=False, index=True)
    notes = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)
    synonyms_spanish = Column(JSONDocument, nullable=False, default=list)
    synonyms_english = Column(JSONDocument, nullable=False, default=list)

    frequency_rank = Column(Integer, nullable=False, default=DEFAULT_FREQUENCY_RANK, index=True)
    source = Column(String(20), nullable=False, default="scraped")
    user_priority = Column(String(10), nullable=False, default="normal")

    # Leitner fields
    leitner_box = Column(Integer, nullable=True, index=True)
    last_reviewed = Column(UTCDateTime, nullable=True)
    due_date = Column(UTCDateTime, nullable=True, index=True)

    # Exposure fields
    exposure_level = Column(String(20), nullable=True)
    times_studied = Column(Integer, nullable=True)
    times_correct = Column(Integer, nullable=True)
    last_studied = Column(UTCDateTime, nullable=True)
    game_performance = Column(JSONDocument, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, server_default=func.now(), onupdate=func.now())

    def to_record(self) -> WordRecord:
        """Return a detached value object for the scheduling layer."""

        leitner = None
        if self.leitner_box is not None:
            leitner = LeitnerState(
                box=self.leitner_box,
                last_reviewed=self.last_reviewed,
                due_date=self.due_date,
            )
        elif self.due_date is not None:
            leitner = LeitnerState(box=0, last_reviewed=self.last_reviewed, due_date=self.due_date)

        exposure = None
        if self.exposure_level is not None:
            performance: dict[str, Any] = self.game_performance or {}
            exposure = ExposureState(
                level=ExposureLevel(self.exposure_level),
                times_studied=self.times_studied or 0,
                times_correct=self.times_correct or 0,
                last_studied=self.last_studied,
                game_performance={
                    game: GameScore(
                        correct=int(score.get("correct", 0)), total=int(score.get("total", 0))
                    )
                    for game, score in performance.items()
                },
            )

        return WordRecord(
            id=self.id,
            spanish=self.spanish,
            english=self.english,
            notes=self.notes,
            category=self.category,
            synonyms_spanish=list(self.synonyms_spanish or []),
            synonyms_english=list(self.synonyms_english or []),
            frequency_rank=self.frequency_rank if self.frequency_rank is not None else DEFAULT_FREQUENCY_RANK,
            source=self.source or "scraped",
            user_priority=self.user_priority or "normal",
            leitner=leitner,
            exposure=exposure,
        )

    def apply_record(self, record: WordRecord) -> None:
        """Copy every field of ``record`` except the id onto this row."""

        self.spanish = record.spanish.strip()
        self.english = record.english.strip()
        self.notes = record.notes
        self.category = record.category
        self.synonyms_spanish = list(record.synonyms_spanish)
        self.synonyms_english = list(record.synonyms_english)
        self.frequency_rank = record.frequency_rank
        self.source = record.source
        self.user_priority = record.user_priority

        leitner = record.leitner
        self.leitner_box = leitner.box if leitner else None
        self.last_reviewed = leitner.last_reviewed if leitner else None
        self.due_date = leitner.due_date if leitner else None

        exposure = record.exposure
        self.exposure_level = exposure.level.value if exposure else None
        self.times_studied = exposure.times_studied if exposure else None
        self.times_correct = exposure.times_correct if exposure else None
        self.last_studied = exposure.last_studied if exposure else None
        self.game_performance = (
            {
                game: {"correct": score.correct, "total": score.total}
                for game, score in exposure.game_performance.items()
            }
            if exposure
            else None
        )

    @classmethod
    def from_record(cls, record: WordRecord) -> "Word":
        row = cls(id=record.id)
        row.apply_record(record)
        return row

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Word id={self.id} spanish={self.spanish!r} box={self.leitner_box}>"
