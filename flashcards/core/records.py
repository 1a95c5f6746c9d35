"""In-memory value objects for vocabulary records.

The legacy Leitner fields and the newer exposure fields are kept in two
separate state objects. Either may be missing on a record: imports from the
old word list only carry Leitner data, and words created after the exposure
migration may never have been reviewed with a Leitner game.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

DEFAULT_FREQUENCY_RANK = 99999

GAME_TYPES = ("flashcards", "matching", "fillInBlank", "conjugation")

WORD_SOURCES = ("scraped", "frequency", "user_added", "extraction")


class ExposureLevel(str, Enum):
    NEW = "new"
    LEARNING = "learning"
    FAMILIAR = "familiar"
    MASTERED = "mastered"
    KNOWN = "known"  # set explicitly by the learner, outside the progression


@dataclass(slots=True, frozen=True)
class GameScore:
    """Correct/total counters for one game mode."""

    correct: int = 0
    total: int = 0


@dataclass(slots=True, frozen=True)
class LeitnerState:
    """Legacy box scheduling fields."""

    box: int = 0
    last_reviewed: datetime | None = None
    due_date: datetime | None = None


@dataclass(slots=True, frozen=True)
class ExposureState:
    """Study counters and the qualitative mastery level derived from them."""

    level: ExposureLevel = ExposureLevel.NEW
    times_studied: int = 0
    times_correct: int = 0
    last_studied: datetime | None = None
    game_performance: dict[str, GameScore] = field(
        default_factory=lambda: {game: GameScore() for game in GAME_TYPES}
    )

    @property
    def accuracy(self) -> float:
        if self.times_studied <= 0:
            return 0.0
        return self.times_correct / self.times_studied


@dataclass(slots=True)
class WordRecord:
    """A Spanish/English learning pair plus its scheduling state."""

    spanish: str
    english: str
    id: int | None = None
    notes: str | None = None
    category: str | None = None
    synonyms_spanish: list[str] = field(default_factory=list)
    synonyms_english: list[str] = field(default_factory=list)
    frequency_rank: int = DEFAULT_FREQUENCY_RANK
    source: str = "scraped"
    user_priority: str = "normal"
    leitner: LeitnerState | None = None
    exposure: ExposureState | None = None

    @property
    def exposure_level(self) -> ExposureLevel:
        """Return the stored level, treating untracked words as new."""

        if self.exposure is None:
            return ExposureLevel.NEW
        return self.exposure.level

    @property
    def leitner_box(self) -> int:
        return self.leitner.box if self.leitner is not None else 0

    @property
    def due_date(self) -> datetime | None:
        return self.leitner.due_date if self.leitner is not None else None

    @property
    def is_known(self) -> bool:
        return self.exposure_level is ExposureLevel.KNOWN

    def is_valid_pair(self) -> bool:
        """Return whether both sides of the pair are non-empty after trimming."""

        return bool(
            isinstance(self.spanish, str)
            and self.spanish.strip()
            and isinstance(self.english, str)
            and self.english.strip()
        )
