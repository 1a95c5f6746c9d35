"""Pydantic schemas for word records, word-list files and exports."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from flashcards.core.records import (
    DEFAULT_FREQUENCY_RANK,
    ExposureLevel,
    ExposureState,
    GameScore,
    LeitnerState,
    WordRecord,
)


def parse_timestamp(value: Any) -> Any:
    """Accept epoch milliseconds as well as ISO strings and datetimes."""

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("timestamp must not be a boolean")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return value


def to_epoch_millis(value: datetime | None) -> int | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


class GameScoreDocument(BaseModel):
    correct: int = Field(0, ge=0)
    total: int = Field(0, ge=0)


class WordDocument(BaseModel):
    """A word as it appears in word-list files, syncs and exports.

    Keys are camelCase except the synonym lists, which keep their
    historical snake_case names. Timestamps are epoch milliseconds.
    """

    id: Optional[int] = None
    spanish: str = ""
    english: str = ""
    notes: Optional[str] = None
    category: Optional[str] = None
    synonyms_spanish: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("synonyms_spanish", "synonymsSpanish"),
        serialization_alias="synonyms_spanish",
    )
    synonyms_english: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("synonyms_english", "synonymsEnglish"),
        serialization_alias="synonyms_english",
    )
    frequency_rank: int = DEFAULT_FREQUENCY_RANK
    source: str = "scraped"
    user_priority: str = "normal"

    leitner_box: Optional[int] = None
    last_reviewed: Optional[datetime] = None
    due_date: Optional[datetime] = None

    exposure_level: Optional[ExposureLevel] = None
    times_studied: Optional[int] = Field(None, ge=0)
    times_correct: Optional[int] = Field(None, ge=0)
    last_studied: Optional[datetime] = None
    game_performance: Optional[Dict[str, GameScoreDocument]] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("last_reviewed", "due_date", "last_studied", mode="before")
    @classmethod
    def _parse_timestamps(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("spanish", "english", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("frequency_rank", "source", "user_priority", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_serializer("last_reviewed", "due_date", "last_studied")
    def _serialize_timestamps(self, value: Optional[datetime]) -> Optional[int]:
        return to_epoch_millis(value)

    def to_record(self) -> WordRecord:
        leitner = None
        if self.leitner_box is not None or self.due_date is not None:
            leitner = LeitnerState(
                box=self.leitner_box or 0,
                last_reviewed=self.last_reviewed,
                due_date=self.due_date,
            )

        exposure = None
        if self.exposure_level is not None:
            studied = self.times_studied or 0
            exposure = ExposureState(
                level=self.exposure_level,
                times_studied=studied,
                times_correct=min(self.times_correct or 0, studied),
                last_studied=self.last_studied,
                game_performance={
                    game: GameScore(correct=score.correct, total=score.total)
                    for game, score in (self.game_performance or {}).items()
                },
            )

        return WordRecord(
            id=self.id,
            spanish=self.spanish.strip(),
            english=self.english.strip(),
            notes=self.notes,
            category=self.category,
            synonyms_spanish=list(self.synonyms_spanish),
            synonyms_english=list(self.synonyms_english),
            frequency_rank=self.frequency_rank,
            source=self.source,
            user_priority=self.user_priority,
            leitner=leitner,
            exposure=exposure,
        )

    @classmethod
    def from_record(cls, record: WordRecord) -> "WordDocument":
        leitner = record.leitner
        exposure = record.exposure
        return cls(
            id=record.id,
            spanish=record.spanish,
            english=record.english,
            notes=record.notes,
            category=record.category,
            synonyms_spanish=list(record.synonyms_spanish),
            synonyms_english=list(record.synonyms_english),
            frequency_rank=record.frequency_rank,
            source=record.source,
            user_priority=record.user_priority,
            leitner_box=leitner.box if leitner else None,
            last_reviewed=leitner.last_reviewed if leitner else None,
            due_date=leitner.due_date if leitner else None,
            exposure_level=exposure.level if exposure else None,
            times_studied=exposure.times_studied if exposure else None,
            times_correct=exposure.times_correct if exposure else None,
            last_studied=exposure.last_studied if exposure else None,
            game_performance=(
                {
                    game: GameScoreDocument(correct=score.correct, total=score.total)
                    for game, score in exposure.game_performance.items()
                }
                if exposure
                else None
            ),
        )


class WordListFile(BaseModel):
    """Versioned word list used to bootstrap the store.

    ``words`` is kept raw so a single malformed entry can be skipped
    instead of rejecting the whole file.
    """

    version: str
    words: List[Any] = Field(default_factory=list)


class ExportMetadata(BaseModel):
    total_words: int
    words_with_progress: int
    box_distribution: Dict[int, int]
    device_type: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportDocument(BaseModel):
    version: str
    export_date: str
    export_metadata: ExportMetadata
    words: List[WordDocument]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WordCreate(BaseModel):
    """Payload for adding a single word."""

    spanish: str = Field(min_length=1, max_length=255)
    english: str = Field(min_length=1, max_length=255)
    notes: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    synonyms_spanish: List[str] = Field(default_factory=list)
    synonyms_english: List[str] = Field(default_factory=list)
    frequency_rank: int = DEFAULT_FREQUENCY_RANK
    source: str = "user_added"


class WordUpdate(BaseModel):
    """Partial update for the editable fields of a word."""

    spanish: Optional[str] = Field(None, min_length=1, max_length=255)
    english: Optional[str] = Field(None, min_length=1, max_length=255)
    notes: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    synonyms_spanish: Optional[List[str]] = None
    synonyms_english: Optional[List[str]] = None
    frequency_rank: Optional[int] = None
    user_priority: Optional[str] = Field(None, pattern="^(high|normal|low)$")


class GameScoreRead(BaseModel):
    correct: int
    total: int


class WordRead(BaseModel):
    """API representation of a word record."""

    id: Optional[int]
    spanish: str
    english: str
    notes: Optional[str] = None
    category: Optional[str] = None
    synonyms_spanish: List[str] = Field(default_factory=list)
    synonyms_english: List[str] = Field(default_factory=list)
    frequency_rank: int
    source: str
    user_priority: str
    leitner_box: int
    last_reviewed: Optional[datetime] = None
    due_date: Optional[datetime] = None
    exposure_level: ExposureLevel
    times_studied: int = 0
    times_correct: int = 0
    last_studied: Optional[datetime] = None
    game_performance: Dict[str, GameScoreRead] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: WordRecord) -> "WordRead":
        exposure = record.exposure
        return cls(
            id=record.id,
            spanish=record.spanish,
            english=record.english,
            notes=record.notes,
            category=record.category,
            synonyms_spanish=list(record.synonyms_spanish),
            synonyms_english=list(record.synonyms_english),
            frequency_rank=record.frequency_rank,
            source=record.source,
            user_priority=record.user_priority,
            leitner_box=record.leitner_box,
            last_reviewed=record.leitner.last_reviewed if record.leitner else None,
            due_date=record.due_date,
            exposure_level=record.exposure_level,
            times_studied=exposure.times_studied if exposure else 0,
            times_correct=exposure.times_correct if exposure else 0,
            last_studied=exposure.last_studied if exposure else None,
            game_performance={
                game: GameScoreRead(correct=score.correct, total=score.total)
                for game, score in (exposure.game_performance.items() if exposure else [])
            },
        )


class WordListResponse(BaseModel):
    total: int
    items: List[WordRead]


class SyncResult(BaseModel):
    """Outcome of comparing and (maybe) replacing the local word list."""

    version: Optional[str]
    previous_version: Optional[str]
    replaced: bool
    imported: int = 0
    skipped: int = 0
    error: Optional[str] = None
