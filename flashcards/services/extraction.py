"""Translation queue for words extracted from reading material."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.core.records import ExposureState, WordRecord
from flashcards.db.models.incomplete_word import NEEDS_TRANSLATION, IncompleteWord
from flashcards.db.models.word import Word
from flashcards.utils.exceptions import PersistenceError, ValidationError, WordNotFoundError


@dataclass(slots=True)
class QueueAddResult:
    added: list[IncompleteWord] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Added {len(self.added)} words to translation queue. "
            f"{len(self.duplicates)} duplicates skipped. {len(self.failed)} failed."
        )


def build_extraction_metadata(context: Mapping[str, Any] | None, now: datetime) -> dict[str, Any]:
    context = context or {}
    return {
        "sourceText": context.get("sourceText") or "",
        "extractionDate": int(now.timestamp() * 1000),
        "sourceCategory": context.get("sourceCategory") or "",
        "sourceLength": context.get("sourceLength") or 0,
        "comprehensionLevel": context.get("comprehensionLevel") or 0,
        "unknownWordCount": context.get("unknownWordCount") or 0,
    }


class ExtractionQueueService:
    """Queue extracted Spanish words until the learner supplies a translation."""

    def __init__(self, db: Session):
        self.db = db

    def _known_spanish(self) -> set[str]:
        complete = self.db.scalars(select(func.lower(func.trim(Word.spanish))))
        pending = self.db.scalars(select(func.lower(func.trim(IncompleteWord.spanish))))
        return {value for value in complete if value} | {value for value in pending if value}

    def add_words(
        self,
        words: Iterable[str],
        context: Mapping[str, Any] | None = None,
        *,
        now: datetime | None = None,
    ) -> QueueAddResult:
        """Queue each word not already present as a complete or pending word.

        Duplicate detection is case-insensitive and also applies within the
        submitted batch.
        """
        words = [word for word in words if isinstance(word, str)]
        if not words:
            raise ValidationError("No words selected")

        now = now or datetime.now(timezone.utc)
        existing = self._known_spanish()
        result = QueueAddResult()

        for raw in words:
            clean = raw.strip()
            if not clean:
                result.failed.append(raw)
                continue
            if clean.lower() in existing:
                result.duplicates.append(clean)
                continue
            entry = IncompleteWord(
                spanish=clean,
                extraction_metadata=build_extraction_metadata(context, now),
                status=NEEDS_TRANSLATION,
                extracted_at=now,
            )
            self.db.add(entry)
            existing.add(clean.lower())
            result.added.append(entry)

        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to queue extracted words: {exc}")
            raise PersistenceError("Failed to add words to translation queue", {"error": str(exc)}) from exc

        logger.info(
            f"Extraction queue: {len(words)} requested, {len(result.added)} added, "
            f"{len(result.duplicates)} duplicates, {len(result.failed)} failed"
        )
        return result

    def list_pending(self) -> list[IncompleteWord]:
        """Words still needing a translation, most recent first."""

        stmt = (
            select(IncompleteWord)
            .where(IncompleteWord.status == NEEDS_TRANSLATION)
            .order_by(IncompleteWord.extracted_at.desc(), IncompleteWord.id.desc())
        )
        return list(self.db.scalars(stmt))

    def _get(self, incomplete_id: int) -> IncompleteWord:
        entry = self.db.get(IncompleteWord, incomplete_id)
        if entry is None:
            raise WordNotFoundError("Incomplete word not found", {"incomplete_id": incomplete_id})
        return entry

    def complete(
        self,
        incomplete_id: int,
        english: str,
        *,
        notes: str | None = None,
        category: str | None = None,
        synonyms_spanish: Iterable[str] = (),
        synonyms_english: Iterable[str] = (),
    ) -> WordRecord:
        """Turn a queued word into a full word record and drop it from the queue."""

        entry = self._get(incomplete_id)
        if not isinstance(english, str) or not english.strip():
            raise ValidationError("An English translation is required", {"incomplete_id": incomplete_id})

        metadata = entry.extraction_metadata or {}
        extracted_at = entry.extracted_at or datetime.now(timezone.utc)
        record = WordRecord(
            spanish=entry.spanish,
            english=english.strip(),
            notes=notes or f"Extracted: {extracted_at.date().isoformat()}",
            category=category or metadata.get("sourceCategory") or None,
            synonyms_spanish=list(synonyms_spanish),
            synonyms_english=list(synonyms_english),
            source="extraction",
            exposure=ExposureState(),
        )

        row = Word.from_record(record)
        try:
            self.db.add(row)
            self.db.delete(entry)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to complete word {entry.spanish!r}: {exc}")
            raise PersistenceError("Could not complete word", {"error": str(exc)}) from exc

        logger.info(f"Completed word: {record.spanish!r} -> {record.english!r}")
        return row.to_record()

    def reject(self, incomplete_id: int) -> None:
        entry = self._get(incomplete_id)
        try:
            self.db.delete(entry)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError("Could not delete incomplete word", {"error": str(exc)}) from exc
        logger.info(f"Deleted incomplete word {incomplete_id}")
