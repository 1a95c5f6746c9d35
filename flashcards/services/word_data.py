"""Word-list bootstrap, export and manual word management."""
from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.core.records import LeitnerState, WordRecord
from flashcards.core.srs.leitner import MAX_LEITNER_BOX, MIN_LEITNER_BOX
from flashcards.db.models.app_state import DATA_VERSION_KEY, AppState
from flashcards.db.models.word import Word
from flashcards.schemas.words import (
    ExportDocument,
    ExportMetadata,
    SyncResult,
    WordCreate,
    WordDocument,
    WordListFile,
    WordUpdate,
)
from flashcards.services.word_store import SqlAlchemyWordStore
from flashcards.utils.exceptions import PersistenceError, ValidationError, WordNotFoundError

DEFAULT_EXPORT_VERSION = "1.0.0"
EMPTY_WORD_LIST_MESSAGE = "The new word list contained no valid words."


def parse_word_entries(entries: Iterable[Any]) -> tuple[list[WordRecord], int]:
    """Return the valid records among ``entries`` and how many were skipped."""

    records: list[WordRecord] = []
    skipped = 0
    for entry in entries:
        try:
            record = WordDocument.model_validate(entry).to_record()
        except PydanticValidationError:
            skipped += 1
            continue
        if not record.is_valid_pair():
            skipped += 1
            continue
        records.append(record)
    return records, skipped


def load_word_list_file(path: Path | str) -> WordListFile:
    """Read a ``{version, words}`` JSON file from disk."""

    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValidationError("Could not read word list file", {"path": str(path), "error": str(exc)}) from exc
    try:
        return WordListFile.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError("Word list file is malformed", {"path": str(path), "errors": exc.errors()}) from exc


class WordDataService:
    """Keep the local word table in step with the published word list."""

    def __init__(self, db: Session):
        self.db = db
        self.store = SqlAlchemyWordStore(db)

    # ------------------------------------------------------------------
    # Data version
    # ------------------------------------------------------------------
    def get_data_version(self) -> str | None:
        row = self.db.get(AppState, DATA_VERSION_KEY)
        if row is None or not isinstance(row.value, dict):
            return None
        return row.value.get("version")

    def _stage_data_version(self, version: str) -> None:
        row = self.db.get(AppState, DATA_VERSION_KEY)
        if row is None:
            self.db.add(AppState(id=DATA_VERSION_KEY, value={"version": version}))
        else:
            row.value = {"version": version}

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------
    def sync_word_list(
        self,
        word_list: WordListFile | Mapping[str, Any],
        *,
        now: datetime | None = None,
        force: bool = False,
    ) -> SyncResult:
        """Replace every local word when the published version differs.

        Versions are compared as exact strings. A replace clears the table,
        inserts every valid word with box 1 due immediately, and records the
        new version, all in one transaction. Existing progress is discarded.
        """
        if not isinstance(word_list, WordListFile):
            try:
                word_list = WordListFile.model_validate(word_list)
            except PydanticValidationError as exc:
                raise ValidationError("Word list is malformed", {"errors": exc.errors()}) from exc

        local_version = self.get_data_version()
        if local_version == word_list.version and not force:
            logger.info(f"Word list already at version {local_version}")
            return SyncResult(version=local_version, previous_version=local_version, replaced=False)

        now = now or datetime.now(timezone.utc)
        records, skipped = parse_word_entries(word_list.words)
        fresh = [
            replace(record, id=None, leitner=LeitnerState(box=1, last_reviewed=now, due_date=now))
            for record in records
        ]

        try:
            self.db.execute(delete(Word))
            self.db.add_all(Word.from_record(record) for record in fresh)
            self._stage_data_version(word_list.version)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Word list replace failed: {exc}")
            raise PersistenceError("Could not replace the word list", {"error": str(exc)}) from exc

        error = None
        if not fresh:
            error = EMPTY_WORD_LIST_MESSAGE
            logger.warning(f"Word list {word_list.version} had no valid words; store cleared")
        else:
            logger.info(
                f"Replaced word list {local_version!r} -> {word_list.version!r}: "
                f"{len(fresh)} words imported, {skipped} skipped"
            )
        return SyncResult(
            version=word_list.version,
            previous_version=local_version,
            replaced=True,
            imported=len(fresh),
            skipped=skipped,
            error=error,
        )

    def sync_from_file(self, path: Path | str, *, now: datetime | None = None, force: bool = False) -> SyncResult:
        return self.sync_word_list(load_word_list_file(path), now=now, force=force)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export(self, *, now: datetime | None = None, device_type: str = "server") -> ExportDocument:
        """Build the backup document used to merge progress across devices."""

        now = now or datetime.now(timezone.utc)
        records = self.store.to_array()
        distribution = {box: 0 for box in range(MIN_LEITNER_BOX, MAX_LEITNER_BOX + 1)}
        for record in records:
            distribution[record.leitner_box] = distribution.get(record.leitner_box, 0) + 1

        words = []
        for record in records:
            document = WordDocument.from_record(record)
            document.id = None
            words.append(document)

        return ExportDocument(
            version=self.get_data_version() or DEFAULT_EXPORT_VERSION,
            export_date=now.isoformat(),
            export_metadata=ExportMetadata(
                total_words=len(records),
                words_with_progress=sum(1 for record in records if record.leitner_box > 0),
                box_distribution=distribution,
                device_type=device_type,
            ),
            words=words,
        )

    # ------------------------------------------------------------------
    # Manual management
    # ------------------------------------------------------------------
    def list_words(self, *, search: str | None = None, limit: int = 50, offset: int = 0) -> tuple[int, list[WordRecord]]:
        stmt = select(Word)
        count_stmt = select(func.count()).select_from(Word)
        if search:
            pattern = f"%{search.strip().lower()}%"
            condition = or_(func.lower(Word.spanish).like(pattern), func.lower(Word.english).like(pattern))
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)
        total = int(self.db.scalar(count_stmt) or 0)
        rows = self.db.scalars(stmt.order_by(Word.id).offset(offset).limit(limit))
        return total, [row.to_record() for row in rows]

    def get_word(self, word_id: int) -> WordRecord:
        record = self.store.get(word_id)
        if record is None:
            raise WordNotFoundError("Word not found", {"word_id": word_id})
        return record

    def add_word(self, payload: WordCreate) -> WordRecord:
        record = WordRecord(
            spanish=payload.spanish.strip(),
            english=payload.english.strip(),
            notes=payload.notes,
            category=payload.category,
            synonyms_spanish=[s.strip() for s in payload.synonyms_spanish if s.strip()],
            synonyms_english=[s.strip() for s in payload.synonyms_english if s.strip()],
            frequency_rank=payload.frequency_rank,
            source=payload.source,
        )
        if not record.is_valid_pair():
            raise ValidationError("Both spanish and english are required", {"spanish": payload.spanish})
        word_id = self.store.put(record)
        logger.info(f"Added word {record.spanish!r} ({word_id})")
        return replace(record, id=word_id)

    def update_word(self, word_id: int, payload: WordUpdate) -> WordRecord:
        record = self.get_word(word_id)
        changes = payload.model_dump(exclude_unset=True)
        for key in ("spanish", "english"):
            if key in changes:
                if changes[key] is None or not changes[key].strip():
                    raise ValidationError(f"{key} must not be empty", {"word_id": word_id})
                changes[key] = changes[key].strip()
        for key in ("synonyms_spanish", "synonyms_english"):
            if key in changes and changes[key] is None:
                changes[key] = []
        for key in ("frequency_rank", "user_priority"):
            if key in changes and changes[key] is None:
                del changes[key]
        updated = replace(record, **changes)
        self.store.put(updated)
        logger.info(f"Updated word {word_id}: {sorted(changes)}")
        return updated

    def delete_word(self, word_id: int) -> None:
        self.get_word(word_id)
        self.store.delete(word_id)
        logger.info(f"Deleted word {word_id}")
