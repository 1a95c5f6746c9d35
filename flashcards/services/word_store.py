"""Key/value access to word records."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Protocol

from loguru import logger
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.core.records import WordRecord
from flashcards.db.models.word import Word
from flashcards.utils.exceptions import PersistenceError


class WordStore(Protocol):
    """Persistent table of word records keyed by an opaque integer id."""

    def get(self, word_id: int) -> WordRecord | None:  # pragma: no cover - interface definition
        ...

    def put(self, record: WordRecord) -> int:  # pragma: no cover - interface definition
        ...

    def delete(self, word_id: int) -> None:  # pragma: no cover - interface definition
        ...

    def bulk_put(self, records: Iterable[WordRecord]) -> list[int]:  # pragma: no cover - interface definition
        ...

    def to_array(self) -> list[WordRecord]:  # pragma: no cover - interface definition
        ...

    def where_due_date_below_or_equal(self, timestamp: datetime) -> list[WordRecord]:  # pragma: no cover - interface definition
        ...

    def clear(self) -> None:  # pragma: no cover - interface definition
        ...


class SqlAlchemyWordStore:
    """``WordStore`` backed by the ``words`` table.

    Every write commits immediately. SQLAlchemy errors are rolled back and
    re-raised as ``PersistenceError``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _fail(self, action: str, exc: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(f"Word store {action} failed: {exc}")
        return PersistenceError(f"Could not {action} word records", {"error": str(exc)})

    def get(self, word_id: int) -> WordRecord | None:
        try:
            row = self.db.get(Word, word_id)
        except SQLAlchemyError as exc:
            raise self._fail("read", exc) from exc
        return row.to_record() if row is not None else None

    def _upsert(self, record: WordRecord) -> Word:
        row = self.db.get(Word, record.id) if record.id is not None else None
        if row is None:
            row = Word.from_record(record)
            self.db.add(row)
        else:
            row.apply_record(record)
        return row

    def put(self, record: WordRecord) -> int:
        """Insert or replace ``record`` and return its id."""

        try:
            row = self._upsert(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("save", exc) from exc
        return row.id

    def bulk_put(self, records: Iterable[WordRecord]) -> list[int]:
        try:
            rows = [self._upsert(record) for record in records]
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("bulk save", exc) from exc
        return [row.id for row in rows]

    def delete(self, word_id: int) -> None:
        try:
            self.db.execute(delete(Word).where(Word.id == word_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc

    def to_array(self) -> list[WordRecord]:
        try:
            rows = self.db.scalars(select(Word).order_by(Word.id))
            return [row.to_record() for row in rows]
        except SQLAlchemyError as exc:
            raise self._fail("read", exc) from exc

    def where_due_date_below_or_equal(self, timestamp: datetime) -> list[WordRecord]:
        """Return records due at ``timestamp``; a missing due date counts as due."""

        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        stmt = (
            select(Word)
            .where(or_(Word.due_date.is_(None), Word.due_date <= timestamp))
            .order_by(Word.id)
        )
        try:
            return [row.to_record() for row in self.db.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise self._fail("read", exc) from exc

    def clear(self) -> None:
        try:
            self.db.execute(delete(Word))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("clear", exc) from exc

    def count(self) -> int:
        try:
            return int(self.db.scalar(select(func.count()).select_from(Word)) or 0)
        except SQLAlchemyError as exc:
            raise self._fail("read", exc) from exc
