"""Hard-word markers and the hard-words review subset."""
from __future__ import annotations

from loguru import logger
from sqlalchemy import select, tuple_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.core.records import WordRecord
from flashcards.db.models.hard_word import HardWord
from flashcards.db.models.word import Word
from flashcards.utils.exceptions import PersistenceError, ValidationError

EMPTY_HARD_WORDS_MESSAGE = "Your hard words list is empty. Add some words as hard first!"


class HardWordService:
    """Toggle and query the learner's hard words, keyed by (spanish, english)."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _key(spanish: str, english: str) -> tuple[str, str]:
        if not isinstance(spanish, str) or not isinstance(english, str) or not spanish or not english:
            raise ValidationError("A hard word needs both spanish and english", {"spanish": spanish})
        return spanish, english

    def list_pairs(self) -> list[tuple[str, str]]:
        rows = self.db.scalars(select(HardWord).order_by(HardWord.created_at, HardWord.spanish))
        return [(row.spanish, row.english) for row in rows]

    def is_hard(self, spanish: str, english: str) -> bool:
        return self.db.get(HardWord, self._key(spanish, english)) is not None

    def toggle(self, spanish: str, english: str) -> bool:
        """Flip the marker for the pair and return whether it is now hard."""

        key = self._key(spanish, english)
        row = self.db.get(HardWord, key)
        try:
            if row is not None:
                self.db.delete(row)
                marked = False
            else:
                self.db.add(HardWord(spanish=spanish, english=english))
                marked = True
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to toggle hard word {spanish!r}: {exc}")
            raise PersistenceError("Could not update hard words", {"error": str(exc)}) from exc

        logger.info(f"Word {spanish!r} {'marked' if marked else 'unmarked'} as hard")
        return marked

    def remove(self, spanish: str, english: str) -> bool:
        row = self.db.get(HardWord, self._key(spanish, english))
        if row is None:
            return False
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError("Could not remove hard word", {"error": str(exc)}) from exc
        return True

    def hard_word_records(self) -> list[WordRecord]:
        """Word records whose pair is marked hard; the active set for hard-words review."""

        pairs = self.list_pairs()
        if not pairs:
            return []
        stmt = (
            select(Word)
            .where(tuple_(Word.spanish, Word.english).in_(pairs))
            .order_by(Word.id)
        )
        return [row.to_record() for row in self.db.scalars(stmt)]
