"""Apply review outcomes to word records and persist them.

Persistence is best effort: a failed write is logged and reported on the
returned result, and the freshly computed record is still handed back so the
caller can keep going with up-to-date state.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone

from loguru import logger

from flashcards.core.records import ExposureLevel, WordRecord
from flashcards.core.srs import exposure, leitner
from flashcards.services.word_store import WordStore
from flashcards.utils.exceptions import PersistenceError, WordNotFoundError


@dataclass(slots=True)
class ReviewResult:
    """Updated record plus the outcome of saving it."""

    word: WordRecord
    error: PersistenceError | None = None

    @property
    def persisted(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ExposureUpdate:
    """Result of an exposure update, including level transition info."""

    word: WordRecord
    previous_level: ExposureLevel
    new_level: ExposureLevel
    has_leveled_up: bool
    has_regressed: bool
    error: PersistenceError | None = None

    @property
    def persisted(self) -> bool:
        return self.error is None


class ReviewScheduler:
    """Run the Leitner and exposure transitions against a word store."""

    def __init__(self, store: WordStore) -> None:
        self.store = store

    def _save(self, word: WordRecord, context: str) -> tuple[WordRecord, PersistenceError | None]:
        try:
            word_id = self.store.put(word)
        except PersistenceError as exc:
            logger.error(f"{context}: failed to save {word.spanish!r}: {exc.message}")
            return word, exc
        if word.id is None:
            word = replace(word, id=word_id)
        return word, None

    def schedule_after_answer(
        self,
        word: WordRecord,
        is_correct: bool,
        *,
        now: datetime | None = None,
        game_type: str = "flashcards",
    ) -> ReviewResult:
        """Move the word between Leitner boxes and set its next due date."""

        now = now or datetime.now(timezone.utc)
        updated = replace(word, leitner=leitner.schedule(word.leitner, is_correct, now))
        updated, error = self._save(updated, game_type)
        if error is None:
            logger.info(
                f"{game_type}: updated {word.spanish!r} to box {updated.leitner_box} "
                f"({'correct' if is_correct else 'incorrect'})"
            )
        return ReviewResult(word=updated, error=error)

    def update_exposure(
        self,
        word: WordRecord,
        is_correct: bool,
        game_type: str = "flashcards",
        *,
        now: datetime | None = None,
    ) -> ExposureUpdate:
        """Count the answer and recompute the word's exposure level."""

        now = now or datetime.now(timezone.utc)
        transition = exposure.record_answer(word.exposure, is_correct, game_type, now)
        updated = replace(word, exposure=transition.state)
        updated, error = self._save(updated, game_type)
        if error is None:
            logger.info(
                f"{game_type}: exposure of {word.spanish!r} "
                f"{transition.previous_level.value} -> {transition.new_level.value}"
            )
        return ExposureUpdate(
            word=updated,
            previous_level=transition.previous_level,
            new_level=transition.new_level,
            has_leveled_up=transition.has_leveled_up,
            has_regressed=transition.has_regressed,
            error=error,
        )

    def update_exposure_by_id(
        self,
        word_id: int,
        is_correct: bool,
        game_type: str = "flashcards",
        *,
        now: datetime | None = None,
    ) -> ExposureUpdate:
        word = self.store.get(word_id)
        if word is None:
            raise WordNotFoundError("Word not found", {"word_id": word_id})
        return self.update_exposure(word, is_correct, game_type, now=now)

    def mark_word_as_known(self, word_id: int, *, now: datetime | None = None) -> ReviewResult:
        """Take a word out of active study for good."""

        word = self.store.get(word_id)
        if word is None:
            raise WordNotFoundError("Word not found", {"word_id": word_id})
        now = now or datetime.now(timezone.utc)
        updated = replace(
            word,
            exposure=exposure.mark_known(word.exposure, now),
            user_priority="low",
        )
        updated, error = self._save(updated, "known")
        if error is None:
            logger.info(f"Word {word.spanish!r} marked as known")
        return ReviewResult(word=updated, error=error)
