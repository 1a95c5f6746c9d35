"""Pick the next due card from the active working set."""
from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from loguru import logger

from flashcards.core.records import WordRecord
from flashcards.services.word_store import WordStore


@dataclass(slots=True, frozen=True)
class NothingDue:
    """Returned instead of a card when every word in scope is caught up."""

    active_count: int = 0
    message: str = "All caught up! Nothing is due for review right now."


class DueCardSelector:
    """Choose uniformly among due cards, avoiding an immediate repeat."""

    def __init__(self, store: WordStore, *, rng: random.Random | None = None) -> None:
        self.store = store
        self.rng = rng or random.Random()

    def due_candidates(
        self, active_words: Iterable[WordRecord], *, now: datetime | None = None
    ) -> list[WordRecord]:
        """Return due store records whose id is in the active working set."""

        active_ids = {word.id for word in active_words if word.id is not None}
        if not active_ids:
            return []
        now = now or datetime.now(timezone.utc)
        due = self.store.where_due_date_below_or_equal(now)
        return [word for word in due if word.id in active_ids]

    def count_due(self, active_words: Iterable[WordRecord], *, now: datetime | None = None) -> int:
        return len(self.due_candidates(active_words, now=now))

    def select_next(
        self,
        active_words: Iterable[WordRecord],
        exclude_id: int | None = None,
        *,
        now: datetime | None = None,
    ) -> WordRecord | NothingDue:
        """Return a random due card, or ``NothingDue`` when none is left.

        The card matching ``exclude_id`` is skipped unless it is the only
        due card.
        """
        active_words = list(active_words)
        candidates = self.due_candidates(active_words, now=now)
        if exclude_id is not None:
            others = [word for word in candidates if word.id != exclude_id]
            if others:
                candidates = others

        if not candidates:
            logger.info(f"No cards due among {len(active_words)} active words")
            return NothingDue(active_count=len(active_words))

        choice = self.rng.choice(candidates)
        logger.debug(f"Selected {choice.spanish!r} from {len(candidates)} due cards")
        return choice
