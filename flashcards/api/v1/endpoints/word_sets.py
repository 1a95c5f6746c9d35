"""Helpers resolving the active word set for a request."""
from __future__ import annotations

from typing import Literal, Sequence

from sqlalchemy.orm import Session

from flashcards.core.records import WordRecord
from flashcards.services.hard_words import HardWordService
from flashcards.services.word_store import SqlAlchemyWordStore

Scope = Literal["all", "hard", "ids"]


def resolve_active_words(
    db: Session,
    scope: Scope = "all",
    ids: Sequence[int] | None = None,
    *,
    include_known: bool = False,
) -> list[WordRecord]:
    """Return the working set: all words, the hard words, or an explicit id list."""

    if scope == "hard":
        words = HardWordService(db).hard_word_records()
    else:
        words = SqlAlchemyWordStore(db).to_array()
        if scope == "ids":
            wanted = set(ids or ())
            words = [word for word in words if word.id in wanted]
    if include_known:
        return words
    return [word for word in words if not word.is_known]
