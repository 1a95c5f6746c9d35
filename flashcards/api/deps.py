"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from flashcards.db.session import SessionLocal
from flashcards.services.conjugations import ConjugationClient, ConjugationSource
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.selector import DueCardSelector
from flashcards.services.sentences import SentenceSource, TatoebaClient
from flashcards.services.session_stats import SessionStatsService
from flashcards.services.word_store import SqlAlchemyWordStore

_sentence_source_singleton: SentenceSource | None = None
_conjugation_source_singleton: ConjugationSource | None = None


def get_db() -> Session:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_word_store(db: Session = Depends(get_db)) -> SqlAlchemyWordStore:
    return SqlAlchemyWordStore(db)


def get_scheduler(store: SqlAlchemyWordStore = Depends(get_word_store)) -> ReviewScheduler:
    return ReviewScheduler(store)


def get_selector(store: SqlAlchemyWordStore = Depends(get_word_store)) -> DueCardSelector:
    return DueCardSelector(store)


def get_stats_service(db: Session = Depends(get_db)) -> SessionStatsService:
    return SessionStatsService(db)


def get_sentence_source() -> SentenceSource:
    """Return the shared example-sentence client."""

    global _sentence_source_singleton
    if _sentence_source_singleton is None:
        _sentence_source_singleton = TatoebaClient()
    return _sentence_source_singleton


def get_conjugation_source() -> ConjugationSource:
    """Return the shared conjugation client."""

    global _conjugation_source_singleton
    if _conjugation_source_singleton is None:
        _conjugation_source_singleton = ConjugationClient()
    return _conjugation_source_singleton
