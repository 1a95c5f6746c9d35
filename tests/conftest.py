"""Pytest fixtures for service and API tests."""

import os
import random
from collections.abc import Generator
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BOOTSTRAP_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from flashcards.api import deps
from flashcards.core.conjugation import regular_conjugations
from flashcards.core.records import ExposureLevel, ExposureState, LeitnerState, WordRecord
from flashcards.db import models  # noqa: F401  # Imported for side effects
from flashcards.db.base import Base
from flashcards.main import create_app
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.sentences import SentencePair
from flashcards.services.word_store import SqlAlchemyWordStore
from flashcards.utils.cache import cache_backend

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeSentenceSource:
    """Serves canned sentence pairs keyed by the Spanish query."""

    def __init__(self, sentences: dict[str, list[SentencePair]] | None = None) -> None:
        self.sentences = sentences or {}
        self.queries: list[str] = []

    def get_examples(self, spanish_query: str) -> list[SentencePair]:
        self.queries.append(spanish_query)
        return list(self.sentences.get(spanish_query, []))


class FakeConjugationSource:
    """Regular-verb tables without any network access."""

    def __init__(self) -> None:
        self.verbs: list[str] = []

    def get_conjugations(self, verb: str) -> dict[str, list[str]] | None:
        self.verbs.append(verb)
        return regular_conjugations(verb)


def _make_word(
    spanish: str,
    english: str,
    *,
    word_id: int | None = None,
    box: int | None = 1,
    due: datetime | None = NOW,
    level: ExposureLevel | None = None,
    studied: int = 0,
    correct: int = 0,
    last_studied: datetime | None = None,
    **extra,
) -> WordRecord:
    leitner = LeitnerState(box=box, last_reviewed=NOW - timedelta(days=1), due_date=due) if box is not None else None
    exposure = None
    if level is not None:
        exposure = ExposureState(
            level=level,
            times_studied=studied,
            times_correct=correct,
            last_studied=last_studied,
        )
    return WordRecord(
        spanish=spanish,
        english=english,
        id=word_id,
        leitner=leitner,
        exposure=exposure,
        **extra,
    )


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine, expire_on_commit=False
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clear_cache() -> Generator[None, None, None]:
    cache_backend.clear()
    try:
        yield
    finally:
        cache_backend.clear()


@pytest.fixture()
def store(db_session: Session) -> SqlAlchemyWordStore:
    return SqlAlchemyWordStore(db_session)


@pytest.fixture()
def scheduler(store: SqlAlchemyWordStore) -> ReviewScheduler:
    return ReviewScheduler(store)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture()
def sentence_source() -> FakeSentenceSource:
    return FakeSentenceSource()


@pytest.fixture()
def conjugation_source() -> FakeConjugationSource:
    return FakeConjugationSource()


@pytest.fixture()
def spanish_words(store: SqlAlchemyWordStore) -> list[WordRecord]:
    """A small stored vocabulary, every card due now."""

    words = [
        _make_word("hola", "hello", frequency_rank=10),
        _make_word("casa", "house", frequency_rank=50, synonyms_english=["home"]),
        _make_word("perro", "dog", frequency_rank=300),
        _make_word("gato", "cat", frequency_rank=400),
        _make_word("hablar", "to speak", frequency_rank=80),
        _make_word("comer", "to eat", frequency_rank=90),
        _make_word("vivir", "to live", frequency_rank=120),
        _make_word("libro", "book", frequency_rank=700),
    ]
    ids = store.bulk_put(words)
    return [store.get(word_id) for word_id in ids]


@pytest.fixture()
def client(
    db_session: Session,
    sentence_source: FakeSentenceSource,
    conjugation_source: FakeConjugationSource,
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[deps.get_db] = override_get_db
    app.dependency_overrides[deps.get_sentence_source] = lambda: sentence_source
    app.dependency_overrides[deps.get_conjugation_source] = lambda: conjugation_source
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_word():
    return _make_word


@pytest.fixture()
def now() -> datetime:
    return NOW
