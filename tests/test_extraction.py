"""Tests for hard words and the extraction translation queue."""
from __future__ import annotations

from datetime import timedelta

import pytest

from flashcards.core.records import ExposureLevel
from flashcards.db.models.incomplete_word import IncompleteWord
from flashcards.services.extraction import ExtractionQueueService, build_extraction_metadata
from flashcards.services.hard_words import HardWordService
from flashcards.utils.exceptions import ValidationError, WordNotFoundError


def test_toggle_marks_and_unmarks_pair(db_session) -> None:
    service = HardWordService(db_session)

    assert service.toggle("casa", "house") is True
    assert service.is_hard("casa", "house")
    assert not service.is_hard("casa", "home")
    assert service.list_pairs() == [("casa", "house")]

    assert service.toggle("casa", "house") is False
    assert service.list_pairs() == []


def test_toggle_requires_both_sides(db_session) -> None:
    with pytest.raises(ValidationError):
        HardWordService(db_session).toggle("casa", "")


def test_hard_word_records_match_on_pair(db_session, spanish_words) -> None:
    service = HardWordService(db_session)
    service.toggle("perro", "dog")
    service.toggle("casa", "home")  # no such pair stored

    records = service.hard_word_records()

    assert [record.spanish for record in records] == ["perro"]
    assert service.remove("casa", "home")
    assert not service.remove("casa", "home")


def test_hard_word_records_empty_without_markers(db_session, spanish_words) -> None:
    assert HardWordService(db_session).hard_word_records() == []


def test_extraction_metadata_uses_camel_case_keys(now) -> None:
    metadata = build_extraction_metadata({"sourceText": "Érase una vez", "sourceLength": 12}, now)

    assert metadata["sourceText"] == "Érase una vez"
    assert metadata["sourceLength"] == 12
    assert metadata["extractionDate"] == int(now.timestamp() * 1000)
    assert metadata["sourceCategory"] == ""


def test_add_words_skips_duplicates_case_insensitively(db_session, spanish_words, now) -> None:
    service = ExtractionQueueService(db_session)

    result = service.add_words(["Casa", "nube", " NUBE ", "  ", "montaña"], {"sourceCategory": "story"}, now=now)

    assert [entry.spanish for entry in result.added] == ["nube", "montaña"]
    assert result.duplicates == ["Casa", "NUBE"]
    assert result.failed == ["  "]
    assert result.message == "Added 2 words to translation queue. 2 duplicates skipped. 1 failed."

    again = service.add_words(["Montaña"], now=now)
    assert again.added == []
    assert again.duplicates == ["Montaña"]


def test_add_words_requires_words(db_session) -> None:
    with pytest.raises(ValidationError):
        ExtractionQueueService(db_session).add_words([])


def test_list_pending_newest_first(db_session, now) -> None:
    service = ExtractionQueueService(db_session)
    service.add_words(["nube"], now=now - timedelta(hours=2))
    service.add_words(["sol"], now=now)

    assert [entry.spanish for entry in service.list_pending()] == ["sol", "nube"]


def test_complete_moves_word_into_vocabulary(db_session, store, now) -> None:
    service = ExtractionQueueService(db_session)
    entry = service.add_words(["nube"], {"sourceCategory": "weather"}, now=now).added[0]

    record = service.complete(entry.id, " cloud ", synonyms_english=["clouds"])

    assert record.id is not None
    assert record.english == "cloud"
    assert record.source == "extraction"
    assert record.category == "weather"
    assert record.notes == f"Extracted: {now.date().isoformat()}"
    assert record.exposure_level is ExposureLevel.NEW
    assert db_session.get(IncompleteWord, entry.id) is None
    assert store.get(record.id).synonyms_english == ["clouds"]


def test_complete_requires_translation(db_session, now) -> None:
    service = ExtractionQueueService(db_session)
    entry = service.add_words(["nube"], now=now).added[0]

    with pytest.raises(ValidationError):
        service.complete(entry.id, "   ")
    with pytest.raises(WordNotFoundError):
        service.complete(9999, "cloud")


def test_reject_deletes_queue_entry(db_session, now) -> None:
    service = ExtractionQueueService(db_session)
    entry = service.add_words(["nube"], now=now).added[0]

    service.reject(entry.id)

    assert service.list_pending() == []
    with pytest.raises(WordNotFoundError):
        service.reject(entry.id)
