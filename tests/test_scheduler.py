"""Tests for the word store, review scheduler and due-card selector."""
from __future__ import annotations

import random
from datetime import timedelta

import pytest

from flashcards.core.records import ExposureLevel
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.selector import DueCardSelector, NothingDue
from flashcards.utils.exceptions import PersistenceError, WordNotFoundError


class FailingStore:
    """Reads work, every write fails."""

    def __init__(self, records):
        self.records = {record.id: record for record in records}

    def get(self, word_id):
        return self.records.get(word_id)

    def put(self, record):
        raise PersistenceError("disk full")


def test_store_round_trips_both_states(store, make_word, now) -> None:
    word = make_word(
        "casa",
        "house",
        box=3,
        level=ExposureLevel.FAMILIAR,
        studied=3,
        correct=2,
        last_studied=now,
        synonyms_english=["home"],
    )

    word_id = store.put(word)
    loaded = store.get(word_id)

    assert loaded.id == word_id
    assert loaded.leitner_box == 3
    assert loaded.due_date == now
    assert loaded.exposure.level is ExposureLevel.FAMILIAR
    assert loaded.exposure.times_correct == 2
    assert loaded.exposure.last_studied == now
    assert loaded.synonyms_english == ["home"]


def test_store_due_query_includes_missing_due_dates(store, make_word, now) -> None:
    due_id = store.put(make_word("hola", "hello", due=now - timedelta(hours=1)))
    later_id = store.put(make_word("perro", "dog", due=now + timedelta(days=2)))
    untracked_id = store.put(make_word("gato", "cat", box=None))

    due_ids = {word.id for word in store.where_due_date_below_or_equal(now)}

    assert due_ids == {due_id, untracked_id}
    assert later_id not in due_ids
    assert store.count() == 3


def test_store_delete_and_clear(store, make_word) -> None:
    first = store.put(make_word("hola", "hello"))
    store.put(make_word("perro", "dog"))

    store.delete(first)
    assert store.get(first) is None
    assert len(store.to_array()) == 1

    store.clear()
    assert store.to_array() == []


def test_schedule_after_answer_persists_new_box(scheduler, store, spanish_words, now) -> None:
    word = spanish_words[0]

    result = scheduler.schedule_after_answer(word, True, now=now)

    assert result.persisted
    assert result.word.leitner_box == 2
    assert result.word.due_date == now + timedelta(days=2)
    assert store.get(word.id).leitner_box == 2


def test_failed_write_still_returns_updated_record(make_word, now) -> None:
    word = make_word("hola", "hello", word_id=1, box=4)
    scheduler = ReviewScheduler(FailingStore([word]))

    result = scheduler.schedule_after_answer(word, False, now=now)

    assert not result.persisted
    assert isinstance(result.error, PersistenceError)
    assert result.word.leitner_box == 1


def test_update_exposure_reports_level_change(scheduler, store, spanish_words, now) -> None:
    word = spanish_words[1]

    first = scheduler.update_exposure(word, True, "matching", now=now)
    second = scheduler.update_exposure(first.word, True, "matching", now=now)

    assert first.has_leveled_up and first.new_level is ExposureLevel.LEARNING
    assert second.previous_level is ExposureLevel.LEARNING
    assert second.new_level is ExposureLevel.FAMILIAR
    stored = store.get(word.id)
    assert stored.exposure.times_studied == 2
    assert stored.exposure.game_performance["matching"].total == 2
    # the Leitner state is untouched by exposure updates
    assert stored.leitner_box == word.leitner_box


def test_update_exposure_by_id_requires_existing_word(scheduler) -> None:
    with pytest.raises(WordNotFoundError):
        scheduler.update_exposure_by_id(999, True)


def test_mark_word_as_known(scheduler, store, spanish_words, now) -> None:
    result = scheduler.mark_word_as_known(spanish_words[2].id, now=now)

    assert result.persisted
    stored = store.get(spanish_words[2].id)
    assert stored.is_known
    assert stored.user_priority == "low"


def test_failed_exposure_write_keeps_transition(make_word, now) -> None:
    word = make_word("hola", "hello", word_id=5)
    scheduler = ReviewScheduler(FailingStore([word]))

    update = scheduler.update_exposure_by_id(5, True, "fillInBlank", now=now)

    assert not update.persisted
    assert update.has_leveled_up
    assert update.word.exposure.times_studied == 1


def test_selector_avoids_immediate_repeat(store, spanish_words, now) -> None:
    selector = DueCardSelector(store, rng=random.Random(1))
    active = spanish_words[:2]

    for _ in range(20):
        choice = selector.select_next(active, exclude_id=active[0].id, now=now)
        assert choice.id == active[1].id


def test_selector_returns_excluded_card_when_it_is_the_only_one(store, spanish_words, now) -> None:
    selector = DueCardSelector(store)
    only = spanish_words[:1]

    choice = selector.select_next(only, exclude_id=only[0].id, now=now)

    assert choice.id == only[0].id


def test_selector_reports_nothing_due(store, spanish_words, now) -> None:
    selector = DueCardSelector(store)

    result = selector.select_next(spanish_words, now=now - timedelta(days=1))

    assert isinstance(result, NothingDue)
    assert result.active_count == len(spanish_words)
    assert selector.count_due(spanish_words, now=now) == len(spanish_words)


def test_selector_limits_choices_to_active_set(store, spanish_words, now) -> None:
    selector = DueCardSelector(store, rng=random.Random(3))
    active = [spanish_words[4]]

    assert selector.due_candidates(active, now=now)[0].id == spanish_words[4].id
    assert selector.due_candidates([], now=now) == []


def test_selector_with_empty_active_set_reports_nothing_due(store, spanish_words, now) -> None:
    result = DueCardSelector(store).select_next([], now=now)

    assert isinstance(result, NothingDue)
    assert result.active_count == 0
