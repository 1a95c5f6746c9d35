"""Tests for session and daily answer statistics."""
from __future__ import annotations

from datetime import timedelta

from flashcards.db.models.app_state import CURRENT_SESSION_KEY, AppState
from flashcards.services.session_stats import AnswerStats, SessionStatsService


def test_record_answer_updates_session_and_day(db_session, now) -> None:
    service = SessionStatsService(db_session)

    service.record_answer(True, "flashcards", now=now)
    session, today = service.record_answer(False, "matching", now=now + timedelta(minutes=1))

    assert session.cards_reviewed == 2
    assert session.correct_answers == 1
    assert session.incorrect_answers == 1
    assert session.game_type_stats["matching"] == {"correct": 0, "incorrect": 1}
    assert session.accuracy_percent == 50
    assert today.day == now.date()
    assert today.cards_reviewed == 2
    assert today.game_type_stats["flashcards"] == {"correct": 1, "incorrect": 0}


def test_session_is_stored_with_epoch_millis(db_session, now) -> None:
    SessionStatsService(db_session).record_answer(True, "flashcards", now=now)

    value = db_session.get(AppState, CURRENT_SESSION_KEY).value

    assert value["lastActivityTime"] == int(now.timestamp() * 1000)
    assert value["cardsReviewed"] == 1


def test_session_expires_after_inactivity(db_session, now) -> None:
    service = SessionStatsService(db_session, inactivity=timedelta(minutes=30))
    service.record_answer(True, "flashcards", now=now)

    assert service.current_session(now=now + timedelta(minutes=29)).cards_reviewed == 1
    stale = service.current_session(now=now + timedelta(minutes=31))
    assert stale.cards_reviewed == 0

    session, today = service.record_answer(True, "flashcards", now=now + timedelta(minutes=31))
    assert session.cards_reviewed == 1
    assert today.cards_reviewed == 2


def test_start_new_session_resets_counters(db_session, now) -> None:
    service = SessionStatsService(db_session)
    service.record_answer(True, "conjugation", now=now)

    fresh = service.start_new_session(now=now + timedelta(minutes=1))

    assert fresh.cards_reviewed == 0
    assert service.current_session(now=now + timedelta(minutes=2)).cards_reviewed == 0
    assert service.daily_stats(now.date()).cards_reviewed == 1


def test_history_lists_recorded_days(db_session, now) -> None:
    service = SessionStatsService(db_session)
    service.record_answer(True, "flashcards", now=now - timedelta(days=2))
    service.record_answer(False, "flashcards", now=now)
    service.record_answer(True, "flashcards", now=now - timedelta(days=10))

    history = service.history(7, today=now.date())

    assert [stats.day for stats in history] == [(now - timedelta(days=2)).date(), now.date()]
    assert history[1].incorrect_answers == 1


def test_empty_day_and_accuracy() -> None:
    assert AnswerStats().accuracy_percent == 0
    assert AnswerStats(correct_answers=2, incorrect_answers=1).accuracy_percent == 67
