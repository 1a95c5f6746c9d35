"""Tests for the Leitner and exposure schedulers."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from flashcards.core.records import ExposureLevel, ExposureState, GameScore, LeitnerState
from flashcards.core.srs import exposure, leitner

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("box", "expected_box", "days"),
    [(0, 1, 1), (1, 2, 2), (2, 3, 4), (3, 4, 8), (4, 5, 16), (5, 6, 32), (6, 7, 90), (7, 7, 90)],
)
def test_correct_answer_moves_card_up_one_box(box: int, expected_box: int, days: int) -> None:
    state = leitner.schedule(LeitnerState(box=box), True, NOW)

    assert state.box == expected_box
    assert state.last_reviewed == NOW
    assert state.due_date - state.last_reviewed == timedelta(days=days)


@pytest.mark.parametrize("box", [0, 1, 4, 7])
def test_incorrect_answer_resets_to_box_one(box: int) -> None:
    state = leitner.schedule(LeitnerState(box=box), False, NOW)

    assert state.box == 1
    assert state.due_date == NOW + timedelta(days=1)


def test_schedule_without_previous_state_starts_from_box_zero() -> None:
    state = leitner.schedule(None, True, NOW)

    assert state.box == 1
    assert state.due_date == NOW + timedelta(days=1)


def test_naive_timestamps_are_treated_as_utc() -> None:
    state = leitner.schedule(LeitnerState(box=2), True, datetime(2024, 3, 1, 12, 0))

    assert state.last_reviewed == NOW
    assert state.due_date == NOW + timedelta(days=4)


def test_out_of_range_boxes_are_clamped() -> None:
    assert leitner.clamp_box(None) == 0
    assert leitner.clamp_box(-3) == 0
    assert leitner.clamp_box(12) == 7
    assert leitner.next_box(12, True) == 7


def test_is_due_treats_missing_due_date_as_due() -> None:
    assert leitner.is_due(None, NOW)
    assert leitner.is_due(LeitnerState(box=1), NOW)
    assert leitner.is_due(LeitnerState(box=1, due_date=NOW), NOW)
    assert not leitner.is_due(LeitnerState(box=1, due_date=NOW + timedelta(seconds=1)), NOW)


@pytest.mark.parametrize(
    ("studied", "accuracy", "level"),
    [
        (0, 0.0, ExposureLevel.NEW),
        (1, 1.0, ExposureLevel.LEARNING),
        (2, 0.4, ExposureLevel.LEARNING),
        (2, 0.5, ExposureLevel.FAMILIAR),
        (5, 0.4, ExposureLevel.LEARNING),
        (4, 0.75, ExposureLevel.FAMILIAR),
        (4, 0.8, ExposureLevel.MASTERED),
    ],
)
def test_calculate_exposure_level_thresholds(studied: int, accuracy: float, level: ExposureLevel) -> None:
    assert exposure.calculate_exposure_level(studied, accuracy) is level


def test_first_answer_levels_up_new_word() -> None:
    transition = exposure.record_answer(None, True, "matching", NOW)

    assert transition.previous_level is ExposureLevel.NEW
    assert transition.new_level is ExposureLevel.LEARNING
    assert transition.has_leveled_up
    assert not transition.has_regressed
    assert transition.state.times_studied == 1
    assert transition.state.times_correct == 1
    assert transition.state.last_studied == NOW
    assert transition.state.game_performance["matching"] == GameScore(correct=1, total=1)
    assert transition.state.game_performance["flashcards"] == GameScore()


def test_mistakes_can_regress_a_mastered_word() -> None:
    state = ExposureState(level=ExposureLevel.MASTERED, times_studied=4, times_correct=4)

    transition = exposure.record_answer(state, False, "fillInBlank", NOW)

    # 4/5 keeps mastery, the next miss does not
    assert transition.new_level is ExposureLevel.MASTERED
    transition = exposure.record_answer(transition.state, False, "fillInBlank", NOW)
    assert transition.new_level is ExposureLevel.FAMILIAR
    assert transition.has_regressed
    assert not transition.has_leveled_up


def test_low_accuracy_stays_learning_despite_many_studies() -> None:
    state = ExposureState(level=ExposureLevel.FAMILIAR, times_studied=4, times_correct=2)

    transition = exposure.record_answer(state, False, "flashcards", NOW)

    assert transition.state.times_studied == 5
    assert transition.state.times_correct == 2
    assert transition.new_level is ExposureLevel.LEARNING
    assert transition.has_regressed
    assert not transition.has_leveled_up


def test_known_is_never_cleared_by_answers() -> None:
    state = exposure.mark_known(None, NOW)

    transition = exposure.record_answer(state, False, "flashcards", NOW)

    assert transition.new_level is ExposureLevel.KNOWN
    assert transition.state.times_studied == 1
    assert not transition.has_leveled_up
    assert not transition.has_regressed


def test_mark_known_keeps_counters() -> None:
    state = ExposureState(level=ExposureLevel.FAMILIAR, times_studied=3, times_correct=2)

    known = exposure.mark_known(state, NOW)

    assert known.level is ExposureLevel.KNOWN
    assert known.times_studied == 3
    assert known.last_studied == NOW
