"""Exposure-level mastery tracking.

Each answer bumps the study counters and the level is recomputed from the
number of answers and their accuracy. ``known`` sits outside the
progression: only an explicit learner action sets it and no answer ever
clears it.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace

from flashcards.core.records import ExposureLevel, ExposureState, GameScore

LEVEL_PROGRESSION = [
    ExposureLevel.NEW,
    ExposureLevel.LEARNING,
    ExposureLevel.FAMILIAR,
    ExposureLevel.MASTERED,
]

MIN_STUDIES_FAMILIAR = 2
MIN_STUDIES_MASTERED = 4
MIN_ACCURACY_FAMILIAR = 0.5
MIN_ACCURACY_MASTERED = 0.8

TZ = dt.timezone.utc


@dataclass(slots=True, frozen=True)
class ExposureTransition:
    """Outcome of applying one answer to an exposure state."""

    state: ExposureState
    previous_level: ExposureLevel
    new_level: ExposureLevel

    @property
    def has_leveled_up(self) -> bool:
        return level_index(self.new_level) > level_index(self.previous_level)

    @property
    def has_regressed(self) -> bool:
        return level_index(self.new_level) < level_index(self.previous_level)


def level_index(level: ExposureLevel) -> int:
    """Position of ``level`` in the progression; ``known`` ranks nowhere (-1)."""

    try:
        return LEVEL_PROGRESSION.index(level)
    except ValueError:
        return -1


def calculate_exposure_level(times_studied: int, accuracy: float) -> ExposureLevel:
    """Map study count and accuracy to a level of the progression."""

    if times_studied <= 0:
        return ExposureLevel.NEW
    if times_studied < MIN_STUDIES_FAMILIAR or accuracy < MIN_ACCURACY_FAMILIAR:
        return ExposureLevel.LEARNING
    if times_studied < MIN_STUDIES_MASTERED or accuracy < MIN_ACCURACY_MASTERED:
        return ExposureLevel.FAMILIAR
    return ExposureLevel.MASTERED


def record_answer(
    state: ExposureState | None,
    is_correct: bool,
    game_type: str,
    now: dt.datetime,
) -> ExposureTransition:
    """Apply one answer from ``game_type`` and return the transition."""

    if now.tzinfo is None:
        now = now.replace(tzinfo=TZ)
    state = state or ExposureState()

    times_studied = state.times_studied + 1
    times_correct = state.times_correct + (1 if is_correct else 0)

    performance = dict(state.game_performance)
    score = performance.get(game_type, GameScore())
    performance[game_type] = GameScore(
        correct=score.correct + (1 if is_correct else 0),
        total=score.total + 1,
    )

    if state.level is ExposureLevel.KNOWN:
        new_level = ExposureLevel.KNOWN
    else:
        new_level = calculate_exposure_level(times_studied, times_correct / times_studied)

    updated = replace(
        state,
        level=new_level,
        times_studied=times_studied,
        times_correct=times_correct,
        last_studied=now,
        game_performance=performance,
    )
    return ExposureTransition(state=updated, previous_level=state.level, new_level=new_level)


def mark_known(state: ExposureState | None, now: dt.datetime) -> ExposureState:
    """Return ``state`` flagged as known by the learner."""

    if now.tzinfo is None:
        now = now.replace(tzinfo=TZ)
    return replace(state or ExposureState(), level=ExposureLevel.KNOWN, last_studied=now)
