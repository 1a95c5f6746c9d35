"""Leitner box scheduler.

Boxes run from 0 (never reviewed) to 7. A correct answer moves the card up
one box, a miss sends it back to box 1. The next review is due a fixed
number of days after the answer, looked up by the new box.
"""
from __future__ import annotations

import datetime as dt

from flashcards.core.records import LeitnerState

MIN_LEITNER_BOX = 0
MAX_LEITNER_BOX = 7
RESET_BOX = 1

# Days until the next review, indexed by box
LEITNER_SCHEDULE_IN_DAYS = [0, 1, 2, 4, 8, 16, 32, 90]

TZ = dt.timezone.utc


def clamp_box(box: int | None) -> int:
    """Coerce a stored box value into the valid range."""

    if box is None:
        return MIN_LEITNER_BOX
    return max(MIN_LEITNER_BOX, min(MAX_LEITNER_BOX, int(box)))


def next_box(current_box: int | None, is_correct: bool) -> int:
    """Return the box a card moves to after an answer."""

    if not is_correct:
        return RESET_BOX
    return min(clamp_box(current_box) + 1, MAX_LEITNER_BOX)


def interval_for_box(box: int) -> dt.timedelta:
    """Return the review interval for a box."""

    return dt.timedelta(days=LEITNER_SCHEDULE_IN_DAYS[clamp_box(box)])


def schedule(state: LeitnerState | None, is_correct: bool, now: dt.datetime) -> LeitnerState:
    """Return the Leitner state after answering a card at ``now``.

    Args:
        state: Current state, or ``None`` for a card that never had Leitner data
        is_correct: Whether the learner answered correctly
        now: Time of the answer

    Returns:
        A new ``LeitnerState``; ``due_date - last_reviewed`` is exactly the
        interval of the new box.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=TZ)
    current_box = state.box if state is not None else MIN_LEITNER_BOX
    new_box = next_box(current_box, is_correct)
    return LeitnerState(
        box=new_box,
        last_reviewed=now,
        due_date=now + interval_for_box(new_box),
    )


def is_due(state: LeitnerState | None, now: dt.datetime) -> bool:
    """Return whether a card is due; cards without a due date always are."""

    if state is None or state.due_date is None:
        return True
    due_date = state.due_date
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=TZ)
    if now.tzinfo is None:
        now = now.replace(tzinfo=TZ)
    return due_date <= now
