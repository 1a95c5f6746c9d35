"""Answer statistics for the current study session and for each day."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.config import settings
from flashcards.core.records import GAME_TYPES
from flashcards.db.models.app_state import CURRENT_SESSION_KEY, AppState
from flashcards.db.models.stats import DailyStats
from flashcards.schemas.words import parse_timestamp, to_epoch_millis
from flashcards.utils.exceptions import PersistenceError


def _empty_game_stats() -> dict[str, dict[str, int]]:
    return {game: {"correct": 0, "incorrect": 0} for game in GAME_TYPES}


def _bump_game_stats(stats: dict[str, Any] | None, game_type: str, is_correct: bool) -> dict[str, dict[str, int]]:
    updated = {game: dict(counts) for game, counts in (stats or _empty_game_stats()).items()}
    counts = updated.setdefault(game_type, {"correct": 0, "incorrect": 0})
    counts["correct" if is_correct else "incorrect"] = counts.get("correct" if is_correct else "incorrect", 0) + 1
    return updated


@dataclass(slots=True)
class AnswerStats:
    """Counters shared by session and daily statistics."""

    cards_reviewed: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    game_type_stats: dict[str, dict[str, int]] = field(default_factory=_empty_game_stats)
    session_start_time: datetime | None = None
    last_activity_time: datetime | None = None
    day: date | None = None

    @property
    def accuracy_percent(self) -> int:
        total = self.correct_answers + self.incorrect_answers
        return round(self.correct_answers / total * 100) if total else 0


class SessionStatsService:
    """Track answers per session and per UTC day.

    A session ends after ``SESSION_INACTIVITY_MINUTES`` without answers;
    the next answer then starts a fresh session.
    """

    def __init__(self, db: Session, *, inactivity: timedelta | None = None):
        self.db = db
        self.inactivity = inactivity or timedelta(minutes=settings.SESSION_INACTIVITY_MINUTES)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    @staticmethod
    def _session_from_value(value: dict[str, Any]) -> AnswerStats:
        return AnswerStats(
            cards_reviewed=value.get("cardsReviewed", 0),
            correct_answers=value.get("correctAnswers", 0),
            incorrect_answers=value.get("incorrectAnswers", 0),
            game_type_stats=value.get("gameTypeStats") or _empty_game_stats(),
            session_start_time=parse_timestamp(value.get("sessionStartTime")),
            last_activity_time=parse_timestamp(value.get("lastActivityTime")),
        )

    @staticmethod
    def _session_to_value(stats: AnswerStats) -> dict[str, Any]:
        return {
            "sessionStartTime": to_epoch_millis(stats.session_start_time),
            "lastActivityTime": to_epoch_millis(stats.last_activity_time),
            "cardsReviewed": stats.cards_reviewed,
            "correctAnswers": stats.correct_answers,
            "incorrectAnswers": stats.incorrect_answers,
            "gameTypeStats": stats.game_type_stats,
        }

    def _stored_session(self) -> AnswerStats | None:
        row = self.db.get(AppState, CURRENT_SESSION_KEY)
        if row is None or not isinstance(row.value, dict):
            return None
        return self._session_from_value(row.value)

    def _is_expired(self, stats: AnswerStats, now: datetime) -> bool:
        last = stats.last_activity_time or stats.session_start_time
        return last is None or last < now - self.inactivity

    def current_session(self, *, now: datetime | None = None) -> AnswerStats:
        """Return the live session, or an empty one if it has gone stale."""

        now = now or datetime.now(timezone.utc)
        stats = self._stored_session()
        if stats is None or self._is_expired(stats, now):
            return AnswerStats(session_start_time=now, last_activity_time=now)
        return stats

    def _stage_session(self, stats: AnswerStats) -> None:
        value = self._session_to_value(stats)
        row = self.db.get(AppState, CURRENT_SESSION_KEY)
        if row is None:
            self.db.add(AppState(id=CURRENT_SESSION_KEY, value=value))
        else:
            row.value = value

    def start_new_session(self, *, now: datetime | None = None) -> AnswerStats:
        now = now or datetime.now(timezone.utc)
        stats = AnswerStats(session_start_time=now, last_activity_time=now)
        self._stage_session(stats)
        self._commit("start session")
        logger.info(f"Session started at {now.isoformat()}")
        return stats

    # ------------------------------------------------------------------
    # Daily
    # ------------------------------------------------------------------
    def daily_stats(self, day: date | None = None) -> AnswerStats:
        day = day or datetime.now(timezone.utc).date()
        row = self.db.get(DailyStats, day)
        if row is None:
            return AnswerStats(day=day)
        return AnswerStats(
            cards_reviewed=row.cards_reviewed,
            correct_answers=row.correct_answers,
            incorrect_answers=row.incorrect_answers,
            game_type_stats=row.game_type_stats or _empty_game_stats(),
            day=row.date,
        )

    def history(self, days: int = 7, *, today: date | None = None) -> list[AnswerStats]:
        today = today or datetime.now(timezone.utc).date()
        start = today - timedelta(days=days - 1)
        rows = self.db.scalars(
            select(DailyStats).where(DailyStats.date >= start, DailyStats.date <= today).order_by(DailyStats.date)
        )
        return [
            AnswerStats(
                cards_reviewed=row.cards_reviewed,
                correct_answers=row.correct_answers,
                incorrect_answers=row.incorrect_answers,
                game_type_stats=row.game_type_stats or _empty_game_stats(),
                day=row.date,
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record_answer(
        self, is_correct: bool, game_type: str = "flashcards", *, now: datetime | None = None
    ) -> tuple[AnswerStats, AnswerStats]:
        """Count one answer in the session and daily totals; returns both."""

        now = now or datetime.now(timezone.utc)
        session = self.current_session(now=now)
        session.cards_reviewed += 1
        session.correct_answers += int(is_correct)
        session.incorrect_answers += int(not is_correct)
        session.game_type_stats = _bump_game_stats(session.game_type_stats, game_type, is_correct)
        session.last_activity_time = now
        self._stage_session(session)

        today = now.date()
        row = self.db.get(DailyStats, today)
        if row is None:
            row = DailyStats(
                date=today,
                cards_reviewed=0,
                correct_answers=0,
                incorrect_answers=0,
                game_type_stats=_empty_game_stats(),
            )
            self.db.add(row)
        row.cards_reviewed += 1
        row.correct_answers += int(is_correct)
        row.incorrect_answers += int(not is_correct)
        row.game_type_stats = _bump_game_stats(row.game_type_stats, game_type, is_correct)

        self._commit("record answer")
        return session, self.daily_stats(today)

    def try_record_answer(
        self, is_correct: bool, game_type: str = "flashcards", *, now: datetime | None = None
    ) -> bool:
        """Best-effort ``record_answer``: a failed save is logged and reported as ``False``."""

        try:
            self.record_answer(is_correct, game_type, now=now)
        except PersistenceError as exc:
            logger.error(f"Answer stats not saved for {game_type}: {exc.message}")
            return False
        return True

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to {action}: {exc}")
            raise PersistenceError("Failed to save stats", {"error": str(exc)}) from exc
