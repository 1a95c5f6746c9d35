"""Pydantic schemas for answer statistics."""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from flashcards.services.session_stats import AnswerStats


class GameTypeCounts(BaseModel):
    correct: int = 0
    incorrect: int = 0


class AnswerStatsRead(BaseModel):
    cards_reviewed: int
    correct_answers: int
    incorrect_answers: int
    accuracy_percent: int
    game_type_stats: Dict[str, GameTypeCounts] = Field(default_factory=dict)
    session_start_time: Optional[datetime] = None
    last_activity_time: Optional[datetime] = None
    day: Optional[date] = None

    @classmethod
    def from_stats(cls, stats: AnswerStats) -> "AnswerStatsRead":
        return cls(
            cards_reviewed=stats.cards_reviewed,
            correct_answers=stats.correct_answers,
            incorrect_answers=stats.incorrect_answers,
            accuracy_percent=stats.accuracy_percent,
            game_type_stats={
                game: GameTypeCounts(**counts) for game, counts in stats.game_type_stats.items()
            },
            session_start_time=stats.session_start_time,
            last_activity_time=stats.last_activity_time,
            day=stats.day,
        )


class RecordAnswerRequest(BaseModel):
    is_correct: bool
    game_type: str = Field("flashcards", max_length=30)


class StatsOverview(BaseModel):
    session: AnswerStatsRead
    today: AnswerStatsRead


class StatsHistory(BaseModel):
    days: List[AnswerStatsRead]
