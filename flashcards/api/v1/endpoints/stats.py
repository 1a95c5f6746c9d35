"""Session and daily answer statistics."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from flashcards.api import deps
from flashcards.schemas.stats import AnswerStatsRead, RecordAnswerRequest, StatsHistory, StatsOverview
from flashcards.services.session_stats import SessionStatsService

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/", response_model=StatsOverview)
def get_stats(stats: SessionStatsService = Depends(deps.get_stats_service)) -> StatsOverview:
    return StatsOverview(
        session=AnswerStatsRead.from_stats(stats.current_session()),
        today=AnswerStatsRead.from_stats(stats.daily_stats()),
    )


@router.post("/answers", response_model=StatsOverview)
def record_answer(
    payload: RecordAnswerRequest, stats: SessionStatsService = Depends(deps.get_stats_service)
) -> StatsOverview:
    """Count an answer given outside the review endpoints."""

    session, today = stats.record_answer(payload.is_correct, payload.game_type)
    return StatsOverview(session=AnswerStatsRead.from_stats(session), today=AnswerStatsRead.from_stats(today))


@router.post("/session", response_model=AnswerStatsRead)
def start_session(stats: SessionStatsService = Depends(deps.get_stats_service)) -> AnswerStatsRead:
    return AnswerStatsRead.from_stats(stats.start_new_session())


@router.get("/history", response_model=StatsHistory)
def stats_history(
    days: int = Query(default=7, ge=1, le=365),
    stats: SessionStatsService = Depends(deps.get_stats_service),
) -> StatsHistory:
    return StatsHistory(days=[AnswerStatsRead.from_stats(day) for day in stats.history(days)])
