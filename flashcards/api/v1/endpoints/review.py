"""Review endpoints: next due card, answers and exposure updates."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.api.v1.endpoints.word_sets import Scope, resolve_active_words
from flashcards.core.text import matches_any
from flashcards.schemas import (
    ExposureAnswerRequest,
    ExposureAnswerResponse,
    MarkKnownResponse,
    NextCardResponse,
    ReviewAnswerRequest,
    ReviewAnswerResponse,
    WordRead,
)
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.selector import DueCardSelector, NothingDue
from flashcards.services.session_stats import SessionStatsService
from flashcards.services.word_store import SqlAlchemyWordStore
from flashcards.utils.exceptions import WordNotFoundError

router = APIRouter(prefix="/review", tags=["review"])


@router.get("/next", response_model=NextCardResponse)
def next_card(
    scope: Scope = Query(default="all", description="all, hard, or ids"),
    ids: list[int] | None = Query(default=None, description="Word ids when scope is 'ids'"),
    exclude_id: int | None = Query(default=None, description="Card shown last"),
    db: Session = Depends(deps.get_db),
    selector: DueCardSelector = Depends(deps.get_selector),
) -> NextCardResponse:
    """Pick a random due card from the active set."""

    active = resolve_active_words(db, scope, ids)
    due_count = selector.count_due(active)
    choice = selector.select_next(active, exclude_id=exclude_id)
    if isinstance(choice, NothingDue):
        return NextCardResponse(
            nothing_due=True,
            message=choice.message,
            active_count=choice.active_count,
        )
    return NextCardResponse(
        word=WordRead.from_record(choice),
        due_count=due_count,
        active_count=len(active),
    )


@router.post("/answer", response_model=ReviewAnswerResponse)
def answer_card(
    payload: ReviewAnswerRequest,
    store: SqlAlchemyWordStore = Depends(deps.get_word_store),
    scheduler: ReviewScheduler = Depends(deps.get_scheduler),
    stats: SessionStatsService = Depends(deps.get_stats_service),
) -> ReviewAnswerResponse:
    """Grade a flashcard answer and move the card between Leitner boxes."""

    word = store.get(payload.word_id)
    if word is None:
        raise WordNotFoundError("Word not found", {"word_id": payload.word_id})

    expected = word.english if payload.direction == "spa-eng" else word.spanish
    if payload.answer is None:
        is_correct = bool(payload.is_correct)
    elif payload.direction == "spa-eng":
        is_correct = matches_any(payload.answer, word.english, word.synonyms_english, english=True)
    else:
        is_correct = matches_any(payload.answer, word.spanish)

    result = scheduler.schedule_after_answer(word, is_correct)
    stats.try_record_answer(is_correct, "flashcards")
    return ReviewAnswerResponse(
        word=WordRead.from_record(result.word),
        is_correct=is_correct,
        correct_answer=expected,
        persisted=result.persisted,
        error=result.error.message if result.error else None,
    )


@router.post("/exposure", response_model=ExposureAnswerResponse)
def record_exposure(
    payload: ExposureAnswerRequest,
    scheduler: ReviewScheduler = Depends(deps.get_scheduler),
    stats: SessionStatsService = Depends(deps.get_stats_service),
) -> ExposureAnswerResponse:
    """Count a game answer toward the word's exposure level."""

    update = scheduler.update_exposure_by_id(payload.word_id, payload.is_correct, payload.game_type)
    stats.try_record_answer(payload.is_correct, payload.game_type)
    return ExposureAnswerResponse(
        word=WordRead.from_record(update.word),
        previous_level=update.previous_level,
        new_level=update.new_level,
        has_leveled_up=update.has_leveled_up,
        has_regressed=update.has_regressed,
        persisted=update.persisted,
        error=update.error.message if update.error else None,
    )


@router.post("/known/{word_id}", response_model=MarkKnownResponse)
def mark_known(word_id: int, scheduler: ReviewScheduler = Depends(deps.get_scheduler)) -> MarkKnownResponse:
    """Take a word out of active study."""

    result = scheduler.mark_word_as_known(word_id)
    return MarkKnownResponse(
        word=WordRead.from_record(result.word),
        persisted=result.persisted,
        error=result.error.message if result.error else None,
    )
