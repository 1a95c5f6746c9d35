"""Game readiness checks and one-off question builders.

Question endpoints are stateless: the client shows the question and posts
the learner's answer to ``/review/exposure``.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.api.v1.endpoints.word_sets import Scope, resolve_active_words
from flashcards.games import GAME_MODES, ConjugationGame, FillInBlankGame, MatchingGame
from flashcards.schemas import (
    BlankQuestionResponse,
    ConjugationQuestionResponse,
    MatchingBoardResponse,
    ReadinessResponse,
    WordRead,
)
from flashcards.schemas.games import MatchOptionRead
from flashcards.services.conjugations import ConjugationSource
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.sentences import SentenceSource

router = APIRouter(prefix="/games", tags=["games"])


@router.get("/{mode}/readiness", response_model=ReadinessResponse)
def game_readiness(
    mode: str,
    scope: Scope = Query(default="all"),
    ids: list[int] | None = Query(default=None),
    db: Session = Depends(deps.get_db),
) -> ReadinessResponse:
    """Report whether the active word set has enough candidates for ``mode``."""

    game_cls = GAME_MODES.get(mode)
    if game_cls is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown game mode: {mode}")
    readiness = game_cls.readiness(resolve_active_words(db, scope, ids))
    return ReadinessResponse(
        mode=mode,
        ready=readiness.ready,
        candidate_count=readiness.candidate_count,
        required=readiness.required,
        message=readiness.message or None,
    )


@router.get("/matching/board", response_model=MatchingBoardResponse)
def matching_board(
    scope: Scope = Query(default="all"),
    ids: list[int] | None = Query(default=None),
    exclude_ids: list[int] | None = Query(default=None, description="Pairs already matched this session"),
    db: Session = Depends(deps.get_db),
    scheduler: ReviewScheduler = Depends(deps.get_scheduler),
) -> MatchingBoardResponse:
    game = MatchingGame(resolve_active_words(db, scope, ids), scheduler, excluded_ids=exclude_ids or ())
    board = game.start()
    return MatchingBoardResponse(
        spanish_options=[MatchOptionRead(id=o.id, text=o.text) for o in board.spanish_options],
        english_options=[MatchOptionRead(id=o.id, text=o.text) for o in board.english_options],
    )


@router.get("/fillInBlank/question", response_model=BlankQuestionResponse)
def fill_in_blank_question(
    scope: Scope = Query(default="all"),
    ids: list[int] | None = Query(default=None),
    db: Session = Depends(deps.get_db),
    scheduler: ReviewScheduler = Depends(deps.get_scheduler),
    sentences: SentenceSource = Depends(deps.get_sentence_source),
) -> BlankQuestionResponse:
    game = FillInBlankGame(resolve_active_words(db, scope, ids), scheduler, sentences)
    question = game.start()
    return BlankQuestionResponse(
        word=WordRead.from_record(question.target),
        sentence_with_blank=question.sentence_with_blank,
        choices=question.choices,
        correct_answer=question.correct_answer,
        original_sentence_spa=question.original_sentence_spa,
        original_sentence_eng=question.original_sentence_eng,
    )


@router.get("/conjugation/question", response_model=ConjugationQuestionResponse)
def conjugation_question(
    scope: Scope = Query(default="all"),
    ids: list[int] | None = Query(default=None),
    db: Session = Depends(deps.get_db),
    scheduler: ReviewScheduler = Depends(deps.get_scheduler),
    conjugations: ConjugationSource = Depends(deps.get_conjugation_source),
) -> ConjugationQuestionResponse:
    game = ConjugationGame(resolve_active_words(db, scope, ids), scheduler, conjugations)
    question = game.start()
    return ConjugationQuestionResponse(
        word=WordRead.from_record(question.word),
        question=question.question,
        answer=question.answer,
        full_answer=question.full_answer,
        tense=question.tense,
        person=question.person,
        mood=question.mood,
        english_meaning=question.english_meaning,
    )
