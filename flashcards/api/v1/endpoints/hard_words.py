"""Hard-word endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.schemas import HardWordListResponse, HardWordPair, HardWordToggleResponse, WordRead
from flashcards.services.hard_words import EMPTY_HARD_WORDS_MESSAGE, HardWordService

router = APIRouter(prefix="/hard-words", tags=["hard-words"])


@router.get("/", response_model=HardWordListResponse)
def list_hard_words(db: Session = Depends(deps.get_db)) -> HardWordListResponse:
    pairs = HardWordService(db).list_pairs()
    return HardWordListResponse(
        total=len(pairs),
        items=[HardWordPair(spanish=spanish, english=english) for spanish, english in pairs],
    )


@router.get("/words", response_model=list[WordRead])
def hard_word_records(db: Session = Depends(deps.get_db)) -> list[WordRead]:
    """Word records for hard-words review mode."""

    records = HardWordService(db).hard_word_records()
    if not records:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMPTY_HARD_WORDS_MESSAGE)
    return [WordRead.from_record(record) for record in records]


@router.post("/toggle", response_model=HardWordToggleResponse)
def toggle_hard_word(payload: HardWordPair, db: Session = Depends(deps.get_db)) -> HardWordToggleResponse:
    is_hard = HardWordService(db).toggle(payload.spanish, payload.english)
    return HardWordToggleResponse(spanish=payload.spanish, english=payload.english, is_hard=is_hard)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def remove_hard_word(
    spanish: str = Query(..., min_length=1),
    english: str = Query(..., min_length=1),
    db: Session = Depends(deps.get_db),
) -> None:
    if not HardWordService(db).remove(spanish, english):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hard word not found")
