"""Translation queue endpoints for extracted words."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.schemas import (
    CompleteWordRequest,
    ExtractedWordsRequest,
    ExtractedWordsResponse,
    IncompleteWordRead,
    WordRead,
)
from flashcards.services.extraction import ExtractionQueueService

router = APIRouter(prefix="/incomplete-words", tags=["incomplete-words"])


@router.get("/", response_model=list[IncompleteWordRead])
def list_incomplete_words(db: Session = Depends(deps.get_db)) -> list[IncompleteWordRead]:
    """Words still waiting for a translation, newest first."""

    return [IncompleteWordRead.model_validate(entry) for entry in ExtractionQueueService(db).list_pending()]


@router.post("/", response_model=ExtractedWordsResponse, status_code=status.HTTP_201_CREATED)
def add_extracted_words(
    payload: ExtractedWordsRequest, db: Session = Depends(deps.get_db)
) -> ExtractedWordsResponse:
    result = ExtractionQueueService(db).add_words(payload.words, payload.context.model_dump(by_alias=True))
    return ExtractedWordsResponse(
        added=[IncompleteWordRead.model_validate(entry) for entry in result.added],
        duplicates=result.duplicates,
        failed=result.failed,
        message=result.message,
    )


@router.post("/{incomplete_id}/complete", response_model=WordRead, status_code=status.HTTP_201_CREATED)
def complete_word(
    incomplete_id: int, payload: CompleteWordRequest, db: Session = Depends(deps.get_db)
) -> WordRead:
    record = ExtractionQueueService(db).complete(
        incomplete_id,
        payload.english,
        notes=payload.notes,
        category=payload.category,
        synonyms_spanish=payload.synonyms_spanish,
        synonyms_english=payload.synonyms_english,
    )
    return WordRead.from_record(record)


@router.delete("/{incomplete_id}", status_code=status.HTTP_204_NO_CONTENT)
def reject_word(incomplete_id: int, db: Session = Depends(deps.get_db)) -> None:
    ExtractionQueueService(db).reject(incomplete_id)
