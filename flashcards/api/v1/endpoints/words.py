"""Word management, word-list sync and export endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.schemas import (
    SyncResult,
    WordCreate,
    WordListFile,
    WordListResponse,
    WordRead,
    WordUpdate,
)
from flashcards.services.word_data import WordDataService

router = APIRouter(prefix="/words", tags=["words"])


@router.get("/", response_model=WordListResponse)
def list_words(
    search: str | None = Query(default=None, max_length=100, description="Substring of spanish or english"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(deps.get_db),
) -> WordListResponse:
    """Return stored words with optional search and pagination."""

    total, records = WordDataService(db).list_words(search=search, limit=limit, offset=offset)
    return WordListResponse(total=total, items=[WordRead.from_record(record) for record in records])


@router.post("/", response_model=WordRead, status_code=status.HTTP_201_CREATED)
def create_word(payload: WordCreate, db: Session = Depends(deps.get_db)) -> WordRead:
    record = WordDataService(db).add_word(payload)
    return WordRead.from_record(record)


@router.get("/export")
def export_words(
    device_type: str = Query(default="server", max_length=30),
    db: Session = Depends(deps.get_db),
) -> JSONResponse:
    """Download every word with its progress for backup or merging."""

    document = WordDataService(db).export(device_type=device_type)
    return JSONResponse(content=document.model_dump(mode="json", by_alias=True))


@router.post("/sync", response_model=SyncResult)
def sync_word_list(
    payload: WordListFile,
    force: bool = Query(default=False, description="Replace even when versions match"),
    db: Session = Depends(deps.get_db),
) -> SyncResult:
    """Replace the local words when the published version differs."""

    return WordDataService(db).sync_word_list(payload, force=force)


@router.get("/{word_id}", response_model=WordRead)
def get_word(word_id: int, db: Session = Depends(deps.get_db)) -> WordRead:
    return WordRead.from_record(WordDataService(db).get_word(word_id))


@router.patch("/{word_id}", response_model=WordRead)
def update_word(word_id: int, payload: WordUpdate, db: Session = Depends(deps.get_db)) -> WordRead:
    return WordRead.from_record(WordDataService(db).update_word(word_id, payload))


@router.delete("/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_word(word_id: int, db: Session = Depends(deps.get_db)) -> Response:
    WordDataService(db).delete_word(word_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
