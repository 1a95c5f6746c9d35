"""Study list endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.config import settings
from flashcards.core.records import ExposureLevel
from flashcards.schemas import WordRead
from flashcards.schemas.lists import (
    SessionListRequest,
    SourceBreakdownResponse,
    StudyListRead,
    VerbFamiliesResponse,
    VerbFamilyRead,
)
from flashcards.services.study_lists import StudyListService
from flashcards.services.word_store import SqlAlchemyWordStore

router = APIRouter(prefix="/lists", tags=["lists"])


def get_list_service(store: SqlAlchemyWordStore = Depends(deps.get_word_store)) -> StudyListService:
    return StudyListService(store.to_array())


@router.post("/session", response_model=StudyListRead)
def session_batch(
    payload: SessionListRequest, service: StudyListService = Depends(get_list_service)
) -> StudyListRead:
    """Next batch of a flashcard session that never repeats a word.

    Send back the returned ``excluded_ids`` with the following request.
    """
    study_list = service.generate_flashcards_list_with_exclusions(payload.max_words, payload.exclude_ids)
    return StudyListRead.from_study_list(study_list)


@router.get("/new-words", response_model=StudyListRead)
def new_words(
    max_words: int = Query(default=settings.DEFAULT_LIST_SIZE, ge=1, le=500),
    service: StudyListService = Depends(get_list_service),
) -> StudyListRead:
    return StudyListRead.from_study_list(service.generate_new_words_list(max_words))


@router.get("/flashcards", response_model=StudyListRead)
def flashcard_words(
    max_words: int = Query(default=settings.DEFAULT_LIST_SIZE, ge=1, le=500),
    service: StudyListService = Depends(get_list_service),
) -> StudyListRead:
    return StudyListRead.from_study_list(service.generate_flashcards_list(max_words))


@router.get("/daily-mix", response_model=StudyListRead)
def daily_mix(
    max_words: int = Query(default=25, ge=1, le=500),
    service: StudyListService = Depends(get_list_service),
) -> StudyListRead:
    return StudyListRead.from_study_list(service.generate_daily_mix(max_words))


@router.get("/maintenance", response_model=StudyListRead)
def maintenance_sample(
    sample_size: int = Query(default=settings.DEFAULT_LIST_SIZE, ge=1, le=500),
    service: StudyListService = Depends(get_list_service),
) -> StudyListRead:
    return StudyListRead.from_study_list(service.generate_maintenance_sample(sample_size))


@router.get("/exposure/{level}", response_model=list[WordRead])
def words_by_exposure(
    level: ExposureLevel,
    count: int = Query(default=settings.DEFAULT_LIST_SIZE, ge=1, le=500),
    service: StudyListService = Depends(get_list_service),
) -> list[WordRead]:
    return [WordRead.from_record(word) for word in service.get_words_by_exposure(level, count)]


@router.get("/struggling", response_model=list[WordRead])
def struggling_words(
    count: int = Query(default=settings.DEFAULT_LIST_SIZE, ge=1, le=500),
    service: StudyListService = Depends(get_list_service),
) -> list[WordRead]:
    return [WordRead.from_record(word) for word in service.get_struggling_words(count)]


@router.get("/verb-families", response_model=VerbFamiliesResponse)
def verb_families(service: StudyListService = Depends(get_list_service)) -> VerbFamiliesResponse:
    families = service.generate_verb_families()
    return VerbFamiliesResponse(
        id=families["id"],
        name=families["name"],
        description=families["description"],
        algorithm_used=families["algorithm_used"],
        groups=[
            VerbFamilyRead(
                infinitive=group.infinitive,
                english_meaning=group.english_meaning,
                frequency_rank=group.frequency_rank,
                forms=[WordRead.from_record(word) for word in group.forms],
            )
            for group in families["groups"]
        ],
    )


@router.get("/sources", response_model=SourceBreakdownResponse)
def source_breakdown(
    source: list[str] | None = Query(default=None, description="Only count these sources"),
    service: StudyListService = Depends(get_list_service),
) -> SourceBreakdownResponse:
    words = service.get_words_by_source(source) if source else service.word_list
    return SourceBreakdownResponse(total=len(words), sources=service.get_source_breakdown(words))
