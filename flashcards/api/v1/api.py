"""API router for version 1."""
from fastapi import APIRouter

from flashcards.api.v1.endpoints import (
    games,
    hard_words,
    incomplete_words,
    lists,
    review,
    stats,
    words,
)


api_router = APIRouter()
api_router.include_router(words.router)
api_router.include_router(review.router)
api_router.include_router(lists.router)
api_router.include_router(hard_words.router)
api_router.include_router(incomplete_words.router)
api_router.include_router(stats.router)
api_router.include_router(games.router)
