"""API endpoint modules for v1."""

from flashcards.api.v1.endpoints import (
    games,
    hard_words,
    incomplete_words,
    lists,
    review,
    stats,
    words,
)

__all__ = [
    "games",
    "hard_words",
    "incomplete_words",
    "lists",
    "review",
    "stats",
    "words",
]
