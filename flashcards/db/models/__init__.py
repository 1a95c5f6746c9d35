"""Database models package."""
from flashcards.db.models.word import Word
from flashcards.db.models.incomplete_word import IncompleteWord
from flashcards.db.models.hard_word import HardWord
from flashcards.db.models.app_state import AppState
from flashcards.db.models.stats import DailyStats

__all__ = [
    "Word",
    "IncompleteWord",
    "HardWord",
    "AppState",
    "DailyStats",
]
