"""Service layer package."""

from flashcards.services.conjugations import ConjugationClient, ConjugationSource
from flashcards.services.extraction import ExtractionQueueService
from flashcards.services.hard_words import HardWordService
from flashcards.services.scheduler import ExposureUpdate, ReviewResult, ReviewScheduler
from flashcards.services.selector import DueCardSelector, NothingDue
from flashcards.services.sentences import SentencePair, SentenceSource, TatoebaClient
from flashcards.services.session_stats import SessionStatsService
from flashcards.services.study_lists import StudyList, StudyListService
from flashcards.services.word_data import WordDataService
from flashcards.services.word_store import SqlAlchemyWordStore, WordStore

__all__ = [
    "ConjugationClient",
    "ConjugationSource",
    "DueCardSelector",
    "ExposureUpdate",
    "ExtractionQueueService",
    "HardWordService",
    "NothingDue",
    "ReviewResult",
    "ReviewScheduler",
    "SentencePair",
    "SentenceSource",
    "SessionStatsService",
    "SqlAlchemyWordStore",
    "StudyList",
    "StudyListService",
    "TatoebaClient",
    "WordDataService",
    "WordStore",
]
