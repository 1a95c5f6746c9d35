"""Pydantic schemas package."""

from flashcards.schemas.words import (
    ExportDocument,
    SyncResult,
    WordCreate,
    WordDocument,
    WordListFile,
    WordListResponse,
    WordRead,
    WordUpdate,
)
from flashcards.schemas.review import (
    ExposureAnswerRequest,
    ExposureAnswerResponse,
    MarkKnownResponse,
    NextCardResponse,
    ReviewAnswerRequest,
    ReviewAnswerResponse,
)
from flashcards.schemas.extraction import (
    CompleteWordRequest,
    ExtractedWordsRequest,
    ExtractedWordsResponse,
    HardWordListResponse,
    HardWordPair,
    HardWordToggleResponse,
    IncompleteWordRead,
)
from flashcards.schemas.games import (
    BlankQuestionResponse,
    ConjugationQuestionResponse,
    MatchingBoardResponse,
    ReadinessResponse,
)

__all__ = [
    "BlankQuestionResponse",
    "CompleteWordRequest",
    "ConjugationQuestionResponse",
    "ExportDocument",
    "ExposureAnswerRequest",
    "ExposureAnswerResponse",
    "ExtractedWordsRequest",
    "ExtractedWordsResponse",
    "HardWordListResponse",
    "HardWordPair",
    "HardWordToggleResponse",
    "IncompleteWordRead",
    "MarkKnownResponse",
    "MatchingBoardResponse",
    "NextCardResponse",
    "ReadinessResponse",
    "ReviewAnswerRequest",
    "ReviewAnswerResponse",
    "SyncResult",
    "WordCreate",
    "WordDocument",
    "WordListFile",
    "WordListResponse",
    "WordRead",
    "WordUpdate",
]
