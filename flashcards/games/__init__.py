"""Game modes built on the review schedulers."""

from flashcards.games.base import AnswerFeedback, GamePhase, GameSession, Readiness
from flashcards.games.conjugation import ConjugationGame
from flashcards.games.fill_in_blank import BlankQuestion, FillInBlankGame
from flashcards.games.flashcards import FlashcardGame
from flashcards.games.matching import MatchingBoard, MatchingGame

GAME_MODES: dict[str, type[GameSession]] = {
    FlashcardGame.game_type: FlashcardGame,
    MatchingGame.game_type: MatchingGame,
    FillInBlankGame.game_type: FillInBlankGame,
    ConjugationGame.game_type: ConjugationGame,
}

__all__ = [
    "AnswerFeedback",
    "BlankQuestion",
    "ConjugationGame",
    "FillInBlankGame",
    "FlashcardGame",
    "GAME_MODES",
    "GamePhase",
    "GameSession",
    "MatchingBoard",
    "MatchingGame",
    "Readiness",
]
