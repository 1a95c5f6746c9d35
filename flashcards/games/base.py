"""Shared state machine for the game modes.

Every game moves through the same phases::

    idle -> loading_question -> awaiting_answer -> showing_feedback
         -> loading_question (next) | game_complete

``exit()`` drops back to idle from any phase and cancels a question search
that is still running, possibly on another thread.
"""
from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Generic, Iterable, TypeVar

from loguru import logger

from flashcards.core.records import WordRecord
from flashcards.services.scheduler import ExposureUpdate, ReviewResult, ReviewScheduler
from flashcards.services.session_stats import SessionStatsService
from flashcards.utils.exceptions import GameStateError, InsufficientCandidatesError

QuestionT = TypeVar("QuestionT")


class GamePhase(str, Enum):
    IDLE = "idle"
    LOADING_QUESTION = "loading_question"
    AWAITING_ANSWER = "awaiting_answer"
    SHOWING_FEEDBACK = "showing_feedback"
    GAME_COMPLETE = "game_complete"


ALLOWED_TRANSITIONS: dict[GamePhase, frozenset[GamePhase]] = {
    GamePhase.IDLE: frozenset({GamePhase.LOADING_QUESTION}),
    GamePhase.LOADING_QUESTION: frozenset({GamePhase.AWAITING_ANSWER, GamePhase.IDLE}),
    GamePhase.AWAITING_ANSWER: frozenset({GamePhase.SHOWING_FEEDBACK, GamePhase.IDLE}),
    GamePhase.SHOWING_FEEDBACK: frozenset(
        {GamePhase.LOADING_QUESTION, GamePhase.GAME_COMPLETE, GamePhase.IDLE}
    ),
    GamePhase.GAME_COMPLETE: frozenset({GamePhase.IDLE}),
}


@dataclass(slots=True)
class AnswerFeedback:
    """What the learner sees after answering."""

    is_correct: bool
    correct_answer: str
    message: str
    review: ReviewResult | ExposureUpdate | None = None

    @property
    def has_leveled_up(self) -> bool:
        return isinstance(self.review, ExposureUpdate) and self.review.has_leveled_up


@dataclass(slots=True, frozen=True)
class Readiness:
    ready: bool
    candidate_count: int
    required: int
    message: str = ""


class GameSession(Generic[QuestionT]):
    """Base class for a single learner's run through one game mode.

    Subclasses set ``game_type`` and ``min_candidates`` and implement
    ``is_candidate`` and ``_load_question``.
    """

    game_type: ClassVar[str] = ""
    min_candidates: ClassVar[int] = 1

    def __init__(
        self,
        words: Iterable[WordRecord],
        scheduler: ReviewScheduler,
        *,
        rng: random.Random | None = None,
        stats: SessionStatsService | None = None,
    ) -> None:
        self.candidates = [word for word in words if self.is_candidate(word)]
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.stats = stats
        self.phase = GamePhase.IDLE
        self.current: QuestionT | None = None
        self.last_feedback: AnswerFeedback | None = None
        self.score = 0
        self.answered = 0
        self.streak = 0
        self._cancelled = threading.Event()

    # ------------------------------------------------------------------
    # Candidate filtering
    # ------------------------------------------------------------------
    @classmethod
    def is_candidate(cls, word: WordRecord) -> bool:
        return word.is_valid_pair()

    @classmethod
    def readiness(cls, words: Iterable[WordRecord]) -> Readiness:
        count = sum(1 for word in words if cls.is_candidate(word))
        if count >= cls.min_candidates:
            return Readiness(ready=True, candidate_count=count, required=cls.min_candidates)
        return Readiness(
            ready=False,
            candidate_count=count,
            required=cls.min_candidates,
            message=cls.insufficient_message(count),
        )

    @classmethod
    def insufficient_message(cls, count: int) -> str:
        return f"Not enough words to start {cls.game_type} (need at least {cls.min_candidates}, have {count})."

    # ------------------------------------------------------------------
    # Phase handling
    # ------------------------------------------------------------------
    def _transition(self, target: GamePhase) -> None:
        if target not in ALLOWED_TRANSITIONS[self.phase]:
            raise GameStateError(
                f"Cannot move from {self.phase.value} to {target.value}",
                {"game_type": self.game_type},
            )
        self.phase = target

    def _require(self, *phases: GamePhase) -> None:
        if self.phase not in phases:
            raise GameStateError(
                f"Action not allowed while {self.phase.value}",
                {"game_type": self.game_type, "expected": [p.value for p in phases]},
            )

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> QuestionT | None:
        """Check the candidate list and load the first question."""

        self._require(GamePhase.IDLE)
        if len(self.candidates) < self.min_candidates:
            raise InsufficientCandidatesError(
                self.insufficient_message(len(self.candidates)),
                {"game_type": self.game_type, "required": self.min_candidates},
            )
        self.score = 0
        self.answered = 0
        self.streak = 0
        self._on_start()
        logger.info(f"{self.game_type}: started with {len(self.candidates)} candidates")
        return self.next_question()

    def _on_start(self) -> None:
        """Hook for per-run state; called before the first question."""

    def next_question(self) -> QuestionT | None:
        """Load the next question, or finish the game if it is over.

        Returns ``None`` when the game completed or the search was
        cancelled by ``exit()``.
        """
        if self.phase is GamePhase.SHOWING_FEEDBACK and self.is_complete():
            self._transition(GamePhase.GAME_COMPLETE)
            logger.info(f"{self.game_type}: complete with {self.score}/{self.answered}")
            return None

        self._transition(GamePhase.LOADING_QUESTION)
        self._cancelled.clear()
        self.current = None
        self.last_feedback = None
        try:
            question = self._load_question()
        except Exception:
            if self.phase is GamePhase.LOADING_QUESTION:
                self.phase = GamePhase.IDLE
            raise

        if self.cancelled or self.phase is not GamePhase.LOADING_QUESTION:
            logger.info(f"{self.game_type}: question search cancelled")
            return None
        if not self._is_question(question):
            self._transition(GamePhase.IDLE)
            return question
        self.current = question
        self._transition(GamePhase.AWAITING_ANSWER)
        return question

    def _load_question(self) -> QuestionT:
        raise NotImplementedError

    def _is_question(self, loaded: Any) -> bool:
        """Return False for placeholder results that leave the game idle."""

        return loaded is not None

    def is_complete(self) -> bool:
        """Games run indefinitely unless a subclass says otherwise."""

        return False

    def _record(self, is_correct: bool) -> None:
        self.answered += 1
        if is_correct:
            self.score += 1
            self.streak += 1
        else:
            self.streak = 0
        if self.stats is not None:
            self.stats.try_record_answer(is_correct, self.game_type)

    def _show_feedback(self, feedback: AnswerFeedback) -> AnswerFeedback:
        self.last_feedback = feedback
        self._transition(GamePhase.SHOWING_FEEDBACK)
        return feedback

    def exit(self) -> None:
        """Stop the game and cancel any running question search."""

        self._cancelled.set()
        self.phase = GamePhase.IDLE
        self.current = None

    def snapshot(self) -> dict[str, Any]:
        return {
            "game_type": self.game_type,
            "phase": self.phase.value,
            "score": self.score,
            "answered": self.answered,
            "streak": self.streak,
            "candidate_count": len(self.candidates),
        }
