"""Classic flashcards on the Leitner schedule."""
from __future__ import annotations

import random
from typing import Iterable

from loguru import logger

from flashcards.core.records import WordRecord
from flashcards.core.text import matches_any
from flashcards.games.base import AnswerFeedback, GamePhase, GameSession
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.selector import DueCardSelector, NothingDue
from flashcards.services.session_stats import SessionStatsService
from flashcards.utils.exceptions import ValidationError

DIRECTIONS = ("spa-eng", "eng-spa")


class FlashcardGame(GameSession[WordRecord]):
    """Show due cards one at a time and grade typed answers.

    In ``spa-eng`` the learner translates Spanish to English and any English
    synonym is accepted; ``eng-spa`` asks for the Spanish word.
    """

    game_type = "flashcards"
    min_candidates = 1

    def __init__(
        self,
        words: Iterable[WordRecord],
        scheduler: ReviewScheduler,
        selector: DueCardSelector,
        *,
        direction: str = "spa-eng",
        rng: random.Random | None = None,
        stats: SessionStatsService | None = None,
    ) -> None:
        super().__init__(words, scheduler, rng=rng, stats=stats)
        self.selector = selector
        self.direction = self._check_direction(direction)
        self.nothing_due: NothingDue | None = None
        self._last_shown_id: int | None = None

    @staticmethod
    def _check_direction(direction: str) -> str:
        if direction not in DIRECTIONS:
            raise ValidationError("Unknown flashcard direction", {"direction": direction})
        return direction

    def switch_direction(self) -> str:
        self.direction = "eng-spa" if self.direction == "spa-eng" else "spa-eng"
        return self.direction

    @property
    def prompt(self) -> str | None:
        if self.current is None:
            return None
        return self.current.spanish if self.direction == "spa-eng" else self.current.english

    def _load_question(self) -> WordRecord | NothingDue:
        choice = self.selector.select_next(self.candidates, exclude_id=self._last_shown_id)
        if isinstance(choice, NothingDue):
            self.nothing_due = choice
            return choice
        self.nothing_due = None
        self._last_shown_id = choice.id
        return choice

    def _is_question(self, loaded: object) -> bool:
        return isinstance(loaded, WordRecord)

    def is_correct(self, answer: str) -> bool:
        word = self.current
        if word is None:
            return False
        if self.direction == "spa-eng":
            return matches_any(answer, word.english, word.synonyms_english, english=True)
        return matches_any(answer, word.spanish)

    def submit_answer(self, answer: str) -> AnswerFeedback:
        self._require(GamePhase.AWAITING_ANSWER)
        word = self.current
        is_correct = self.is_correct(answer)
        expected = word.english if self.direction == "spa-eng" else word.spanish

        review = self.scheduler.schedule_after_answer(word, is_correct, game_type=self.game_type)
        self._replace_candidate(review.word)
        self._record(is_correct)
        logger.debug(f"flashcards: {word.spanish!r} answered {'correctly' if is_correct else 'incorrectly'}")

        message = "Correct!" if is_correct else f'Incorrect. The answer was "{expected}".'
        return self._show_feedback(
            AnswerFeedback(is_correct=is_correct, correct_answer=expected, message=message, review=review)
        )

    def _replace_candidate(self, updated: WordRecord) -> None:
        self.candidates = [updated if word.id == updated.id else word for word in self.candidates]
        self.current = updated
