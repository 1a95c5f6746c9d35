"""Conjugation drills over the verbs in the word list."""
from __future__ import annotations

import random
from typing import Iterable

from loguru import logger

from flashcards.config import settings
from flashcards.core.conjugation import ConjugationQuestion, build_question
from flashcards.core.records import WordRecord
from flashcards.core.text import ends_like_infinitive, normalize_for_answer_check
from flashcards.games.base import AnswerFeedback, GamePhase, GameSession
from flashcards.services.conjugations import ConjugationSource
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.session_stats import SessionStatsService
from flashcards.utils.exceptions import QuestionGenerationError


class ConjugationGame(GameSession[ConjugationQuestion]):
    """A fixed-length round of conjugation questions.

    Answers are compared without accents or case, so "hablo" matches
    "habló". The game completes after ``CONJUGATION_ROUND_LENGTH`` answers;
    ``reset()`` starts a new round.
    """

    game_type = "conjugation"
    min_candidates = 1

    def __init__(
        self,
        words: Iterable[WordRecord],
        scheduler: ReviewScheduler,
        conjugations: ConjugationSource,
        *,
        round_length: int | None = None,
        max_attempts: int | None = None,
        rng: random.Random | None = None,
        stats: SessionStatsService | None = None,
    ) -> None:
        super().__init__(words, scheduler, rng=rng, stats=stats)
        self.conjugations = conjugations
        self.round_length = round_length or settings.CONJUGATION_ROUND_LENGTH
        self.max_attempts = max_attempts or settings.QUESTION_MAX_ATTEMPTS

    @classmethod
    def is_candidate(cls, word: WordRecord) -> bool:
        return word.is_valid_pair() and ends_like_infinitive(word.spanish)

    @classmethod
    def insufficient_message(cls, count: int) -> str:
        return "No verbs found in your word list. Add some verbs ending in -ar, -er or -ir."

    def is_complete(self) -> bool:
        return self.answered >= self.round_length

    def _load_question(self) -> ConjugationQuestion | None:
        for _ in range(self.max_attempts):
            if self.cancelled:
                return None
            verb = self.rng.choice(self.candidates)
            table = self.conjugations.get_conjugations(verb.spanish.strip().lower())
            if self.cancelled:
                return None
            if not table:
                continue
            question = build_question(verb, table, self.rng)
            if question is not None:
                return question

        raise QuestionGenerationError(
            "Could not build a conjugation question. Please try again.",
            {"game_type": self.game_type, "attempts": self.max_attempts},
        )

    def submit_answer(self, answer: str) -> AnswerFeedback:
        self._require(GamePhase.AWAITING_ANSWER)
        question = self.current
        is_correct = normalize_for_answer_check(answer) == normalize_for_answer_check(question.answer)

        update = self.scheduler.update_exposure(question.word, is_correct, self.game_type)
        self.candidates = [update.word if w.id == update.word.id else w for w in self.candidates]
        self._record(is_correct)

        message = "Correct!" if is_correct else f'The answer was "{question.full_answer}".'
        if self.is_complete():
            logger.info(f"conjugation: round finished {self.score}/{self.answered}")
        return self._show_feedback(
            AnswerFeedback(
                is_correct=is_correct,
                correct_answer=question.answer,
                message=message,
                review=update,
            )
        )

    def reset(self) -> ConjugationQuestion | None:
        """Leave the finished round and start a fresh one."""

        self.exit()
        return self.start()
