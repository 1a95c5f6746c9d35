"""Pick the missing Spanish word in an example sentence."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable

from loguru import logger

from flashcards.config import settings
from flashcards.core.records import WordRecord
from flashcards.core.text import blank_out, word_count
from flashcards.games.base import AnswerFeedback, GamePhase, GameSession
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.sentences import SentenceSource
from flashcards.services.session_stats import SessionStatsService
from flashcards.utils.exceptions import QuestionGenerationError

BLANK = "_______"


@dataclass(slots=True, frozen=True)
class BlankQuestion:
    target: WordRecord
    sentence_with_blank: str
    choices: list[str]
    correct_answer: str
    original_sentence_spa: str
    original_sentence_eng: str


class FillInBlankGame(GameSession[BlankQuestion]):
    """Multiple-choice blanks built from Tatoeba example sentences."""

    game_type = "fillInBlank"
    min_candidates = settings.FILL_IN_BLANK_CHOICES

    def __init__(
        self,
        words: Iterable[WordRecord],
        scheduler: ReviewScheduler,
        sentences: SentenceSource,
        *,
        num_choices: int | None = None,
        max_attempts: int | None = None,
        rng: random.Random | None = None,
        stats: SessionStatsService | None = None,
    ) -> None:
        super().__init__(words, scheduler, rng=rng, stats=stats)
        self.sentences = sentences
        self.num_choices = num_choices or settings.FILL_IN_BLANK_CHOICES
        self.max_attempts = max_attempts or settings.QUESTION_MAX_ATTEMPTS

    @classmethod
    def is_candidate(cls, word: WordRecord) -> bool:
        return word.is_valid_pair() and 0 < word_count(word.spanish) <= settings.FILL_IN_BLANK_MAX_WORDS

    def _load_question(self) -> BlankQuestion | None:
        for attempt in range(1, self.max_attempts + 1):
            if self.cancelled:
                return None
            target = self.rng.choice(self.candidates)
            examples = self.sentences.get_examples(target.spanish)
            if self.cancelled:
                return None
            if not examples:
                continue

            examples = list(examples)
            self.rng.shuffle(examples)
            for example in examples:
                blanked = blank_out(example.text_spa, target.spanish, BLANK)
                if blanked is None:
                    continue
                others = [word for word in self.candidates if word.id != target.id]
                if len(others) < self.num_choices - 1:
                    break
                distractors = [word.spanish for word in self.rng.sample(others, self.num_choices - 1)]
                choices = [target.spanish, *distractors]
                self.rng.shuffle(choices)
                logger.debug(f"fillInBlank: question for {target.spanish!r} after {attempt} attempts")
                return BlankQuestion(
                    target=target,
                    sentence_with_blank=blanked,
                    choices=choices,
                    correct_answer=target.spanish,
                    original_sentence_spa=example.text_spa,
                    original_sentence_eng=example.text_eng or target.english,
                )

        raise QuestionGenerationError(
            f"Could not find a suitable sentence after {self.max_attempts} attempts. Please try again.",
            {"game_type": self.game_type, "attempts": self.max_attempts},
        )

    def submit_answer(self, choice: str) -> AnswerFeedback:
        self._require(GamePhase.AWAITING_ANSWER)
        question = self.current
        is_correct = (
            isinstance(choice, str)
            and choice.strip().lower() == question.correct_answer.strip().lower()
        )

        update = self.scheduler.update_exposure(question.target, is_correct, self.game_type)
        self.candidates = [update.word if w.id == update.word.id else w for w in self.candidates]
        self._record(is_correct)

        message = (
            "Correct!" if is_correct else f'Oops! The correct answer was "{question.correct_answer}".'
        )
        return self._show_feedback(
            AnswerFeedback(
                is_correct=is_correct,
                correct_answer=question.correct_answer,
                message=message,
                review=update,
            )
        )
