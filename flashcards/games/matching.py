"""Match Spanish words to their English translations, a board at a time."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable

from loguru import logger

from flashcards.config import settings
from flashcards.core.records import WordRecord
from flashcards.games.base import AnswerFeedback, GamePhase, GameSession
from flashcards.services.scheduler import ReviewScheduler
from flashcards.services.session_stats import SessionStatsService
from flashcards.utils.exceptions import GameStateError


@dataclass(slots=True)
class MatchOption:
    id: int
    text: str
    matched: bool = False


@dataclass(slots=True)
class MatchingBoard:
    pairs: list[WordRecord]
    spanish_options: list[MatchOption]
    english_options: list[MatchOption]
    matched_ids: set[int] = field(default_factory=set)

    @property
    def is_cleared(self) -> bool:
        return len(self.matched_ids) == len(self.pairs)


class MatchingGame(GameSession[MatchingBoard]):
    """Boards of ``MATCHING_PAIRS`` pairs; matched words sit out later boards.

    The board stays in ``awaiting_answer`` while pairs are left and moves to
    ``showing_feedback`` once every pair is matched.
    """

    game_type = "matching"
    min_candidates = settings.MATCHING_PAIRS

    def __init__(
        self,
        words: Iterable[WordRecord],
        scheduler: ReviewScheduler,
        *,
        pairs_per_board: int | None = None,
        excluded_ids: Iterable[int] = (),
        rng: random.Random | None = None,
        stats: SessionStatsService | None = None,
    ) -> None:
        super().__init__(words, scheduler, rng=rng, stats=stats)
        self.pairs_per_board = pairs_per_board or settings.MATCHING_PAIRS
        self.excluded_ids: set[int] = set(excluded_ids)

    @classmethod
    def is_candidate(cls, word: WordRecord) -> bool:
        return word.id is not None and word.is_valid_pair() and not word.is_known

    def _pick_pairs(self) -> list[WordRecord]:
        available = [word for word in self.candidates if word.id not in self.excluded_ids]
        if len(available) < self.pairs_per_board:
            logger.info(
                f"matching: only {len(available)} unmatched words left, starting over with the full list"
            )
            self.excluded_ids.clear()
            available = list(self.candidates)
        self.rng.shuffle(available)
        return available[: self.pairs_per_board]

    def _load_question(self) -> MatchingBoard:
        pairs = self._pick_pairs()
        spanish = [MatchOption(id=word.id, text=word.spanish) for word in pairs]
        english = [MatchOption(id=word.id, text=word.english) for word in pairs]
        self.rng.shuffle(spanish)
        self.rng.shuffle(english)
        return MatchingBoard(pairs=pairs, spanish_options=spanish, english_options=english)

    def attempt_match(self, spanish_id: int, english_id: int) -> AnswerFeedback:
        """Grade one pairing; correct iff both sides belong to the same word."""

        self._require(GamePhase.AWAITING_ANSWER)
        board = self.current
        word = next((pair for pair in board.pairs if pair.id == spanish_id), None)
        if word is None or not any(pair.id == english_id for pair in board.pairs):
            raise GameStateError("Both options must come from the current board", {"spanish_id": spanish_id})
        if spanish_id in board.matched_ids or english_id in board.matched_ids:
            raise GameStateError("That pair is already matched", {"spanish_id": spanish_id})

        is_correct = spanish_id == english_id
        update = self.scheduler.update_exposure(word, is_correct, self.game_type)
        board.pairs = [update.word if pair.id == word.id else pair for pair in board.pairs]
        self.candidates = [update.word if candidate.id == word.id else candidate for candidate in self.candidates]
        self._record(is_correct)

        if is_correct:
            board.matched_ids.add(spanish_id)
            self.excluded_ids.add(spanish_id)
            for option in (*board.spanish_options, *board.english_options):
                if option.id == spanish_id:
                    option.matched = True
            message = "Correct match!"
        else:
            message = "Not a match, try again."

        feedback = AnswerFeedback(
            is_correct=is_correct, correct_answer=word.english, message=message, review=update
        )
        if board.is_cleared:
            feedback.message = "Board cleared!"
            return self._show_feedback(feedback)
        self.last_feedback = feedback
        return feedback
