"""Tests for the game state machines."""
from __future__ import annotations

import random

import pytest

from flashcards.core.records import ExposureLevel
from flashcards.core.text import normalize_for_answer_check
from flashcards.games import (
    GAME_MODES,
    ConjugationGame,
    FillInBlankGame,
    FlashcardGame,
    GamePhase,
    MatchingGame,
)
from flashcards.games.fill_in_blank import BLANK
from flashcards.services.selector import DueCardSelector, NothingDue
from flashcards.services.sentences import SentencePair
from flashcards.services.session_stats import SessionStatsService
from flashcards.utils.exceptions import (
    GameStateError,
    InsufficientCandidatesError,
    PersistenceError,
    QuestionGenerationError,
    ValidationError,
)


class BrokenStats(SessionStatsService):
    """Stats service whose saves always fail."""

    def record_answer(self, is_correct, game_type="flashcards", *, now=None):
        raise PersistenceError("stats table locked")


@pytest.fixture()
def selector(store):
    return DueCardSelector(store, rng=random.Random(5))


@pytest.fixture()
def sentences_for_all(sentence_source, spanish_words):
    for index, word in enumerate(spanish_words):
        sentence_source.sentences[word.spanish] = [
            SentencePair(id_spa=index, text_spa=f"Hoy veo {word.spanish} otra vez.", id_eng=None, text_eng="")
        ]
    return sentence_source


def test_game_modes_registry() -> None:
    assert set(GAME_MODES) == {"flashcards", "matching", "fillInBlank", "conjugation"}


# ----------------------------------------------------------------------
# Flashcards
# ----------------------------------------------------------------------
def test_flashcard_round_until_nothing_is_due(spanish_words, scheduler, selector, rng) -> None:
    game = FlashcardGame(spanish_words[:2], scheduler, selector, rng=rng)

    first = game.start()
    assert game.phase is GamePhase.AWAITING_ANSWER
    assert game.prompt == first.spanish

    feedback = game.submit_answer(first.english.upper())
    assert feedback.is_correct
    assert feedback.review.word.leitner_box == 2
    assert game.phase is GamePhase.SHOWING_FEEDBACK

    second = game.next_question()
    assert second.id != first.id
    feedback = game.submit_answer("definitely wrong")
    assert not feedback.is_correct
    assert feedback.message == f'Incorrect. The answer was "{second.english}".'
    assert game.score == 1 and game.answered == 2 and game.streak == 0

    result = game.next_question()
    assert isinstance(result, NothingDue)
    assert game.nothing_due is result
    assert game.phase is GamePhase.IDLE


def test_flashcard_accepts_english_synonyms(spanish_words, scheduler, selector) -> None:
    casa = spanish_words[1]
    game = FlashcardGame([casa], scheduler, selector)
    game.start()

    assert game.submit_answer("the home").is_correct


def test_flashcard_reverse_direction(spanish_words, scheduler, selector) -> None:
    game = FlashcardGame([spanish_words[0]], scheduler, selector, direction="eng-spa")
    game.start()

    assert game.prompt == "hello"
    assert game.submit_answer(" Hola ").is_correct
    assert game.switch_direction() == "spa-eng"


def test_flashcard_rejects_unknown_direction(scheduler, selector) -> None:
    with pytest.raises(ValidationError):
        FlashcardGame([], scheduler, selector, direction="fra-eng")


def test_flashcard_without_words_cannot_start(scheduler, selector) -> None:
    game = FlashcardGame([], scheduler, selector)

    with pytest.raises(InsufficientCandidatesError):
        game.start()
    assert game.phase is GamePhase.IDLE


def test_answers_outside_awaiting_phase_are_rejected(spanish_words, scheduler, selector) -> None:
    game = FlashcardGame(spanish_words, scheduler, selector)

    with pytest.raises(GameStateError):
        game.submit_answer("hello")


def test_answers_are_counted_in_stats(db_session, spanish_words, scheduler, selector) -> None:
    stats = SessionStatsService(db_session)
    game = FlashcardGame(spanish_words[:1], scheduler, selector, stats=stats)
    game.start()

    game.submit_answer("hello")

    assert stats.daily_stats().game_type_stats["flashcards"]["correct"] == 1


def test_failed_stats_save_still_shows_feedback(db_session, spanish_words, scheduler, selector, store) -> None:
    game = FlashcardGame(spanish_words[:1], scheduler, selector, stats=BrokenStats(db_session))
    game.start()

    feedback = game.submit_answer("hello")

    assert feedback.is_correct
    assert feedback.review.persisted
    assert game.phase is GamePhase.SHOWING_FEEDBACK
    assert game.answered == 1
    assert store.get(spanish_words[0].id).leitner_box == 2


# ----------------------------------------------------------------------
# Matching
# ----------------------------------------------------------------------
def test_matching_board_clears_and_excludes_matched_words(spanish_words, scheduler, store, rng) -> None:
    game = MatchingGame(spanish_words, scheduler, pairs_per_board=3, rng=rng)

    board = game.start()
    assert len(board.pairs) == 3
    assert {o.id for o in board.spanish_options} == {o.id for o in board.english_options}

    ids = [pair.id for pair in board.pairs]
    miss = game.attempt_match(ids[0], ids[1])
    assert not miss.is_correct
    assert game.phase is GamePhase.AWAITING_ANSWER

    for word_id in ids[:-1]:
        assert game.attempt_match(word_id, word_id).is_correct
        assert game.phase is GamePhase.AWAITING_ANSWER
    last = game.attempt_match(ids[-1], ids[-1])
    assert last.message == "Board cleared!"
    assert game.phase is GamePhase.SHOWING_FEEDBACK
    assert store.get(ids[0]).exposure.game_performance["matching"].total == 2

    next_board = game.next_question()
    assert not {pair.id for pair in next_board.pairs} & set(ids)


def test_matching_second_board_builds_on_saved_progress(spanish_words, scheduler, store, rng) -> None:
    vocabulary = spanish_words[:6]
    game = MatchingGame(vocabulary, scheduler, pairs_per_board=6, rng=rng)

    board = game.start()
    for pair in list(board.pairs):
        game.attempt_match(pair.id, pair.id)
    board = game.next_question()
    assert {pair.id for pair in board.pairs} == {word.id for word in vocabulary}
    for pair in list(board.pairs):
        game.attempt_match(pair.id, pair.id)

    assert [store.get(word.id).exposure.times_studied for word in vocabulary] == [2] * 6
    assert all(word.exposure.times_studied == 2 for word in game.candidates)


def test_matching_resets_exclusions_when_words_run_out(spanish_words, scheduler, rng) -> None:
    game = MatchingGame(spanish_words, scheduler, pairs_per_board=6, excluded_ids=[w.id for w in spanish_words[:4]], rng=rng)

    board = game.start()

    assert len(board.pairs) == 6
    assert game.excluded_ids == set()


def test_matching_rejects_foreign_or_repeated_pairs(spanish_words, scheduler, rng) -> None:
    game = MatchingGame(spanish_words, scheduler, pairs_per_board=2, rng=rng)
    board = game.start()
    on_board = {pair.id for pair in board.pairs}
    outsider = next(word.id for word in spanish_words if word.id not in on_board)
    first = board.pairs[0].id

    with pytest.raises(GameStateError):
        game.attempt_match(outsider, outsider)
    game.attempt_match(first, first)
    with pytest.raises(GameStateError):
        game.attempt_match(first, first)


def test_matching_readiness_skips_known_words(spanish_words, make_word) -> None:
    known = make_word("sol", "sun", word_id=99, level=ExposureLevel.KNOWN)

    readiness = MatchingGame.readiness(spanish_words[:5] + [known])

    assert not readiness.ready
    assert readiness.candidate_count == 5
    assert readiness.required == 6
    assert "need at least 6" in readiness.message


# ----------------------------------------------------------------------
# Fill in the blank
# ----------------------------------------------------------------------
def test_fill_in_blank_question_and_answer(spanish_words, scheduler, sentences_for_all, store, rng) -> None:
    game = FillInBlankGame(spanish_words, scheduler, sentences_for_all, rng=rng)

    question = game.start()

    assert BLANK in question.sentence_with_blank
    assert question.target.spanish not in question.sentence_with_blank
    assert len(question.choices) == 4
    assert len(set(question.choices)) == 4
    assert question.correct_answer in question.choices
    assert question.original_sentence_eng == question.target.english

    feedback = game.submit_answer(f"  {question.correct_answer.upper()} ")
    assert feedback.is_correct
    assert feedback.has_leveled_up
    assert store.get(question.target.id).exposure.game_performance["fillInBlank"].correct == 1


def test_fill_in_blank_wrong_choice(spanish_words, scheduler, sentences_for_all, rng) -> None:
    game = FillInBlankGame(spanish_words, scheduler, sentences_for_all, rng=rng)
    question = game.start()
    wrong = next(choice for choice in question.choices if choice != question.correct_answer)

    feedback = game.submit_answer(wrong)

    assert not feedback.is_correct
    assert feedback.message == f'Oops! The correct answer was "{question.correct_answer}".'


def test_fill_in_blank_gives_up_after_max_attempts(spanish_words, scheduler, sentence_source, rng) -> None:
    game = FillInBlankGame(spanish_words, scheduler, sentence_source, max_attempts=3, rng=rng)

    with pytest.raises(QuestionGenerationError):
        game.start()

    assert len(sentence_source.queries) == 3
    assert game.phase is GamePhase.IDLE


def test_exit_cancels_running_question_search(spanish_words, scheduler, rng) -> None:
    class ExitingSource:
        def __init__(self) -> None:
            self.game = None

        def get_examples(self, spanish_query):
            self.game.exit()
            return [SentencePair(id_spa=1, text_spa=f"Con {spanish_query}.", id_eng=2, text_eng="With it.")]

    source = ExitingSource()
    game = FillInBlankGame(spanish_words, scheduler, source, rng=rng)
    source.game = game

    assert game.start() is None
    assert game.phase is GamePhase.IDLE
    assert game.current is None


def test_fill_in_blank_skips_long_phrases(make_word) -> None:
    assert not FillInBlankGame.is_candidate(make_word("de vez en cuando", "from time to time"))
    assert FillInBlankGame.is_candidate(make_word("a veces", "sometimes"))


# ----------------------------------------------------------------------
# Conjugation
# ----------------------------------------------------------------------
def test_conjugation_round_completes(spanish_words, scheduler, conjugation_source, rng) -> None:
    game = ConjugationGame(spanish_words, scheduler, conjugation_source, round_length=2, rng=rng)
    assert {word.spanish for word in game.candidates} == {"hablar", "comer", "vivir"}

    question = game.start()
    assert question.person != "vosotros/as"
    feedback = game.submit_answer(normalize_for_answer_check(question.answer))
    assert feedback.is_correct

    game.next_question()
    feedback = game.submit_answer("xyz")
    assert not feedback.is_correct
    assert game.is_complete()

    assert game.next_question() is None
    assert game.phase is GamePhase.GAME_COMPLETE
    with pytest.raises(GameStateError):
        game.next_question()

    restarted = game.reset()
    assert restarted is not None
    assert game.answered == 0
    assert game.phase is GamePhase.AWAITING_ANSWER


def test_conjugation_requires_verbs(make_word, scheduler, conjugation_source) -> None:
    words = [make_word("casa", "house", word_id=1)]
    game = ConjugationGame(words, scheduler, conjugation_source)

    readiness = ConjugationGame.readiness(words)
    assert not readiness.ready
    assert readiness.message.startswith("No verbs found")
    with pytest.raises(InsufficientCandidatesError):
        game.start()


def test_conjugation_gives_up_without_tables(spanish_words, scheduler, rng) -> None:
    class EmptySource:
        def get_conjugations(self, verb):
            return None

    game = ConjugationGame(spanish_words, scheduler, EmptySource(), max_attempts=2, rng=rng)

    with pytest.raises(QuestionGenerationError):
        game.start()
