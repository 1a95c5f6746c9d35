"""Tests for answer normalisation and conjugation helpers."""
from __future__ import annotations

import random

import pytest

from flashcards.core.conjugation import build_question, regular_conjugations, strip_pronoun
from flashcards.core.records import WordRecord
from flashcards.core.text import (
    blank_out,
    ends_like_infinitive,
    guess_infinitive,
    is_likely_verb,
    matches_any,
    normalize_answer,
    normalize_for_answer_check,
    word_count,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  The House. ", "house"),
        ("to run!", "run"),
        ("an apple", "apple"),
        ("Theory", "theory"),
    ],
)
def test_normalize_english_answers(raw: str, expected: str) -> None:
    assert normalize_answer(raw, english=True) == expected


def test_spanish_answers_keep_articles_and_accents() -> None:
    assert normalize_answer("  La Casa? ") == "la casa"
    assert normalize_answer("¿Qué?") == "¿qué"
    assert normalize_answer(None) == ""


def test_matches_any_accepts_synonyms() -> None:
    assert matches_any("home", "house", ["home", "dwelling"], english=True)
    assert matches_any("The house", "house", english=True)
    assert not matches_any("horse", "house", ["home"], english=True)


def test_accent_insensitive_check() -> None:
    assert normalize_for_answer_check(" Habló ") == "hablo"
    assert normalize_for_answer_check("niño") == "nino"


def test_word_count_and_verb_detection() -> None:
    assert word_count("  buenos   días ") == 2
    assert word_count("") == 0
    assert ends_like_infinitive("Hablar ")
    assert not ends_like_infinitive("casa")
    assert is_likely_verb("habló")
    assert not is_likely_verb("casa")
    assert guess_infinitive("habló") == "hablar"
    assert guess_infinitive("comer") == "comer"


def test_blank_out_replaces_whole_words_only() -> None:
    assert blank_out("El gato come.", "gato") == "El _______ come."
    assert blank_out("Los gatos comen.", "gato") is None
    assert blank_out("", "gato") is None


def test_regular_conjugations_cover_each_ending() -> None:
    table = regular_conjugations("hablar")

    assert table["presente"][0] == "yo hablo"
    assert table["presente"][3] == "nosotros hablamos"
    assert table["pretérito-imperfecto"][1] == "tú hablabas"
    assert table["futuro"][5] == "ellos hablarán"
    assert regular_conjugations("vivir")["presente"][4] == "vosotros vivís"
    assert regular_conjugations("casa") is None


def test_strip_pronoun() -> None:
    assert strip_pronoun("él/ella habla") == "él/ella habla"
    assert strip_pronoun("nosotros comemos") == "comemos"
    assert strip_pronoun("yo vivo") == "vivo"


def test_build_question_never_asks_for_vosotros() -> None:
    verb = WordRecord(spanish="comer", english="to eat", id=1)
    table = regular_conjugations("comer")
    rng = random.Random(7)

    for _ in range(50):
        question = build_question(verb, table, rng)
        assert question is not None
        assert question.person != "vosotros/as"
        assert question.mood == "indicativo"
        assert question.answer == strip_pronoun(question.full_answer)
        assert question.english_meaning == "to eat"


def test_build_question_without_known_tenses() -> None:
    verb = WordRecord(spanish="comer", english="to eat")

    assert build_question(verb, {"gerundio": ["comiendo"]}) is None
