"""Conjugation tables and question building for the conjugation game."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Mapping

from flashcards.core.records import WordRecord
from flashcards.core.text import ends_like_infinitive

# Display tense -> tense key used by the conjugation API
TENSE_KEYS = {
    "presente": "presente",
    "pretérito": "pretérito-perfecto-simple",
    "imperfecto": "pretérito-imperfecto",
    "futuro": "futuro",
    "condicional": "condicional-simple",
    "subjuntivo presente": "subjuntivo-presente",
    "subjuntivo imperfecto": "subjuntivo-imperfecto",
}

PERSONS = [
    ("yo", 0),
    ("tú", 1),
    ("él/ella/usted", 2),
    ("nosotros/as", 3),
    ("vosotros/as", 4),
    ("ellos/ellas/ustedes", 5),
]

# vosotros is skipped in practice questions
PRACTICE_PERSONS = [person for person in PERSONS if person[0] != "vosotros/as"]

_PRONOUNS = ["yo", "tú", "él", "nosotros", "vosotros", "ellos"]
_LEADING_PRONOUN = re.compile(
    r"^(yo|tú|él|ella|ud\.|usted|nosotros|nosotras|vosotros|vosotras|ellos|ellas|uds\.|ustedes)\s+",
    re.IGNORECASE,
)

_PRESENT_ENDINGS = {
    "ar": ["o", "as", "a", "amos", "áis", "an"],
    "er": ["o", "es", "e", "emos", "éis", "en"],
    "ir": ["o", "es", "e", "imos", "ís", "en"],
}
_IMPERFECT_ENDINGS = {
    "ar": ["aba", "abas", "aba", "ábamos", "abais", "aban"],
    "er": ["ía", "ías", "ía", "íamos", "íais", "ían"],
    "ir": ["ía", "ías", "ía", "íamos", "íais", "ían"],
}
_FUTURE_ENDINGS = ["é", "ás", "á", "emos", "éis", "án"]
_CONDITIONAL_ENDINGS = ["ía", "ías", "ía", "íamos", "íais", "ían"]

ConjugationTable = Mapping[str, list[str]]


@dataclass(slots=True, frozen=True)
class ConjugationQuestion:
    """A single "conjugate X for Y in tense Z" prompt."""

    word: WordRecord
    question: str
    answer: str
    full_answer: str
    tense: str
    person: str
    mood: str = "indicativo"

    @property
    def english_meaning(self) -> str:
        return self.word.english


def strip_pronoun(form: str) -> str:
    return _LEADING_PRONOUN.sub("", form.strip()).strip()


def regular_conjugations(verb: str) -> dict[str, list[str]] | None:
    """Rule-based tables for regular -ar/-er/-ir verbs, keyed by tense key.

    Irregular verbs come out wrong; this only backs up the remote service.
    """
    infinitive = verb.strip().lower()
    if not ends_like_infinitive(infinitive) or len(infinitive) < 3:
        return None
    stem, ending = infinitive[:-2], infinitive[-2:]

    def with_pronouns(forms: list[str]) -> list[str]:
        return [f"{pronoun} {form}" for pronoun, form in zip(_PRONOUNS, forms)]

    return {
        TENSE_KEYS["presente"]: with_pronouns([stem + e for e in _PRESENT_ENDINGS[ending]]),
        TENSE_KEYS["imperfecto"]: with_pronouns([stem + e for e in _IMPERFECT_ENDINGS[ending]]),
        TENSE_KEYS["futuro"]: with_pronouns([infinitive + e for e in _FUTURE_ENDINGS]),
        TENSE_KEYS["condicional"]: with_pronouns([infinitive + e for e in _CONDITIONAL_ENDINGS]),
    }


def build_question(
    word: WordRecord,
    table: ConjugationTable,
    rng: random.Random | None = None,
) -> ConjugationQuestion | None:
    """Pick a tense present in ``table`` and a person, and build the prompt."""

    rng = rng or random.Random()
    available = [label for label, key in TENSE_KEYS.items() if table.get(key)]
    if not available:
        return None
    tense = rng.choice(available)
    person, index = rng.choice(PRACTICE_PERSONS)
    forms = table[TENSE_KEYS[tense]]
    if index >= len(forms) or not forms[index]:
        return None

    full_answer = forms[index].strip()
    mood = "subjuntivo" if tense.startswith("subjuntivo") else "indicativo"
    return ConjugationQuestion(
        word=word,
        question=f'Conjugate "{word.spanish}" for "{person}" in the {tense} tense',
        answer=strip_pronoun(full_answer),
        full_answer=full_answer,
        tense=tense,
        person=person,
        mood=mood,
    )
