"""Text helpers for answer checking and candidate filtering."""
from __future__ import annotations

import re
import unicodedata
from typing import Iterable

TRAILING_PUNCTUATION = re.compile(r"[.?!¡¿]+$")
ENGLISH_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)
ENGLISH_INFINITIVE = re.compile(r"^to\s+", re.IGNORECASE)

_INFINITIVE_ENDINGS = ("ar", "er", "ir")
_LIKELY_VERB_PATTERNS = (
    re.compile(r"^[a-záéíóúüñ]+(ar|er|ir)$", re.IGNORECASE),
    re.compile(r"^[a-záéíóúüñ]+(é|ó|ió|aste|amos|aron)$", re.IGNORECASE),
)


def normalize_answer(text: str, *, english: bool = False) -> str:
    """Lowercase, trim and drop trailing punctuation.

    English answers also lose a leading article and a leading "to", so
    "the house" matches "house" and "to run" matches "run".
    """
    if not isinstance(text, str):
        return ""
    normalized = TRAILING_PUNCTUATION.sub("", text.lower().strip())
    if english:
        normalized = ENGLISH_INFINITIVE.sub("", ENGLISH_ARTICLE.sub("", normalized))
    return normalized


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def normalize_for_answer_check(text: str) -> str:
    """Lowercase, trim and remove accents (é -> e, ñ -> n)."""

    if not isinstance(text, str):
        return ""
    return strip_accents(text.strip().lower())


def matches_any(answer: str, expected: str, alternatives: Iterable[str] = (), *, english: bool = False) -> bool:
    """Return whether ``answer`` equals ``expected`` or one of ``alternatives``."""

    candidate = normalize_answer(answer, english=english)
    if candidate == normalize_answer(expected, english=english):
        return True
    for alternative in alternatives:
        if isinstance(alternative, str) and candidate == normalize_answer(alternative, english=english):
            return True
    return False


def word_count(text: str | None) -> int:
    if not text or not text.strip():
        return 0
    return len(text.strip().split())


def ends_like_infinitive(spanish: str | None) -> bool:
    """Cheap verb test used to pick conjugation candidates."""

    if not spanish:
        return False
    return spanish.strip().lower().endswith(_INFINITIVE_ENDINGS)


def is_likely_verb(spanish: str | None) -> bool:
    """Broader verb test that also accepts common preterite forms."""

    if not spanish:
        return False
    value = spanish.strip()
    return any(pattern.match(value) for pattern in _LIKELY_VERB_PATTERNS)


def guess_infinitive(spanish: str) -> str:
    """Very rough infinitive guess used to group verb forms."""

    word = spanish.strip().lower()
    if word.endswith(_INFINITIVE_ENDINGS):
        return word
    if word.endswith(("é", "ó")):
        return word[:-1] + "ar"  # habló -> hablar
    return word


def blank_out(sentence: str, target: str, placeholder: str = "_______") -> str | None:
    """Replace the first whole-word occurrence of ``target`` in ``sentence``.

    Returns ``None`` when the target does not appear on word boundaries.
    """
    if not sentence or not target:
        return None
    pattern = re.compile(rf"\b{re.escape(target.strip())}\b", re.IGNORECASE)
    if not pattern.search(sentence):
        return None
    return pattern.sub(placeholder, sentence, count=1)
