"""Study list generation for the game modes.

Every generator works on an in-memory snapshot of the vocabulary (the caller
reads the store once) and returns a ``StudyList``. Lists never contain the
same id twice, and words the learner marked as known are left out unless a
generator is explicitly asked to include them.
"""
from __future__ import annotations

import functools
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from loguru import logger

from flashcards.core.records import DEFAULT_FREQUENCY_RANK, ExposureLevel, WordRecord
from flashcards.core.text import guess_infinitive, is_likely_verb

HIGH_FREQUENCY_CUTOFF = 2000
STRUGGLING_MIN_STUDIES = 2
STRUGGLING_MAX_ACCURACY = 0.6
MAINTENANCE_AFTER_DAYS = 7

DAILY_MIX_NEW = 8
DAILY_MIX_STRUGGLING = 6
DAILY_MIX_MAINTENANCE = 6
DAILY_MIX_FREQUENCY = 5


@dataclass(slots=True)
class StudyList:
    """A bounded, duplicate-free word list with its provenance."""

    id: str
    name: str
    description: str
    words: list[WordRecord]
    algorithm_used: str
    metadata: dict[str, Any] = field(default_factory=dict)
    excluded_ids: frozenset[int] = frozenset()
    error: bool = False


@dataclass(slots=True)
class VerbFamily:
    infinitive: str
    english_meaning: str
    frequency_rank: int
    forms: list[WordRecord] = field(default_factory=list)


def _unique(words: Iterable[WordRecord]) -> list[WordRecord]:
    """Drop repeated ids, keeping the first occurrence."""

    seen: set[int] = set()
    unique: list[WordRecord] = []
    for word in words:
        key = word.id if word.id is not None else id(word)
        if key in seen:
            continue
        seen.add(key)
        unique.append(word)
    return unique


def _rank(word: WordRecord) -> int:
    return word.frequency_rank if word.frequency_rank is not None else DEFAULT_FREQUENCY_RANK


def _accuracy(word: WordRecord, default: float = 1.0) -> float:
    if word.exposure is None or word.exposure.times_studied <= 0:
        return default
    return word.exposure.accuracy


def _times_studied(word: WordRecord) -> int:
    return word.exposure.times_studied if word.exposure is not None else 0


def _guarded(list_id: str, name: str) -> Callable:
    """Turn unexpected generator failures into an empty, flagged list."""

    def decorator(func: Callable[..., StudyList]) -> Callable[..., StudyList]:
        @functools.wraps(func)
        def wrapper(self: "StudyListService", *args: Any, **kwargs: Any) -> StudyList:
            try:
                return func(self, *args, **kwargs)
            except (AttributeError, TypeError, ValueError, KeyError) as exc:
                logger.exception(f"Failed to generate {list_id} list: {exc}")
                return StudyListService.create_empty_list(list_id, name)

        return wrapper

    return decorator


class StudyListService:
    """Build study lists from a snapshot of the vocabulary."""

    def __init__(
        self,
        word_list: Iterable[WordRecord],
        *,
        rng: random.Random | None = None,
        now: datetime | None = None,
    ) -> None:
        self.word_list = _unique(word_list)
        self.rng = rng or random.Random()
        self.now = now or datetime.now(timezone.utc)

    @property
    def active_words(self) -> list[WordRecord]:
        return [word for word in self.word_list if not word.is_known]

    # ------------------------------------------------------------------
    # List generators
    # ------------------------------------------------------------------
    @_guarded("flashcard_session", "Flashcard Session")
    def generate_flashcards_list_with_exclusions(
        self, max_words: int = 20, exclude_ids: Iterable[int] = ()
    ) -> StudyList:
        """Return a random batch of words not shown yet in this session.

        Callers keep passing the returned ``excluded_ids`` back in; once
        every eligible word has been shown the list comes back empty with
        ``is_exhausted`` set.
        """
        excluded = frozenset(exclude_ids)
        # Unsaved words have no id to exclude by, so they never join a session
        eligible = [word for word in self.active_words if word.id is not None and word.id not in excluded]
        shuffled = list(eligible)
        self.rng.shuffle(shuffled)
        chosen = shuffled[: max(0, max_words)]
        now_excluded = excluded | {word.id for word in chosen}
        remaining = len(eligible) - len(chosen)
        return StudyList(
            id="flashcard_session",
            name="Flashcard Session",
            description="Random words not yet shown in this session",
            words=chosen,
            algorithm_used="session_exclusion_shuffle",
            metadata={
                "remaining": remaining,
                "total_available": len(self.active_words),
                "excluded_count": len(excluded),
                "is_exhausted": not chosen,
            },
            excluded_ids=now_excluded,
        )

    @_guarded("new_words", "New & Learning Words")
    def generate_new_words_list(self, max_words: int = 20) -> StudyList:
        """Newer words for the games with context clues (matching, fill-in-blank)."""

        def is_new_enough(word: WordRecord) -> bool:
            if word.exposure is not None:
                return word.exposure.level not in (ExposureLevel.MASTERED, ExposureLevel.KNOWN)
            # Boxes 0-2 still need context clues
            return word.leitner_box <= 2

        ranked = sorted((w for w in self.word_list if is_new_enough(w)), key=_rank)
        return StudyList(
            id="new_words",
            name="New & Learning Words",
            description="Newer words perfect for matching and fill-in-blank games",
            words=ranked[:max_words],
            algorithm_used="leitner_compatible_new_words",
            metadata={
                "game_recommendation": ["matching", "fillInBlank"],
                "target_exposure_level": ["new", "learning"],
            },
        )

    @_guarded("flashcard_words", "Flashcard Practice")
    def generate_flashcards_list(self, max_words: int = 20) -> StudyList:
        """Words with some exposure but not mastered, for recall without clues."""

        def is_eligible(word: WordRecord) -> bool:
            if word.exposure is not None:
                return word.exposure.level in (ExposureLevel.LEARNING, ExposureLevel.FAMILIAR)
            return 1 <= word.leitner_box <= 4

        eligible = [w for w in self.word_list if is_eligible(w)]
        if len(eligible) < max_words:
            unseen = [
                w
                for w in self.active_words
                if w.leitner_box == 0 and (w.exposure is None or w.exposure.level is ExposureLevel.NEW)
            ]
            eligible = _unique(eligible + unseen[: max_words - len(eligible)])
        words = eligible[:max_words]
        return StudyList(
            id="flashcard_words",
            name="Flashcard Practice",
            description="Words for recall practice",
            words=words,
            algorithm_used="leitner_compatible",
            metadata={
                "source_breakdown": self.get_source_breakdown(words),
                "game_recommendation": ["flashcards"],
                "target_exposure_level": ["learning", "familiar"],
            },
        )

    @_guarded("daily_mix", "Daily Focus")
    def generate_daily_mix(self, max_words: int = 25) -> StudyList:
        """Mix of new, struggling, maintenance and common-but-unlearned words."""

        new_words = self.get_words_by_exposure(ExposureLevel.NEW, DAILY_MIX_NEW)
        struggling = self.get_struggling_words(DAILY_MIX_STRUGGLING)
        maintenance = self.get_maintenance_words(DAILY_MIX_MAINTENANCE)
        frequency_gaps = self.get_high_frequency_unlearned(DAILY_MIX_FREQUENCY)
        words = _unique(new_words + struggling + maintenance + frequency_gaps)[:max_words]
        return StudyList(
            id="daily_mix",
            name="Daily Focus",
            description="Smart mix of new words, review, and maintenance",
            words=words,
            algorithm_used="daily_smart_mix",
            metadata={
                "game_recommendation": ["all"],
                "composition": {
                    "new_words": len(new_words),
                    "struggling": len(struggling),
                    "maintenance": len(maintenance),
                    "frequency_gaps": len(frequency_gaps),
                },
            },
        )

    @_guarded("maintenance_sample", "Vocabulary Maintenance")
    def generate_maintenance_sample(self, sample_size: int = 20, *, include_known: bool = False) -> StudyList:
        """Random sample for general vocabulary review."""

        pool = list(self.word_list if include_known else self.active_words)
        sample = self.rng.sample(pool, min(sample_size, len(pool)))
        return StudyList(
            id="maintenance_sample",
            name="Vocabulary Maintenance",
            description="Random sample for general vocabulary review",
            words=sample,
            algorithm_used="random_sampling" if include_known else "random_sampling_excluding_known",
            metadata={"reason": "maintenance_review"},
        )

    def generate_verb_families(self) -> dict[str, Any]:
        """Group likely verb forms under a guessed infinitive."""

        groups: dict[str, VerbFamily] = {}
        for word in self.active_words:
            if not is_likely_verb(word.spanish):
                continue
            infinitive = guess_infinitive(word.spanish)
            family = groups.get(infinitive)
            if family is None:
                family = groups[infinitive] = VerbFamily(
                    infinitive=infinitive,
                    english_meaning=word.english,
                    frequency_rank=_rank(word),
                )
            family.forms.append(word)
            family.frequency_rank = min(family.frequency_rank, _rank(word))

        return {
            "id": "verb_families",
            "name": "Verb Families",
            "description": "Grouped conjugated forms of verbs in your active vocabulary",
            "groups": [family for family in groups.values() if len(family.forms) > 1],
            "algorithm_used": "conjugation_grouping_excluding_known",
        }

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    def get_words_by_exposure(self, level: ExposureLevel | str, count: int) -> list[WordRecord]:
        level = ExposureLevel(level)
        if level is ExposureLevel.KNOWN:
            return []
        matching = [w for w in self.word_list if w.exposure_level is level]
        return sorted(matching, key=_rank)[:count]

    def get_struggling_words(self, count: int) -> list[WordRecord]:
        """Words answered often enough to judge and still mostly missed, worst first."""

        struggling = [
            w
            for w in self.active_words
            if _times_studied(w) > STRUGGLING_MIN_STUDIES and _accuracy(w) < STRUGGLING_MAX_ACCURACY
        ]
        return sorted(struggling, key=_accuracy)[:count]

    def get_maintenance_words(self, count: int) -> list[WordRecord]:
        """Random sample of familiar/mastered words not studied for a week."""

        cutoff = self.now - timedelta(days=MAINTENANCE_AFTER_DAYS)
        stale = [
            w
            for w in self.word_list
            if w.exposure_level in (ExposureLevel.FAMILIAR, ExposureLevel.MASTERED)
            and (w.exposure.last_studied is None or w.exposure.last_studied < cutoff)
        ]
        return self.rng.sample(stale, min(count, len(stale)))

    def get_high_frequency_unlearned(self, count: int) -> list[WordRecord]:
        common = [
            w
            for w in self.word_list
            if _rank(w) <= HIGH_FREQUENCY_CUTOFF
            and w.exposure_level in (ExposureLevel.NEW, ExposureLevel.LEARNING)
        ]
        return sorted(common, key=_rank)[:count]

    def get_words_by_source(self, sources: Iterable[str] = ("scraped",)) -> list[WordRecord]:
        wanted = set(sources)
        return [w for w in self.word_list if (w.source or "scraped") in wanted]

    @staticmethod
    def get_source_breakdown(words: Iterable[WordRecord]) -> dict[str, int]:
        breakdown: dict[str, int] = {}
        for word in words:
            source = word.source or "scraped"
            breakdown[source] = breakdown.get(source, 0) + 1
        return breakdown

    @staticmethod
    def create_empty_list(list_id: str, name: str) -> StudyList:
        return StudyList(
            id=list_id,
            name=name,
            description="Unable to generate list",
            words=[],
            algorithm_used="none",
            error=True,
        )
