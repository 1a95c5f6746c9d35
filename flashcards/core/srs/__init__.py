"""Pure scheduling state machines."""

from flashcards.core.srs import exposure, leitner
from flashcards.core.srs.exposure import ExposureTransition, calculate_exposure_level
from flashcards.core.srs.leitner import LEITNER_SCHEDULE_IN_DAYS, MAX_LEITNER_BOX

__all__ = [
    "exposure",
    "leitner",
    "ExposureTransition",
    "calculate_exposure_level",
    "LEITNER_SCHEDULE_IN_DAYS",
    "MAX_LEITNER_BOX",
]
