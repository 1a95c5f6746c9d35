"""Spaced-repetition backend for a Spanish vocabulary flashcard app."""

__version__ = "0.1.0"
