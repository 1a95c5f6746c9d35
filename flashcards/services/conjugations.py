"""Verb conjugation tables from the conjugation API, with a regular-verb fallback."""
from __future__ import annotations

from typing import Any, Protocol

import httpx
from loguru import logger
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from flashcards.config import settings
from flashcards.core.conjugation import TENSE_KEYS, regular_conjugations
from flashcards.services.sentences import is_retryable, log_retry
from flashcards.utils.cache import build_cache_key, cache_backend

CACHE_NAMESPACE = "conjugation"

# subjunctive tense key in the API response -> flattened table key
_SUBJUNCTIVE_KEYS = {
    "presente": TENSE_KEYS["subjuntivo presente"],
    "pretérito-imperfecto-1": TENSE_KEYS["subjuntivo imperfecto"],
    "pretérito-imperfecto": TENSE_KEYS["subjuntivo imperfecto"],
}


class ConjugationSource(Protocol):
    """Return ``{tense key: [six forms]}`` for a verb, or ``None``."""

    def get_conjugations(self, verb: str) -> dict[str, list[str]] | None:  # pragma: no cover - interface definition
        ...


def flatten_moods(data: Any) -> dict[str, list[str]] | None:
    """Flatten ``value.moods`` into one table keyed like ``TENSE_KEYS`` values."""

    if not isinstance(data, dict):
        return None
    moods = (data.get("value") or {}).get("moods") if isinstance(data.get("value"), dict) else None
    if not isinstance(moods, dict):
        return None

    table: dict[str, list[str]] = {}
    for tense, forms in (moods.get("indicativo") or {}).items():
        if isinstance(forms, list):
            table[tense] = [str(form) for form in forms]
    for tense, forms in (moods.get("subjuntivo") or {}).items():
        key = _SUBJUNCTIVE_KEYS.get(tense)
        if key and isinstance(forms, list) and key not in table:
            table[key] = [str(form) for form in forms]
    return table or None


class ConjugationClient:
    """``ConjugationSource`` backed by ``{CONJUGATION_API_BASE}/conjugate/es/{verb}``.

    Successful lookups are cached. When the service fails or knows nothing
    about the verb, regular -ar/-er/-ir rules are used instead.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        client: httpx.Client | None = None,
        use_fallback: bool = True,
    ) -> None:
        self.base_url = (base_url or settings.CONJUGATION_API_BASE).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.use_fallback = use_fallback
        self._client = client

    @retry(
        retry=retry_if_exception(is_retryable),
        stop=stop_after_attempt(settings.HTTP_MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        before_sleep=log_retry,
        reraise=True,
    )
    def _fetch(self, verb: str) -> Any:
        url = f"{self.base_url}/conjugate/es/{verb}"
        headers = {"Accept": "application/json"}
        if self._client is not None:
            response = self._client.get(url, headers=headers)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, headers=headers)
        response.raise_for_status()
        return response.json()

    def _fallback(self, verb: str) -> dict[str, list[str]] | None:
        if not self.use_fallback:
            return None
        table = regular_conjugations(verb)
        if table is not None:
            logger.info(f"Using regular conjugation rules for {verb!r}")
        return table

    def get_conjugations(self, verb: str) -> dict[str, list[str]] | None:
        if not isinstance(verb, str) or not verb.strip():
            return None

        verb = verb.strip().lower()
        key = build_cache_key(verb=verb)
        cached = cache_backend.get(CACHE_NAMESPACE, key)
        if cached is not None:
            return cached

        try:
            data = self._fetch(verb)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Conjugation lookup for {verb!r} failed: {exc}")
            return self._fallback(verb)

        table = flatten_moods(data)
        if table is None:
            return self._fallback(verb)
        cache_backend.set(CACHE_NAMESPACE, key, table, settings.LOOKUP_CACHE_TTL_SECONDS)
        return table
