"""Example sentences from the Tatoeba search API."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Protocol

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from flashcards.config import settings
from flashcards.utils.cache import build_cache_key, cache_backend

CACHE_NAMESPACE = "tatoeba"
SEARCH_LIMIT = 5


@dataclass(slots=True, frozen=True)
class SentencePair:
    """A Spanish sentence with one English translation."""

    id_spa: int | None
    text_spa: str
    id_eng: int | None
    text_eng: str


class SentenceSource(Protocol):
    """Anything that can supply example sentences for a Spanish query."""

    def get_examples(self, spanish_query: str) -> list[SentencePair]:  # pragma: no cover - interface definition
        ...


def is_retryable(exc: BaseException) -> bool:
    """Retry transport failures and server errors, never client errors."""

    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        f"Retrying {retry_state.fn.__name__} after attempt {retry_state.attempt_number}: {exc}"
    )


def parse_search_results(data: Any) -> list[SentencePair]:
    """Keep results whose first translation group has an English sentence."""

    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        logger.warning("Tatoeba response did not contain a results array")
        return []

    pairs: list[SentencePair] = []
    for result in data["results"]:
        if not isinstance(result, dict) or not result.get("text"):
            continue
        translations = result.get("translations") or []
        first_group = translations[0] if translations and isinstance(translations[0], list) else []
        english = next(
            (t for t in first_group if isinstance(t, dict) and t.get("lang") == "eng" and t.get("text")),
            None,
        )
        if english is None:
            continue
        pairs.append(
            SentencePair(
                id_spa=result.get("id"),
                text_spa=result["text"],
                id_eng=english.get("id"),
                text_eng=english["text"],
            )
        )
    return pairs


class TatoebaClient:
    """``SentenceSource`` backed by ``{TATOEBA_API_BASE}/search``.

    Results are cached per query. Errors that survive the retries are
    logged and produce an empty list.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or settings.TATOEBA_API_BASE).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._client = client

    @retry(
        retry=retry_if_exception(is_retryable),
        stop=stop_after_attempt(settings.HTTP_MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        before_sleep=log_retry,
        reraise=True,
    )
    def _search(self, params: dict[str, str]) -> Any:
        if self._client is not None:
            response = self._client.get(f"{self.base_url}/search", params=params)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(f"{self.base_url}/search", params=params)
        response.raise_for_status()
        return response.json()

    def get_examples(self, spanish_query: str) -> list[SentencePair]:
        if not isinstance(spanish_query, str) or not spanish_query.strip():
            logger.warning("Tatoeba lookup skipped: empty query")
            return []

        query = spanish_query.strip()
        key = build_cache_key(query=query, limit=SEARCH_LIMIT)
        cached = cache_backend.get(CACHE_NAMESPACE, key)
        if cached is not None:
            return [SentencePair(**item) for item in cached]

        params = {
            "query": query,
            "from": "spa",
            "to": "eng",
            "orphans": "no",
            "sort": "relevance",
            "limit": str(SEARCH_LIMIT),
        }
        try:
            data = self._search(params)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"Tatoeba lookup for {query!r} failed: {exc}")
            return []

        pairs = parse_search_results(data)
        cache_backend.set(CACHE_NAMESPACE, key, [asdict(pair) for pair in pairs], settings.LOOKUP_CACHE_TTL_SECONDS)
        logger.debug(f"Tatoeba returned {len(pairs)} sentence pairs for {query!r}")
        return pairs
