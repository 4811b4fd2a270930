"""Lyrics retrieval: search, primary fetch, scraping fallback, cleaning, caching."""

from typing import List, Optional, Tuple, Type

import requests  # type: ignore[import-untyped]

from ..config import (
    LYRICS_CACHE_TTL,
    LYRICS_MAX_ATTEMPTS,
    LYRICS_RETRY_BASE_DELAY,
    LYRICS_RETRY_JITTER,
    SEARCH_MIN_QUERY_LENGTH,
    SEARCH_SUGGESTION_LIMIT,
)
from ..exceptions import NotFoundError, ProviderError, RateLimitedError
from ..utils.cache import TTLCache
from ..utils.logging import get_logger
from ..utils.retry import RetryPolicy
from ..utils.validation import validate_artist, validate_title
from .genius import GeniusWebClient, LyricsClient
from .lyrics_cleaning import clean_lyrics, extract_lyrics
from .models import LyricsQuery, LyricsSearchResult

logger = get_logger(__name__)

# Transient failures worth another attempt; parse failures are not
RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (
    requests.exceptions.RequestException,
    RateLimitedError,
)


def default_lyrics_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=LYRICS_MAX_ATTEMPTS,
        base_delay=LYRICS_RETRY_BASE_DELAY,
        jitter=LYRICS_RETRY_JITTER,
    )


class LyricsRetriever:
    """Fetches cleaned lyrics for a song title (and optional artist).

    Args:
        client: Primary lyrics client used for search and the structured fetch
        fallback_client: Direct-HTTP client whose raw page is scraped when the
            primary fetch fails; None disables the fallback
        cache: Shared cache of cleaned lyrics keyed by normalized query
        retry_policy: Policy for search and primary fetch
    """

    def __init__(
        self,
        client: LyricsClient,
        fallback_client: Optional[GeniusWebClient] = None,
        cache: Optional[TTLCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.client = client
        self.fallback_client = fallback_client
        self.cache: TTLCache[str] = cache if cache is not None else TTLCache(LYRICS_CACHE_TTL)
        self.retry_policy = retry_policy or default_lyrics_retry_policy()

    def fetch_lyrics(self, title: str, artist: Optional[str] = None) -> str:
        """
        Return cleaned lyrics for a song.

        Raises:
            InvalidInputError: title is blank
            NotFoundError: no usable lyrics could be obtained
        """
        query = LyricsQuery.normalized(validate_title(title), validate_artist(artist))

        cached = self.cache.get(query.cache_key)
        if cached is not None:
            logger.info(f"Lyrics cache hit for {query.search_text!r}")
            return cached

        logger.info(f"Fetching lyrics for {query.search_text!r}")
        result = self._search(query)

        raw = self._fetch_primary(result)
        if raw is None:
            raw = self._fetch_fallback(result)
        if raw is None:
            raise NotFoundError(self._not_found_message(query))

        cleaned = clean_lyrics(raw)
        if not cleaned:
            logger.warning(f"Lyrics for {result.source_url} were empty after cleaning")
            raise NotFoundError(self._not_found_message(query))

        self.cache.set(query.cache_key, cleaned)
        logger.info(
            f"Lyrics ready for {query.search_text!r}: {len(raw)} -> {len(cleaned)} chars"
        )
        return cleaned

    def search_songs(
        self, query: str, limit: int = SEARCH_SUGGESTION_LIMIT
    ) -> List[LyricsSearchResult]:
        """
        Song suggestions for a partial query, most relevant first.

        Queries shorter than SEARCH_MIN_QUERY_LENGTH after trimming give no
        suggestions. A single attempt is made; provider failures are logged
        and give no suggestions.
        """
        text = " ".join((query or "").split())
        if len(text) < SEARCH_MIN_QUERY_LENGTH or limit < 1:
            return []

        try:
            results = self.client.search(text, limit=limit)
        except (requests.exceptions.RequestException, ProviderError, ValueError) as e:
            logger.warning(f"Song search failed for {text!r}: {e}")
            return []

        logger.debug(f"Song search for {text!r}: {len(results)} results")
        return list(results[:limit])

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Lyrics cache cleared")

    # ----------------------
    # Steps
    # ----------------------
    def _search(self, query: LyricsQuery) -> LyricsSearchResult:
        try:
            results = self.retry_policy.call(
                self.client.search, query.search_text, retry_on=RETRYABLE_ERRORS
            )
        except Exception as e:
            logger.error(f"Lyrics search failed for {query.search_text!r}: {e}")
            raise NotFoundError(self._not_found_message(query)) from e

        candidates = [r for r in results if not r.is_degraded_variant]
        if not candidates:
            logger.info(
                f"No usable search results for {query.search_text!r} "
                f"({len(results)} before filtering)"
            )
            raise NotFoundError(self._not_found_message(query))

        best = candidates[0]
        logger.info(
            f"Found song: {best.artist} - {best.title} ({best.source_url}); "
            f"{len(candidates)}/{len(results)} results kept"
        )
        return best

    def _fetch_primary(self, result: LyricsSearchResult) -> Optional[str]:
        try:
            text = self.retry_policy.call(
                self.client.fetch_lyrics_text, result, retry_on=RETRYABLE_ERRORS
            )
        except Exception as e:
            logger.warning(f"Primary lyrics fetch failed for {result.source_url}: {e}")
            return None
        return text if text and text.strip() else None

    def _fetch_fallback(self, result: LyricsSearchResult) -> Optional[str]:
        # The web client's structured fetch already is the scrape
        if self.fallback_client is None or self.fallback_client is self.client:
            return None

        logger.info(f"Attempting fallback lyrics scrape for {result.source_url}")
        try:
            html = self.fallback_client.fetch_page(result.source_url)
        except Exception as e:
            logger.warning(f"Fallback page fetch failed for {result.source_url}: {e}")
            return None

        text = extract_lyrics(html)
        if text is None:
            logger.warning(f"Fallback scrape found no lyrics in {result.source_url}")
        return text

    @staticmethod
    def _not_found_message(query: LyricsQuery) -> str:
        if query.artist:
            return f'Lyrics not found for "{query.title}" by {query.artist}'
        return f'Lyrics not found for "{query.title}"'
