"""Genius lyrics clients.

Both clients expose the same two capabilities:

- ``search(query, limit)`` returning LyricsSearchResult hits, most relevant first
- ``fetch_lyrics_text(result)`` returning the raw lyrics of one hit

GeniusApiClient goes through the official API with ``lyricsgenius`` and needs
an access token. GeniusWebClient talks to the public site directly and doubles
as the scraping fallback.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import lyricsgenius
import requests  # type: ignore[import-untyped]

from ..config import HTTP_TIMEOUT, LYRICS_SEARCH_RESULTS
from ..exceptions import LyricsUnavailableError
from ..utils.logging import get_logger
from .fetch import fetch_html, fetch_json
from .lyrics_cleaning import extract_lyrics
from .models import LyricsSearchResult

logger = get_logger(__name__)

GENIUS_SEARCH_URL = "https://genius.com/api/search/song"


def _result_from_hit(result: Dict[str, Any]) -> Optional[LyricsSearchResult]:
    url = result.get("url")
    if not url:
        return None
    artist = (result.get("primary_artist") or {}).get("name") or result.get(
        "artist_names", ""
    )
    return LyricsSearchResult(
        title=result.get("title") or "",
        artist=artist or "",
        source_url=url,
        song_id=result.get("id"),
        full_title=result.get("full_title"),
    )


class LyricsClient(ABC):
    """Capability interface shared by the Genius clients."""

    name = "lyrics"

    @abstractmethod
    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[LyricsSearchResult]:
        """Hits for a free-text query; ``limit`` overrides the page size."""

    @abstractmethod
    def fetch_lyrics_text(self, result: LyricsSearchResult) -> str:
        """Raw lyrics of one hit."""


class GeniusWebClient(LyricsClient):
    """Direct-HTTP client for the public Genius site."""

    name = "genius-web"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT,
        per_page: int = LYRICS_SEARCH_RESULTS,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.per_page = per_page

    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[LyricsSearchResult]:
        data = fetch_json(
            GENIUS_SEARCH_URL,
            params={"per_page": limit or self.per_page, "q": query},
            timeout=self.timeout,
            session=self.session,
        )
        results: List[LyricsSearchResult] = []
        sections = (data.get("response") or {}).get("sections") or []
        for section in sections:
            if section.get("type") != "song":
                continue
            for hit in section.get("hits", []):
                found = _result_from_hit(hit.get("result") or {})
                # Artist and album pages share the search index
                if found and found.source_url.endswith("-lyrics"):
                    results.append(found)
        return results

    def fetch_page(self, url: str) -> str:
        return fetch_html(url, timeout=self.timeout, session=self.session)

    def fetch_lyrics_text(self, result: LyricsSearchResult) -> str:
        html = self.fetch_page(result.source_url)
        text = extract_lyrics(html)
        if not text:
            raise LyricsUnavailableError(
                f"No lyrics found in page {result.source_url}"
            )
        return text


class GeniusApiClient(LyricsClient):
    """Official Genius API client backed by lyricsgenius."""

    name = "genius-api"

    def __init__(
        self,
        access_token: str,
        timeout: float = HTTP_TIMEOUT,
        per_page: int = LYRICS_SEARCH_RESULTS,
        genius: Optional[lyricsgenius.Genius] = None,
    ):
        self.per_page = per_page
        self.genius = genius or lyricsgenius.Genius(
            access_token,
            timeout=int(timeout),
            retries=0,  # RetryPolicy at the call site owns retries
            remove_section_headers=False,  # clean_lyrics normalizes them
            skip_non_songs=True,
            verbose=False,
        )

    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[LyricsSearchResult]:
        response = (
            self.genius.search_songs(query, per_page=limit or self.per_page) or {}
        )
        results: List[LyricsSearchResult] = []
        for hit in response.get("hits", []):
            found = _result_from_hit(hit.get("result") or {})
            if found:
                results.append(found)
        return results

    def fetch_lyrics_text(self, result: LyricsSearchResult) -> str:
        text = self.genius.lyrics(song_url=result.source_url)
        if not text or not text.strip():
            raise LyricsUnavailableError(
                f"Genius returned no lyrics for {result.source_url}"
            )
        return text


def create_lyrics_client(
    access_token: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = HTTP_TIMEOUT,
) -> LyricsClient:
    """Pick the primary client: the API when a token is configured, else the web."""
    if access_token:
        logger.info("Using Genius API client for lyrics")
        return GeniusApiClient(access_token, timeout=timeout)
    logger.info("No Genius access token configured, using direct web client")
    return GeniusWebClient(session=session, timeout=timeout)
