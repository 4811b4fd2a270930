"""Pipeline facade.

Wires the lyrics retriever, segmenter, dictionary cache and processor from
configuration and exposes the operations used by the CLI.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import requests  # type: ignore[import-untyped]

from ..config import (
    HTTP_TIMEOUT,
    SEARCH_SUGGESTION_LIMIT,
    get_dictionary_cache_path,
    get_dictionary_storage_mode,
    get_genius_access_token,
)
from ..core.dictionary import DictionaryCache, JishoClient, create_storage
from ..core.genius import GeniusWebClient, create_lyrics_client
from ..core.lyrics import LyricsRetriever
from ..core.models import (
    DictionaryEntry,
    LyricsSearchResult,
    Morpheme,
    ProcessedLyrics,
)
from ..core.processor import LyricsProcessor
from ..core.segmentation import Analyzer, Segmenter
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Pipeline:
    """The four components, already wired together."""

    retriever: LyricsRetriever
    segmenter: Segmenter
    dictionary: DictionaryCache
    processor: LyricsProcessor

    def fetch_lyrics(self, title: str, artist: Optional[str] = None) -> str:
        return self.retriever.fetch_lyrics(title, artist)

    def search_songs(
        self, query: str, limit: int = SEARCH_SUGGESTION_LIMIT
    ) -> List[LyricsSearchResult]:
        return self.retriever.search_songs(query, limit)

    def process_lyrics(self, lyrics: str) -> ProcessedLyrics:
        return self.processor.process_lyrics(lyrics)

    def segment_lyrics(self, lyrics: str) -> List[List[Morpheme]]:
        return self.segmenter.segment_lyrics(lyrics)

    def lookup_batch(self, words: Sequence[str]) -> List[Optional[DictionaryEntry]]:
        return self.dictionary.lookup_batch(words)


def create_pipeline(
    access_token: Optional[str] = None,
    storage_mode: Optional[str] = None,
    cache_path: Optional[Path] = None,
    session: Optional[requests.Session] = None,
    analyzer: Optional[Analyzer] = None,
    timeout: float = HTTP_TIMEOUT,
) -> Pipeline:
    """
    Build a Pipeline from configuration.

    Arguments left as None are read from the environment (see config).
    """
    session = session or requests.Session()
    token = access_token if access_token is not None else get_genius_access_token()

    web_client = GeniusWebClient(session=session, timeout=timeout)
    client = create_lyrics_client(access_token=token, session=session, timeout=timeout)
    if isinstance(client, GeniusWebClient):
        client = web_client
    retriever = LyricsRetriever(client, fallback_client=web_client)

    storage = create_storage(
        storage_mode or get_dictionary_storage_mode(),
        cache_path or get_dictionary_cache_path(),
    )
    logger.debug(f"Dictionary cache storage: {storage.describe()}")
    dictionary = DictionaryCache(JishoClient(session=session, timeout=timeout), storage)

    segmenter = Segmenter(analyzer)
    processor = LyricsProcessor(segmenter, dictionary)
    return Pipeline(
        retriever=retriever,
        segmenter=segmenter,
        dictionary=dictionary,
        processor=processor,
    )


__all__ = ["Pipeline", "create_pipeline"]
