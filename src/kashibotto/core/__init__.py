"""Core functionality modules."""

from .models import (
    DictionaryEntry,
    LyricsQuery,
    LyricsSearchResult,
    Morpheme,
    PartOfSpeech,
    ProcessedLyrics,
    Segment,
)

__all__ = [
    "DictionaryEntry",
    "LyricsQuery",
    "LyricsSearchResult",
    "Morpheme",
    "PartOfSpeech",
    "ProcessedLyrics",
    "Segment",
]
