"""Data models for lyrics retrieval and enrichment."""

import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

NO_DEFINITION = "No definition available"

_ANNOTATION_RE = re.compile(r"[\(\[（【［].*?[\)\]）】］]")


class PartOfSpeech(str, Enum):
    """Simplified part-of-speech vocabulary used for display."""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PARTICLE = "particle"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    SYMBOL = "symbol"
    FILLER = "filler"
    OTHER = "other"
    UNKNOWN = "unknown"
    # Tags produced by the non-Japanese tokenizer
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"
    LATIN = "latin"


class TokenStatus(str, Enum):
    """Analyzer verdict on a raw token."""

    NORMAL = "normal"
    UNKNOWN = "unknown"
    DISCARD = "discard"


@dataclass
class LyricsQuery:
    """A song lookup request, normalized for use as a search key."""

    title: str
    artist: Optional[str] = None

    @classmethod
    def normalized(cls, title: str, artist: Optional[str] = None) -> "LyricsQuery":
        clean_title = normalize_query_text(title) or " ".join(title.split())
        clean_artist = normalize_query_text(artist) if artist else ""
        return cls(title=clean_title, artist=clean_artist or None)

    @property
    def cache_key(self) -> str:
        return f"{self.title}::{self.artist or ''}".lower()

    @property
    def search_text(self) -> str:
        return f"{self.title} {self.artist}" if self.artist else self.title


def normalize_query_text(text: Optional[str]) -> str:
    """Trim, strip parenthetical/bracketed annotations and collapse whitespace."""
    if not text:
        return ""
    stripped = _ANNOTATION_RE.sub(" ", text)
    return " ".join(stripped.split())


@dataclass
class CacheEntry(Generic[T]):
    """A cached value; visible only while ``now < expires_at``."""

    value: T
    expires_at: float

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now if now is not None else time.time()) >= self.expires_at


@dataclass
class Morpheme:
    """Smallest segmented unit: surface form, part of speech and reading."""

    surface: str
    part_of_speech: PartOfSpeech = PartOfSpeech.UNKNOWN
    reading: str = ""

    def __post_init__(self) -> None:
        if not self.reading:
            self.reading = self.surface

    def to_dict(self) -> Dict[str, Any]:
        return {
            "surface": self.surface,
            "pos": self.part_of_speech.value,
            "reading": self.reading,
        }


@dataclass
class AnalyzerToken:
    """One raw token emitted by a morphological analyzer."""

    surface: str
    status: TokenStatus
    pos_tag: str
    reading: Optional[str] = None


@dataclass
class DictionaryEntry:
    """Dictionary data for one surface string (first sense only)."""

    word: str
    definitions: List[str]
    parts_of_speech: List[str] = field(default_factory=list)
    readings: List[str] = field(default_factory=list)
    cached_at: float = field(default_factory=time.time)

    @classmethod
    def fallback(cls, word: str) -> "DictionaryEntry":
        """Entry recorded for words the dictionary could not resolve."""
        return cls(
            word=word,
            definitions=[NO_DEFINITION],
            parts_of_speech=["unknown"],
            readings=[word],
        )

    @property
    def is_fallback(self) -> bool:
        return self.definitions == [NO_DEFINITION]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "definitions": list(self.definitions),
            "parts_of_speech": list(self.parts_of_speech),
            "readings": list(self.readings),
            "cached_at": self.cached_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DictionaryEntry":
        return cls(
            word=data["word"],
            definitions=list(data.get("definitions") or [NO_DEFINITION]),
            parts_of_speech=list(data.get("parts_of_speech") or []),
            readings=list(data.get("readings") or []),
            cached_at=float(data.get("cached_at", time.time())),
        )


@dataclass
class Segment:
    """The unit rendered to the end user."""

    text: str
    reading: str
    translation: str
    dictionary: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "text": self.text,
            "reading": self.reading,
            "translation": self.translation,
        }
        if self.dictionary is not None:
            data["dictionary"] = list(self.dictionary)
        return data


@dataclass
class ProcessedLyrics:
    """Ordered lines of segments; an empty line list is a preserved blank line."""

    lines: List[List[Segment]] = field(default_factory=list)

    @property
    def segment_count(self) -> int:
        return sum(len(line) for line in self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"lines": [[s.to_dict() for s in line] for line in self.lines]}


@dataclass
class LyricsSearchResult:
    """One search hit from a lyrics provider."""

    title: str
    artist: str
    source_url: str
    song_id: Optional[int] = None
    full_title: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.full_title or f"{self.title} by {self.artist}"

    def to_suggestion(self) -> Dict[str, Any]:
        return {
            "id": self.song_id,
            "title": self.title,
            "artist": self.artist,
            "full_title": self.display_title,
        }

    @property
    def is_degraded_variant(self) -> bool:
        """Romanized and translated pages duplicate the original with worse content."""
        haystack = f"{self.title} {self.artist}".lower()
        return "romanized" in haystack or "translation" in haystack
