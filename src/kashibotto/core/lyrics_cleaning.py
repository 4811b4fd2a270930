"""Lyrics text extraction from HTML and Genius-specific cleanup."""

import re
from typing import Callable, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..utils.logging import get_logger

logger = get_logger(__name__)

# ----------------------
# Constants / Patterns
# ----------------------
MIN_HEURISTIC_BLOCK_CHARS = 50

# Page furniture that sits inside lyrics containers on Genius pages
NOISE_CLASS_PATTERNS = ["LyricsHeader", "SongBioPreview", "ContributorsCredit"]

LANGUAGE_NAMES = [
    r"Deutsch", r"Türkçe", r"ไทย\s*\(Thai\)", r"Español", r"Português", r"فارسی",
    r"Français", r"Polski", r"Русский\s*\(Russian\)", r"Česky",
]

CONTRIBUTORS_RE = re.compile(r"^\d+\s*Contributors?", re.IGNORECASE)
TRANSLATIONS_RE = re.compile(r"^Translations?", re.IGNORECASE)
LANGUAGE_RE = re.compile(r"^(?:" + "|".join(LANGUAGE_NAMES) + r")", re.IGNORECASE)
LYRICS_HEADER_RE = re.compile(r"Lyrics\s*$", re.IGNORECASE)
TECHNICAL_MARKER_RE = re.compile(
    r"\[(?:Guitar\s+Solo|Piano|Instrumental|Solo|Coda)\s*\d*\]", re.IGNORECASE
)
SECTION_MARKER_RE = re.compile(
    r"\[(Verse|Chorus|Refrain|Bridge|Intro|Outro|Pre-Chorus|Post-Chorus|Interlude)"
    r"(\s*\d*)(?::[^\]]*)?\]",
    re.IGNORECASE,
)
READ_MORE_RE = re.compile(r"Read\s+More.*$", re.IGNORECASE)
INLINE_SPACE_RE = re.compile(r"[ \t]+")
EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


# ----------------------
# HTML extraction
# ----------------------
def _container_text(element: Tag) -> str:
    for br in element.find_all("br"):
        br.replace_with("\n")
    return element.get_text()


def _outermost(elements: List[Tag]) -> List[Tag]:
    """Drop elements nested inside another element of the same list."""
    ids = {id(el) for el in elements}
    return [el for el in elements if not any(id(p) in ids for p in el.parents)]


def _join_containers(elements: List[Tag]) -> Optional[str]:
    texts = [_container_text(el).strip() for el in _outermost(elements)]
    texts = [t for t in texts if t]
    return "\n".join(texts) if texts else None


def _from_lyrics_containers(soup: BeautifulSoup) -> Optional[str]:
    return _join_containers(soup.find_all(attrs={"data-lyrics-container": "true"}))


def _from_lyrics_root(soup: BeautifulSoup) -> Optional[str]:
    root = soup.find(id="lyrics-root")
    return _join_containers([root]) if root else None


def _from_lyrics_class(soup: BeautifulSoup) -> Optional[str]:
    return _join_containers(
        soup.find_all(class_=lambda c: c is not None and "lyrics" in c.lower())
    )


def _from_text_blocks(soup: BeautifulSoup) -> Optional[str]:
    """First leaf block of visible text that looks like multi-line lyrics."""
    for block in soup.find_all(["div", "p", "section", "pre"]):
        if block.find(["div", "p", "section", "pre"]):
            continue
        text = _container_text(block).strip()
        if len(text) > MIN_HEURISTIC_BLOCK_CHARS and "\n" in text:
            return text
    return None


EXTRACTION_STRATEGIES: List[Callable[[BeautifulSoup], Optional[str]]] = [
    _from_lyrics_containers,
    _from_lyrics_root,
    _from_lyrics_class,
    _from_text_blocks,
]


def extract_lyrics(html: str) -> Optional[str]:
    """
    Extract lyrics text from a song page.

    Tries each strategy in EXTRACTION_STRATEGIES in order; the first one
    producing non-empty text wins.

    Returns:
        Extracted text with line breaks preserved, or None
    """
    if not html or not html.strip():
        return None

    soup = BeautifulSoup(html, "html.parser")
    for element in soup.find_all(["script", "style", "noscript"]):
        element.decompose()
    noise = soup.find_all(
        class_=lambda c: c is not None and any(p in c for p in NOISE_CLASS_PATTERNS)
    )
    for element in _outermost(noise):
        element.decompose()

    for strategy in EXTRACTION_STRATEGIES:
        text = strategy(soup)
        if not text:
            continue
        text = text.replace("\xa0", " ").replace("\r\n", "\n").replace("\r", "\n")
        text = EXCESS_BLANK_LINES_RE.sub("\n\n", text).strip()
        if text:
            logger.debug(f"Extracted lyrics with {strategy.__name__} ({len(text)} chars)")
            return text

    return None


# ----------------------
# Cleaning
# ----------------------
def is_banner_line(line: str) -> bool:
    """Check if a line is page chrome (contributors, translations, headers)."""
    stripped = line.strip()
    if not stripped:
        return False
    return bool(
        CONTRIBUTORS_RE.match(stripped)
        or TRANSLATIONS_RE.match(stripped)
        or LANGUAGE_RE.match(stripped)
        or LYRICS_HEADER_RE.search(stripped)
    )


def _section_label(match: re.Match) -> str:
    return (match.group(1) + match.group(2)).capitalize()


def clean_lyrics(lyrics: str) -> str:
    """
    Remove provider boilerplate from raw lyrics while keeping the song layout.

    - drops contributor, translation, language and "Lyrics" header lines
    - removes technical markers such as [Instrumental]
    - turns structural markers such as [Verse 1] into plain labels
    - strips "Read More" boilerplate
    - trims lines and collapses inner runs of spaces/tabs
    - keeps at most one blank line between stanzas
    """
    if not lyrics:
        return lyrics

    lines = []
    for line in lyrics.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if is_banner_line(line):
            continue
        line = TECHNICAL_MARKER_RE.sub("", line)
        line = SECTION_MARKER_RE.sub(_section_label, line)
        line = READ_MORE_RE.sub("", line)
        lines.append(INLINE_SPACE_RE.sub(" ", line.strip()))

    cleaned = EXCESS_BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()

    logger.debug(f"Cleaned lyrics: {len(lyrics)} -> {len(cleaned)} chars")
    return cleaned
