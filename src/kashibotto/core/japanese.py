"""Japanese script detection and kana normalization."""

import re

from pykakasi import kakasi

# ----------------------
# Unicode ranges for script detection
# ----------------------
JAPANESE_HIRAGANA = (0x3040, 0x309F)
JAPANESE_KATAKANA = (0x30A0, 0x30FF)
JAPANESE_KANJI = (0x4E00, 0x9FAF)

JAPANESE_RE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
NEEDS_HIRAGANA_RE = re.compile(r"[\u30A0-\u30FF\u4E00-\u9FAF]")

SMALL_TSU = "っ"

_CONVERTER = None


def contains_japanese(text: str) -> bool:
    """True if text has at least one Hiragana, Katakana or Kanji character."""
    return bool(text) and JAPANESE_RE.search(text) is not None


def is_japanese_char(char: str) -> bool:
    code = ord(char)
    return any(
        start <= code <= end
        for start, end in (JAPANESE_HIRAGANA, JAPANESE_KATAKANA, JAPANESE_KANJI)
    )


def _converter():
    global _CONVERTER
    if _CONVERTER is None:
        _CONVERTER = kakasi()
    return _CONVERTER


def to_hiragana(text: str) -> str:
    """Convert Katakana (and Kanji) in a reading to Hiragana using pykakasi.

    Text without Katakana or Kanji is returned unchanged.
    """
    if not text or NEEDS_HIRAGANA_RE.search(text) is None:
        return text
    return "".join(item["hira"] for item in _converter().convert(text))
