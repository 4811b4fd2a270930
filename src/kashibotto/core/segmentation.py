"""Morphological segmentation of lyrics lines.

Japanese lines go through a MeCab analyzer (fugashi + unidic-lite by default).
Lines without Japanese script use a lightweight tokenizer that keeps words,
whitespace and punctuation as separate tokens.
"""

import re
from typing import Callable, List, Optional

from ..exceptions import InvalidInputError, SegmentationError
from ..utils.logging import get_logger
from ..utils.validation import validate_text
from .japanese import contains_japanese
from .models import AnalyzerToken, Morpheme, PartOfSpeech, TokenStatus

logger = get_logger(__name__)

Analyzer = Callable[[str], List[AnalyzerToken]]

LATIN_SPLIT_RE = re.compile(r"(\s+|[.,!?;:\"()\[\]\-])")
LATIN_PUNCT_RE = re.compile(r"^[.,!?;:\"()\[\]\-]$")

# IPADIC and UniDic top-level POS names
POS_MAP = {
    "名詞": PartOfSpeech.NOUN,
    "代名詞": PartOfSpeech.NOUN,
    "動詞": PartOfSpeech.VERB,
    "形容詞": PartOfSpeech.ADJECTIVE,
    "形容動詞": PartOfSpeech.ADJECTIVE,
    "形状詞": PartOfSpeech.ADJECTIVE,
    "副詞": PartOfSpeech.ADVERB,
    "助詞": PartOfSpeech.PARTICLE,
    "助動詞": PartOfSpeech.PARTICLE,
    "接続詞": PartOfSpeech.CONJUNCTION,
    "感動詞": PartOfSpeech.INTERJECTION,
    "接頭詞": PartOfSpeech.PREFIX,
    "接頭辞": PartOfSpeech.PREFIX,
    "接尾辞": PartOfSpeech.SUFFIX,
    "記号": PartOfSpeech.SYMBOL,
    "補助記号": PartOfSpeech.SYMBOL,
    "その他": PartOfSpeech.OTHER,
    "フィラー": PartOfSpeech.FILLER,
    "未知語": PartOfSpeech.UNKNOWN,
}


def map_pos(tag: Optional[str]) -> PartOfSpeech:
    """Map an analyzer POS tag (first level) to the simplified vocabulary."""
    if not tag:
        return PartOfSpeech.UNKNOWN
    return POS_MAP.get(tag.split(",")[0], PartOfSpeech.UNKNOWN)


def tokenize_latin(text: str) -> List[Morpheme]:
    """Split non-Japanese text into words, whitespace runs and punctuation."""
    morphemes = []
    for part in LATIN_SPLIT_RE.split(text):
        if not part:
            continue
        if part.isspace():
            pos = PartOfSpeech.WHITESPACE
        elif LATIN_PUNCT_RE.match(part):
            pos = PartOfSpeech.PUNCTUATION
        else:
            pos = PartOfSpeech.LATIN
        morphemes.append(Morpheme(surface=part, part_of_speech=pos, reading=part))
    return morphemes


def split_characters(text: str) -> List[Morpheme]:
    """Last-resort split: one unknown morpheme per non-space character."""
    return [
        Morpheme(surface=char, part_of_speech=PartOfSpeech.UNKNOWN, reading=char)
        for char in text
        if not char.isspace()
    ]


class FugashiAnalyzer:
    """MeCab analyzer through fugashi; the tagger is created on first use."""

    def __init__(self, tagger=None):
        self._tagger = tagger

    @property
    def tagger(self):
        if self._tagger is None:
            import fugashi

            self._tagger = fugashi.Tagger()
            logger.info("MeCab segmentation initialized with fugashi")
        return self._tagger

    def __call__(self, text: str) -> List[AnalyzerToken]:
        tokens = []
        for word in self.tagger(text):
            feature = word.feature
            reading = getattr(feature, "kana", None)
            tokens.append(
                AnalyzerToken(
                    surface=word.surface,
                    status=self._status(word),
                    pos_tag=getattr(feature, "pos1", None) or "",
                    reading=reading if reading and reading != "*" else None,
                )
            )
        return tokens

    @staticmethod
    def _status(word) -> TokenStatus:
        # MeCab node stat: 0 normal, 1 unknown, 2 BOS, 3 EOS
        stat = getattr(word, "stat", 0)
        if stat == 0:
            return TokenStatus.NORMAL
        if stat == 1:
            return TokenStatus.UNKNOWN
        return TokenStatus.DISCARD


class Segmenter:
    """Splits lyrics lines into morphemes.

    Args:
        analyzer: Callable returning AnalyzerToken lists; defaults to fugashi
    """

    def __init__(self, analyzer: Optional[Analyzer] = None):
        self.analyzer = analyzer or FugashiAnalyzer()

    def analyze(self, text: str) -> List[Morpheme]:
        """Run the analyzer on Japanese text; raises SegmentationError if nothing usable."""
        tokens = self.analyzer(text)
        morphemes = [
            Morpheme(
                surface=token.surface,
                part_of_speech=map_pos(token.pos_tag),
                reading=(
                    token.reading
                    if token.reading and token.reading != "*"
                    else token.surface
                ),
            )
            for token in tokens
            if token.status in (TokenStatus.NORMAL, TokenStatus.UNKNOWN)
            and token.surface
            and token.surface.strip()
        ]
        if not morphemes:
            raise SegmentationError("No valid morphemes found after segmentation")
        return morphemes

    def segment_line(self, line: str) -> List[Morpheme]:
        """
        Segment one line. Never returns an empty list for non-blank input.

        Raises:
            InvalidInputError: line is blank
        """
        text = " ".join(validate_text(line, "Text for segmentation").split())

        if not contains_japanese(text):
            return tokenize_latin(text)

        try:
            return self.analyze(text)
        except Exception as e:
            logger.warning(f"Segmentation failed, using per-character fallback: {e}")
            return split_characters(text)

    def segment_lyrics(self, lyrics: str) -> List[List[Morpheme]]:
        """
        Segment every line; blank lines between lyrics become empty lists.

        Leading and trailing blank lines are dropped, so a trailing newline
        does not add an empty line.

        Raises:
            InvalidInputError: lyrics are blank
        """
        validate_text(lyrics, "Lyrics for segmentation")
        lines = lyrics.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        logger.info(f"Starting lyrics segmentation ({len(lines)} lines)")

        segmented: List[List[Morpheme]] = []
        for i, line in enumerate(lines):
            if not line.strip():
                segmented.append([])
                continue
            try:
                segmented.append(self.segment_line(line))
            except InvalidInputError:
                segmented.append([])
            logger.debug(f"Line {i + 1}/{len(lines)}: {len(segmented[-1])} morphemes")

        logger.info(
            f"Lyrics segmentation completed: {len(segmented)} lines, "
            f"{sum(len(line) for line in segmented)} morphemes"
        )
        return segmented
