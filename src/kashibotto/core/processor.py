"""Lyrics enrichment: segmentation, dictionary lookup and segment assembly."""

from typing import List, Optional

from ..exceptions import KashibottoError, ProcessingError, SegmentationError
from ..utils.logging import get_logger
from ..utils.validation import validate_text
from .dictionary import DictionaryCache
from .japanese import to_hiragana
from .merge import merge_small_tsu
from .models import DictionaryEntry, Morpheme, ProcessedLyrics, Segment
from .segmentation import Segmenter

logger = get_logger(__name__)


class LyricsProcessor:
    """Turns raw lyrics text into display segments, line by line."""

    def __init__(self, segmenter: Segmenter, dictionary: DictionaryCache):
        self.segmenter = segmenter
        self.dictionary = dictionary

    def process_lyrics(self, lyrics: str) -> ProcessedLyrics:
        """
        Segment and enrich lyrics. Blank lines are kept as empty lines.

        Raises:
            InvalidInputError: lyrics are blank
            SegmentationError: segmentation produced no lines
            ProcessingError: any unexpected failure
        """
        validate_text(lyrics, "Lyrics")
        try:
            lines = self.segmenter.segment_lyrics(lyrics)
            if not lines:
                raise SegmentationError("No lines found after segmentation")

            processed: List[List[Segment]] = []
            for i, morphemes in enumerate(lines):
                if not morphemes:
                    processed.append([])
                    continue
                processed.append(self.process_segments(morphemes))
                logger.debug(f"Processed line {i + 1}/{len(lines)}")

            result = ProcessedLyrics(lines=processed)
            logger.info(
                f"Lyrics processed: {len(result.lines)} lines, "
                f"{result.segment_count} segments"
            )
            return result
        except KashibottoError:
            raise
        except Exception as e:
            logger.error(f"Lyrics processing failed: {e}")
            raise ProcessingError("Failed to process lyrics", cause=e) from e

    def process_segments(self, morphemes: List[Morpheme]) -> List[Segment]:
        """Enrich an already segmented line and repair small-tsu splits."""
        if not morphemes:
            return []
        entries = self.dictionary.lookup_batch([m.surface for m in morphemes])
        segments = [
            self._build_segment(morpheme, entry)
            for morpheme, entry in zip(morphemes, entries)
        ]
        return merge_small_tsu(segments)

    def _build_segment(
        self, morpheme: Morpheme, entry: Optional[DictionaryEntry]
    ) -> Segment:
        try:
            definitions = self.dictionary.format_definitions(entry)
            return Segment(
                text=morpheme.surface,
                reading=to_hiragana(morpheme.reading or morpheme.surface),
                translation=definitions[0] if definitions else morpheme.surface,
                dictionary=definitions,
            )
        except Exception as e:
            logger.warning(f"Falling back to surface form for {morpheme.surface!r}: {e}")
            return Segment(
                text=morpheme.surface,
                reading=morpheme.surface,
                translation=morpheme.surface,
            )
