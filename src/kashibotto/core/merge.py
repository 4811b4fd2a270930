"""Repair of segmentation splits after a small tsu (っ)."""

from dataclasses import replace
from typing import List

from .japanese import SMALL_TSU
from .models import Segment

# Kana that may follow a sokuon inside one verb form (引っ|張って, 言っ|て)
SMALL_TSU_CONTINUATIONS = (
    "て", "た", "だ", "で", "ど", "に", "の", "は", "が", "を",
    "つつ", "ながら", "たり", "り", "う", "よう", "まい", "ず", "ぬ",
    "ね", "な", "よ", "わ", "さ",
)

# Second half of a compound verb split after its first sokuon: 張って, 張った
SOKUON_FORM_ENDINGS = tuple(SMALL_TSU + ending for ending in SMALL_TSU_CONTINUATIONS)


def continues_small_tsu(text: str) -> bool:
    """True if text can attach to a preceding segment ending in っ.

    Either it starts with an allowed continuation (言っ|て) or it is itself a
    sokuon form ending in っ plus an allowed continuation (引っ|張って).
    """
    return text.startswith(SMALL_TSU_CONTINUATIONS) or (
        len(text) > 2 and text.endswith(SOKUON_FORM_ENDINGS)
    )


def should_merge(current: Segment, following: Segment) -> bool:
    return current.text.endswith(SMALL_TSU) and continues_small_tsu(following.text)


def merge_small_tsu(segments: List[Segment]) -> List[Segment]:
    """
    Join a segment ending in っ with the next one when that continues it.

    Single left-to-right pass; a merged pair is not examined again. The
    merged segment keeps the translation and dictionary of the first part.
    """
    merged: List[Segment] = []
    i = 0
    while i < len(segments):
        current = segments[i]
        if i + 1 < len(segments) and should_merge(current, segments[i + 1]):
            following = segments[i + 1]
            merged.append(
                replace(
                    current,
                    text=current.text + following.text,
                    reading=current.reading + following.reading,
                )
            )
            i += 2
            continue
        merged.append(current)
        i += 1
    return merged
