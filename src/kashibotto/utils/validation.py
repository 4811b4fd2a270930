"""Validation utilities."""

from typing import Optional

from ..exceptions import InvalidInputError


def validate_title(title: Optional[str]) -> str:
    """Validate and trim a song title."""
    if title is None or not str(title).strip():
        raise InvalidInputError("Song title is required")
    return str(title).strip()


def validate_artist(artist: Optional[str]) -> Optional[str]:
    """Trim an optional artist name, mapping blank values to None."""
    if artist is None:
        return None
    artist = str(artist).strip()
    return artist or None


def validate_text(text: Optional[str], what: str = "Text") -> str:
    """Validate that text is present and non-blank."""
    if text is None or not str(text).strip():
        raise InvalidInputError(f"{what} is required")
    return str(text)
