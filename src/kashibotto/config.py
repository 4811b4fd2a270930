"""Configuration settings for Kashibotto."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

# Directories
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "kashibotto"
DICTIONARY_CACHE_FILENAME = "dictionary-cache.json"

# Network settings (can be overridden via environment variables)
HTTP_TIMEOUT = float(os.getenv("KASHIBOTTO_HTTP_TIMEOUT", "15"))
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DICTIONARY_USER_AGENT = "Kashibotto/1.0 (Educational Japanese Learning App)"

# Lyrics retrieval
LYRICS_CACHE_TTL = float(os.getenv("KASHIBOTTO_LYRICS_CACHE_TTL", str(24 * 60 * 60)))
LYRICS_MAX_ATTEMPTS = 3
LYRICS_RETRY_BASE_DELAY = 1.0  # seconds
LYRICS_RETRY_JITTER = 0.5  # seconds
LYRICS_SEARCH_RESULTS = 5
SEARCH_SUGGESTION_LIMIT = 8
SEARCH_MIN_QUERY_LENGTH = 2

# Dictionary lookups
DICTIONARY_CACHE_TTL = float(
    os.getenv("KASHIBOTTO_DICTIONARY_CACHE_TTL", str(30 * 24 * 60 * 60))
)
DICTIONARY_MAX_ATTEMPTS = 3
DICTIONARY_RETRY_DELAY = 1.0  # seconds
DICTIONARY_MIN_REQUEST_INTERVAL = 0.2  # seconds between remote requests
DICTIONARY_BATCH_SIZE = 8
DICTIONARY_BATCH_DELAY = 0.3  # seconds between batches

STORAGE_MODES = ("auto", "file", "memory")


def validate_config() -> None:
    """Validate configuration values."""
    if HTTP_TIMEOUT <= 0:
        raise ConfigError("Invalid HTTP timeout")

    if LYRICS_CACHE_TTL <= 0 or DICTIONARY_CACHE_TTL <= 0:
        raise ConfigError("Cache TTL values must be positive")

    if DICTIONARY_BATCH_SIZE <= 0:
        raise ConfigError("Invalid dictionary batch size")

    if get_dictionary_storage_mode() not in STORAGE_MODES:
        raise ConfigError(
            f"Invalid dictionary storage mode. Use one of: {', '.join(STORAGE_MODES)}"
        )


def get_cache_dir() -> Path:
    """Get cache directory from environment or default."""
    cache_dir = os.getenv("KASHIBOTTO_CACHE_DIR")
    if cache_dir:
        return Path(cache_dir)
    return DEFAULT_CACHE_DIR


def get_dictionary_cache_path() -> Path:
    """Get path of the persistent dictionary cache file."""
    return get_cache_dir() / DICTIONARY_CACHE_FILENAME


def get_dictionary_storage_mode() -> str:
    """Get dictionary storage backend: 'file', 'memory' or 'auto'."""
    return os.getenv("KASHIBOTTO_DICTIONARY_STORAGE", "auto").strip().lower()


def get_genius_access_token() -> Optional[str]:
    """Get Genius API access token, if one is configured."""
    token = os.getenv("KASHIBOTTO_GENIUS_ACCESS_TOKEN") or os.getenv(
        "GENIUS_ACCESS_TOKEN"
    )
    return token.strip() if token and token.strip() else None


# Validate config on import
validate_config()
