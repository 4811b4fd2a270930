"""Custom exceptions for Kashibotto."""


class KashibottoError(Exception):
    """Base exception for Kashibotto."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        if code:
            self.code = code

class InvalidInputError(KashibottoError):
    """Required text is empty or missing."""
    code = "INVALID_INPUT"

class NotFoundError(KashibottoError):
    """No lyrics or dictionary result after exhausting all strategies."""
    code = "LYRICS_NOT_FOUND"

class SegmentationError(KashibottoError):
    """Segmenter produced nothing usable for non-empty input."""
    code = "SEGMENTATION_FAILED"

class ProcessingError(KashibottoError):
    """Unexpected failure during enrichment."""

    code = "PROCESSING_FAILED"

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause

class CacheError(KashibottoError):
    """Error with cache operations."""
    code = "CACHE_ERROR"

class ConfigError(KashibottoError):
    """Invalid configuration values."""
    code = "CONFIG_ERROR"

class ProviderError(KashibottoError):
    """A remote provider failed or returned an unusable response."""
    code = "PROVIDER_ERROR"

class RateLimitedError(ProviderError):
    """A remote provider answered with a rate-limit response."""
    code = "RATE_LIMIT_EXCEEDED"

class LyricsUnavailableError(ProviderError):
    """A lyrics page was reachable but no lyrics could be read from it."""
    code = "LYRICS_UNAVAILABLE"
