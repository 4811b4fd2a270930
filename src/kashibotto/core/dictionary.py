"""Dictionary lookups against Jisho with throttling, retries and a persistent cache."""

import json
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests  # type: ignore[import-untyped]

from ..config import (
    DICTIONARY_BATCH_DELAY,
    DICTIONARY_BATCH_SIZE,
    DICTIONARY_CACHE_TTL,
    DICTIONARY_MAX_ATTEMPTS,
    DICTIONARY_MIN_REQUEST_INTERVAL,
    DICTIONARY_RETRY_DELAY,
    DICTIONARY_USER_AGENT,
    HTTP_TIMEOUT,
)
from ..exceptions import CacheError, ProviderError, RateLimitedError
from ..utils.cache import JsonFileStorage, MemoryStorage, TTLCache
from ..utils.logging import get_logger
from ..utils.retry import RetryPolicy
from .fetch import fetch_json
from .japanese import contains_japanese
from .models import CacheEntry, DictionaryEntry

logger = get_logger(__name__)

JISHO_SEARCH_URL = "https://jisho.org/api/v1/search/words"

RETRYABLE_ERRORS = (requests.exceptions.RequestException, ProviderError, ValueError)


class JishoClient:
    """Looks up a single word with the Jisho search API (first result, first sense)."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {"User-Agent": DICTIONARY_USER_AGENT, "Accept": "application/json"}

    def search(self, word: str) -> Optional[DictionaryEntry]:
        """
        Returns:
            DictionaryEntry for the word, or None when Jisho has no result

        Raises:
            RateLimitedError: Jisho answered 429
            requests.RequestException: network or HTTP failure
        """
        data = fetch_json(
            JISHO_SEARCH_URL,
            params={"keyword": word},
            headers=self.headers,
            timeout=self.timeout,
            session=self.session,
        )
        results = data.get("data") or []
        if not results:
            return None

        first = results[0]
        japanese = (first.get("japanese") or [{}])[0]
        sense = (first.get("senses") or [{}])[0]
        definitions = [d for d in sense.get("english_definitions") or [] if d]
        if not definitions:
            return None

        return DictionaryEntry(
            word=word,
            definitions=definitions,
            parts_of_speech=list(sense.get("parts_of_speech") or []),
            readings=[japanese.get("reading") or japanese.get("word") or word],
        )


def _backoff_scale(error: BaseException) -> float:
    # Rate limits back off at full delay, other transient failures at half
    return 1.0 if isinstance(error, RateLimitedError) else 0.5


def default_dictionary_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=DICTIONARY_MAX_ATTEMPTS,
        base_delay=DICTIONARY_RETRY_DELAY,
    )


class DictionaryCache:
    """Cached, throttled dictionary lookups.

    Entries are keyed by exact surface string. Misses after exhausting retries
    are cached as fallback entries so they are not retried until they expire.
    Every write is persisted through the storage backend; storage failures are
    logged and do not affect lookups.

    Args:
        provider: Object with ``search(word) -> DictionaryEntry | None``
        storage: Snapshot storage (JsonFileStorage or MemoryStorage)
        ttl: Entry lifetime in seconds
        min_request_interval: Minimum spacing between remote requests
        retry_policy: Policy for remote lookups
        batch_size: Concurrent lookups per batch in lookup_batch
        batch_delay: Pause between batches in seconds
        clock: Time source for entry expiry
    """

    def __init__(
        self,
        provider: Any,
        storage: Optional[Any] = None,
        ttl: float = DICTIONARY_CACHE_TTL,
        min_request_interval: float = DICTIONARY_MIN_REQUEST_INTERVAL,
        retry_policy: Optional[RetryPolicy] = None,
        batch_size: int = DICTIONARY_BATCH_SIZE,
        batch_delay: float = DICTIONARY_BATCH_DELAY,
        clock: Callable[[], float] = time.time,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.provider = provider
        self.storage = storage if storage is not None else MemoryStorage()
        self.ttl = ttl
        self.min_request_interval = min_request_interval
        self.retry_policy = retry_policy or default_dictionary_retry_policy()
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._clock = clock
        self._entries: TTLCache[DictionaryEntry] = TTLCache(ttl, clock=clock)
        self._throttle_lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._last_request_at: Optional[float] = None
        self.last_updated: Optional[float] = None
        self.load()

    # ----------------------
    # Cache operations
    # ----------------------
    def get(self, word: str) -> Optional[DictionaryEntry]:
        return self._entries.get(word)

    def set(self, word: str, entry: DictionaryEntry) -> DictionaryEntry:
        """Store an entry stamped with the current time and persist the cache.

        Returns the stored entry.
        """
        stamped = replace(entry, cached_at=self._clock())
        self._entries.set(word, stamped)
        self.last_updated = stamped.cached_at
        self.save()
        return stamped

    def load(self) -> int:
        """Load unexpired entries from storage; returns how many were loaded."""
        snapshot = self.storage.load()
        now = self._clock()
        loaded = 0
        for word, data in (snapshot.get("entries") or {}).items():
            try:
                entry = DictionaryEntry.from_dict(data)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed dictionary cache entry {word!r}: {e}")
                continue
            expires_at = entry.cached_at + self.ttl
            if now >= expires_at:
                continue
            self._entries.put_entry(word, CacheEntry(value=entry, expires_at=expires_at))
            loaded += 1
        self.last_updated = snapshot.get("last_updated")
        logger.debug(f"Dictionary cache ready with {loaded} entries")
        return loaded

    def snapshot(self) -> Dict[str, Any]:
        return {
            "entries": {word: e.value.to_dict() for word, e in self._entries.items()},
            "last_updated": self.last_updated or self._clock(),
        }

    def save(self) -> bool:
        """Persist the cache; returns False when the storage backend failed."""
        with self._save_lock:
            try:
                self.storage.save(self.snapshot())
            except CacheError as e:
                logger.warning(str(e))
                return False
        return True

    def clear(self) -> None:
        self._entries.clear()
        self.last_updated = self._clock()
        self.save()
        logger.info("Dictionary cache cleared")

    def stats(self) -> Dict[str, Any]:
        snapshot = self.snapshot()
        return {
            "entry_count": len(snapshot["entries"]),
            "last_updated": self.last_updated,
            "cache_size": len(json.dumps(snapshot, ensure_ascii=False)),
            "storage": self.storage.describe(),
        }

    @staticmethod
    def format_definitions(
        entry: Optional[DictionaryEntry], limit: int = 2
    ) -> Optional[List[str]]:
        """Top definitions for display, or None without an entry."""
        if entry is None:
            return None
        return list(entry.definitions[:limit])

    # ----------------------
    # Lookups
    # ----------------------
    def lookup(self, word: str) -> Optional[DictionaryEntry]:
        """
        Resolve one word.

        Returns None for words without Japanese script. Transient provider
        failures are retried; when retries are exhausted or the provider has
        no result, a fallback entry is cached and returned.
        """
        if not word or not contains_japanese(word):
            return None

        cached = self.get(word)
        if cached is not None:
            return cached

        return self.set(word, self._resolve(word))

    def lookup_batch(self, words: Sequence[str]) -> List[Optional[DictionaryEntry]]:
        """
        Resolve many words; the result has the same length and order as ``words``.

        Cache misses are looked up concurrently in batches of ``batch_size``
        with ``batch_delay`` between batches. A word whose lookup fails
        unexpectedly yields None.
        """
        results: List[Optional[DictionaryEntry]] = [None] * len(words)
        misses: Dict[str, List[int]] = {}

        for i, word in enumerate(words):
            if not word or not contains_japanese(word):
                continue
            cached = self.get(word)
            if cached is not None:
                results[i] = cached
            else:
                misses.setdefault(word, []).append(i)

        pending = list(misses)
        if not pending:
            return results

        logger.debug(
            f"Dictionary batch: {len(words)} words, {len(pending)} to look up"
        )
        for start in range(0, len(pending), self.batch_size):
            if start:
                time.sleep(self.batch_delay)
            batch = pending[start : start + self.batch_size]
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = {executor.submit(self.lookup, word): word for word in batch}
                for future, word in futures.items():
                    try:
                        entry = future.result()
                    except Exception as e:
                        logger.warning(f"Dictionary lookup failed for {word!r}: {e}")
                        entry = None
                    for i in misses[word]:
                        results[i] = entry

        return results

    def _throttle(self) -> None:
        with self._throttle_lock:
            if self._last_request_at is not None:
                wait = self.min_request_interval - (time.monotonic() - self._last_request_at)
                if wait > 0:
                    time.sleep(wait)
            self._last_request_at = time.monotonic()

    def _request(self, word: str) -> Optional[DictionaryEntry]:
        self._throttle()
        return self.provider.search(word)

    def _resolve(self, word: str) -> DictionaryEntry:
        try:
            found = self.retry_policy.call(
                self._request,
                word,
                retry_on=RETRYABLE_ERRORS,
                delay_scale=_backoff_scale,
            )
        except RETRYABLE_ERRORS as e:
            logger.warning(f"Dictionary lookup gave up on {word!r}: {e}")
            return DictionaryEntry.fallback(word)

        if found is None:
            logger.debug(f"No dictionary result for {word!r}")
            return DictionaryEntry.fallback(word)
        return found


def create_storage(mode: str, path: Path):
    """
    Build the snapshot storage for a mode: 'file', 'memory' or 'auto'.

    'auto' uses the file when its directory is writable, else memory.
    """
    if mode == "memory":
        return MemoryStorage()
    if mode == "file":
        return JsonFileStorage(path)

    directory = Path(path).parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cache directory {directory} unavailable ({e}), using memory")
        return MemoryStorage()
    if not os.access(directory, os.W_OK):
        logger.warning(f"Cache directory {directory} is not writable, using memory")
        return MemoryStorage()
    return JsonFileStorage(path)
