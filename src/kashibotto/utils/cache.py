"""Cache management system: TTL maps and snapshot storage backends."""

import json
import os
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

from ..core.models import CacheEntry
from ..exceptions import CacheError
from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Thread-safe in-process map whose entries expire after a fixed TTL.

    Expired entries are treated as absent and evicted lazily on read.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.time):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug(f"Evicted expired cache entry {key!r}")
                return None
            return entry.value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + (ttl if ttl is not None else self.ttl)
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

    def put_entry(self, key: str, entry: CacheEntry[T]) -> None:
        """Insert a pre-built entry, keeping its expiry."""
        with self._lock:
            self._entries[key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def items(self) -> Iterator[Tuple[str, CacheEntry[T]]]:
        """Snapshot of live (unexpired) entries."""
        now = self._clock()
        with self._lock:
            live = [(k, e) for k, e in self._entries.items() if not e.is_expired(now)]
        return iter(live)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ----------------------
# Snapshot storage backends
# ----------------------
def empty_snapshot() -> Dict[str, Any]:
    return {"entries": {}, "last_updated": time.time()}


class MemoryStorage:
    """Keeps the snapshot in process memory; lost on restart."""

    def __init__(self):
        self._snapshot = empty_snapshot()

    def load(self) -> Dict[str, Any]:
        logger.info("Using memory-only storage for dictionary cache")
        return json.loads(json.dumps(self._snapshot))

    def save(self, snapshot: Dict[str, Any]) -> None:
        self._snapshot = json.loads(json.dumps(snapshot, ensure_ascii=False))
        logger.debug(
            f"Updated memory-only dictionary cache ({len(snapshot.get('entries', {}))} entries)"
        )

    def describe(self) -> str:
        return "memory"


class JsonFileStorage:
    """Persists the snapshot as a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.info("No existing dictionary cache found, starting fresh")
            return empty_snapshot()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                snapshot = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load dictionary cache from {self.path}: {e}")
            return empty_snapshot()

        if not isinstance(snapshot, dict) or not isinstance(snapshot.get("entries"), dict):
            logger.warning(f"Ignoring malformed dictionary cache file {self.path}")
            return empty_snapshot()

        logger.info(
            f"Loaded dictionary cache from file ({len(snapshot['entries'])} entries)"
        )
        return snapshot

    def save(self, snapshot: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
            logger.debug(f"Saved dictionary cache to {self.path}")
        except (OSError, TypeError, ValueError) as e:
            raise CacheError(f"Failed to save dictionary cache: {e}")

    def describe(self) -> str:
        return str(self.path)
