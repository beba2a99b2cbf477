from __future__ import annotations
import logging
import threading
from typing import Any, Dict

from .index import build_index
from .models import CacheStats, SearchIndex, SEARCH_FIELDS

log = logging.getLogger(__name__)

_MASK32 = 0xFFFFFFFF


def _field_text(record: Any, name: str) -> str:
    value = getattr(record, name, None)
    return value if isinstance(value, str) else ""


class IndexCache:
    """
    Memoizes SearchIndex per contact, keyed by "<id>:<fingerprint>".

    A miss builds the index and evicts every other entry for the same id, so at
    most one version of a contact is cached. Entries otherwise live until
    reset(). Safe to share between request threads.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, SearchIndex] = {}
        self._current: Dict[str, str] = {}   # contact id -> live key
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @staticmethod
    def fingerprint(record: Any) -> int:
        """32-bit rolling hash (h*31 + c) of name|email|company|phone."""
        data = "|".join(_field_text(record, f) for f in SEARCH_FIELDS)
        h = 0
        for ch in data:
            h = (h * 31 + ord(ch)) & _MASK32
        return h

    def key_for(self, record: Any) -> str:
        return f"{getattr(record, 'id', '')}:{self.fingerprint(record)}"

    def get(self, record: Any) -> SearchIndex:
        key = self.key_for(record)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._hits += 1
                return cached

            index = build_index(record)
            self._entries[key] = index
            self._misses += 1

            # drop the previous version of this contact, if any
            cid = str(getattr(record, "id", ""))
            stale = self._current.get(cid)
            self._current[cid] = key
            if stale is not None and stale != key:
                self._entries.pop(stale, None)
                self._evictions += 1
                log.debug("index cache: %s superseded %s", key, stale)
            return index

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
            self._current.clear()
            self._hits = self._misses = self._evictions = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                keys=list(self._entries),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def __len__(self) -> int:
        return len(self._entries)


# Process-wide default used when a caller does not own a cache.
# Lives for the whole process; reset it with clear_index_cache().
_default_cache = IndexCache()


def default_cache() -> IndexCache:
    return _default_cache


def get_memoized_index(record: Any) -> SearchIndex:
    return _default_cache.get(record)


def clear_index_cache() -> None:
    _default_cache.reset()


def get_cache_stats() -> CacheStats:
    return _default_cache.stats()
