# pixel_sampler/core/image_cache.py

import itertools
import logging
import threading
from typing import Dict, List, Optional

from pixel_sampler.config import DEFAULT_MAX_ENTRIES, EVICTION_POLICIES, EVICTION_POLICY_LRU
from pixel_sampler.domain.models import CacheEntry, NormalizedImage

logger = logging.getLogger(__name__)


class ImageCache:
    """
    Bounded URI -> NormalizedImage store with deterministic eviction.

    Every put stamps the entry with a fresh, strictly increasing sequence
    number. When a new key is inserted at capacity, the single entry with the
    smallest sequence is evicted. Under the "lru" policy a hit also re-stamps
    the entry, so the evicted one is the least recently used; under
    "insertion" only puts stamp, so it is the oldest inserted.

    All operations hold one lock, so eviction and insertion are atomic with
    respect to each other.

    Attributes:
        max_entries (int): Capacity in entries.
        policy (str): "lru" or "insertion".
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, policy: str = EVICTION_POLICY_LRU):
        if not isinstance(max_entries, int) or max_entries <= 0:
            raise ValueError("max_entries must be a positive integer.")
        if policy not in EVICTION_POLICIES:
            raise ValueError(f"policy must be one of {EVICTION_POLICIES}, got {policy!r}.")
        self.max_entries = max_entries
        self.policy = policy
        self._entries: Dict[str, CacheEntry] = {}
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        logger.debug(f"ImageCache initialized: max_entries={max_entries}, policy={policy}")

    def get(self, uri: str) -> Optional[NormalizedImage]:
        with self._lock:
            entry = self._entries.get(uri)
            if entry is None:
                self._misses += 1
                logger.debug(f"Cache miss for '{uri}'")
                return None
            self._hits += 1
            if self.policy == EVICTION_POLICY_LRU:
                self._entries[uri] = CacheEntry(key=uri, image=entry.image, sequence=next(self._sequence))
            logger.debug(f"Cache hit for '{uri}'")
            return entry.image

    def put(self, uri: str, image: NormalizedImage) -> None:
        with self._lock:
            if uri not in self._entries and len(self._entries) >= self.max_entries:
                self._evict_oldest()
            self._entries[uri] = CacheEntry(key=uri, image=image, sequence=next(self._sequence))

    def _evict_oldest(self) -> None:
        """Caller holds the lock."""
        victim = min(self._entries.values(), key=lambda e: e.sequence)
        del self._entries[victim.key]
        self._evictions += 1
        logger.debug(f"Evicted '{victim.key}' (sequence {victim.sequence})")

    def keys(self) -> List[str]:
        """Cached URIs in eviction order, next victim first."""
        with self._lock:
            return [e.key for e in sorted(self._entries.values(), key=lambda e: e.sequence)]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, uri: str) -> bool:
        with self._lock:
            return uri in self._entries
