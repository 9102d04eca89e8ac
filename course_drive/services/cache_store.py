"""Thread-safe in-memory TTL cache for drive listings."""

import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

STRUCTURE_NAMESPACE = 'structure'
FOLDER_NAMESPACE = 'folder'


def structure_key(root_id):
    return f"{STRUCTURE_NAMESPACE}:{root_id}"


def folder_key(folder_id):
    return f"{FOLDER_NAMESPACE}:{folder_id}"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    nodes: Tuple
    captured_at: float
    generation: int

    def age(self, now):
        return max(0.0, now - self.captured_at)


class TreeCache:
    """Key -> CacheEntry map with a fixed time-to-live.

    Entries are replaced as whole units under a lock. ``clear`` bumps a
    generation counter; writes tagged with an older generation are dropped so
    a fetch that started before a clear cannot repopulate the cache.
    Stale entries are dropped when read and swept on every write.
    """

    def __init__(self, ttl_seconds, clock=None):
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock or time.monotonic
        self._entries = {}
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self):
        with self._lock:
            return self._generation

    def now(self):
        return self._clock()

    def is_fresh(self, entry: CacheEntry, now=None) -> bool:
        now = self._clock() if now is None else now
        return entry.age(now) < self.ttl_seconds

    def get(self, key) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self.is_fresh(entry, now):
                del self._entries[key]
                return None
            return entry

    def put(self, key, nodes, generation=None) -> Optional[CacheEntry]:
        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            now = self._clock()
            self._evict_stale(now)
            entry = CacheEntry(
                key=key,
                nodes=tuple(nodes),
                captured_at=now,
                generation=self._generation,
            )
            self._entries[key] = entry
            return entry

    def _evict_stale(self, now):
        for key in [key for key, entry in self._entries.items() if not self.is_fresh(entry, now)]:
            del self._entries[key]

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self._generation += 1
            return removed

    def stats(self):
        now = self._clock()
        with self._lock:
            entries = list(self._entries.values())
            generation = self._generation
        fresh = sum(1 for entry in entries if self.is_fresh(entry, now))
        return {
            'entries': len(entries),
            'fresh_entries': fresh,
            'ttl_seconds': self.ttl_seconds,
            'generation': generation,
        }
