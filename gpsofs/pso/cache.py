"""
Fitness memoization keyed by bit vector content.
Entries are never evicted; stored positions are clones, never live particle storage.
"""
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from gpsofs.pso.bitvector import BitVector


@dataclass(frozen=True)
class CacheEntry:
    position: BitVector
    objective: float
    feature_count: int


class FitnessCache:
    def __init__(self) -> None:
        self._store: Dict[Tuple[int, bytes], CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, position: BitVector) -> bool:
        return position.key() in self._store

    def lookup(self, position: BitVector) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._store.get(position.key())
            if entry is None:
                self.misses += 1
            else:
                self.hits += 1
            return entry

    def insert(self, position: BitVector, objective: float) -> CacheEntry:
        """Store a clone of `position`; a concurrent duplicate keeps the first entry."""
        clone = position.clone()
        entry = CacheEntry(clone, float(objective), clone.pop_count())
        with self._lock:
            return self._store.setdefault(clone.key(), entry)

    def stats(self) -> Dict[str, float]:
        total = self.hits + self.misses
        return {
            "entries": len(self._store),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total > 0 else 0.0,
        }
