"""
Shared crawl state: the visited-URL set and the word count accumulator.

Both structures are lock-striped: keys are spread over a fixed number of
shards, each guarded by its own lock, so threads working on unrelated URLs
or words rarely contend and no lock is ever held across a page fetch.
"""

import threading
from typing import Dict, List, Mapping, Set

DEFAULT_STRIPES = 32


class _Striped:
    """Base for hash-sharded structures."""

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        if stripes < 1:
            raise ValueError("stripes must be at least 1")
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(stripes)]

    def _index(self, key: str) -> int:
        return hash(key) % len(self._locks)


class VisitedSet(_Striped):
    """Set of URLs claimed for processing in one crawl run."""

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        super().__init__(stripes)
        self._shards: List[Set[str]] = [set() for _ in range(stripes)]

    def claim(self, url: str) -> bool:
        """
        Atomically insert ``url`` if absent.

        Returns True for exactly one caller per URL; every later (or
        concurrent, losing) caller gets False.
        """
        i = self._index(url)
        with self._locks[i]:
            shard = self._shards[i]
            if url in shard:
                return False
            shard.add(url)
            return True

    def __contains__(self, url: str) -> bool:
        i = self._index(url)
        with self._locks[i]:
            return url in self._shards[i]

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total

    def snapshot(self) -> Set[str]:
        urls: Set[str] = set()
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                urls.update(shard)
        return urls


class WordCountAccumulator(_Striped):
    """Running per-word totals across all counted pages."""

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        super().__init__(stripes)
        self._shards: List[Dict[str, int]] = [{} for _ in range(stripes)]

    def add(self, word: str, count: int):
        i = self._index(word)
        with self._locks[i]:
            shard = self._shards[i]
            shard[word] = shard.get(word, 0) + count

    def merge(self, counts: Mapping[str, int]):
        """Add every (word, count) pair of one page."""
        for word, count in counts.items():
            self.add(word, count)

    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total

    def snapshot(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                counts.update(shard)
        return counts
