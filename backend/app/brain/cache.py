"""
In-memory response cache.

Entries are keyed by (intent, lowercased query). A lookup first tries the exact
key, then the first same-intent entry whose query has word-level Jaccard similarity
of at least 0.8 with the new query; similar hits come back with 90% of the
stored confidence. Entries expire after the TTL and are purged lazily on reads;
a full cache evicts its oldest 20% before inserting.
"""

from __future__ import annotations

import copy
import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Iterable

from backend.app.brain.text import cache_key_text, jaccard
from backend.app.observability.logging import log_event

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 1000
SIMILARITY_THRESHOLD = 0.8
SIMILAR_CONFIDENCE_FACTOR = 0.9
EVICTION_FRACTION = 0.2


@dataclass
class CacheEntry:
    query: str
    intent: str
    response: dict[str, Any]
    confidence: float
    stored_at: float


class ResponseCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[tuple[str, str], CacheEntry] = {}
        self._hits = 0
        self._similar_hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, query: str, intent: str) -> dict[str, Any] | None:
        """Return a copy of the cached payload annotated with `cached`, or None."""
        key = (str(intent), cache_key_text(query))
        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            entry = self._entries.get(key)
            if entry is not None:
                self._hits += 1
                return self._annotate(entry, "_cached", entry.confidence)

            # First qualifying entry in insertion order wins, not the closest one.
            for candidate in self._entries.values():
                if candidate.intent != key[0]:
                    continue
                score = jaccard(key[1], candidate.query)
                if score >= SIMILARITY_THRESHOLD:
                    self._similar_hits += 1
                    log_event("cache_similar_hit", level="debug", intent=key[0], similarity=round(score, 3))
                    return self._annotate(candidate, "_similar", candidate.confidence * SIMILAR_CONFIDENCE_FACTOR)

            self._misses += 1
            return None

    def put(self, query: str, intent: str, response: dict[str, Any], confidence: float) -> None:
        key = (str(intent), cache_key_text(query))
        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict_oldest()
            self._entries[key] = CacheEntry(
                query=key[1],
                intent=key[0],
                response=copy.deepcopy(response),
                confidence=float(confidence),
                stored_at=now,
            )

    def warmup(self, intent: str, queries: Iterable[str], responder: Callable[[str], dict[str, Any] | None]) -> int:
        """Pre-fill entries for `queries` using `responder`; returns how many were stored."""
        stored = 0
        for query in queries:
            payload = responder(query)
            if not payload:
                continue
            self.put(query, intent, payload, float(payload.get("confidence", 0.8)))
            stored += 1
        log_event("cache_warmup", intent=intent, stored=stored)
        return stored

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = self._similar_hits = self._misses = self._evictions = 0

    def stats(self) -> dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._similar_hits + self._misses
            return {
                "size": len(self._entries),
                "maxSize": self.max_entries,
                "ttlSeconds": self.ttl_seconds,
                "hits": self._hits,
                "similarHits": self._similar_hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hitRate": round((self._hits + self._similar_hits) / lookups, 4) if lookups else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _annotate(self, entry: CacheEntry, suffix: str, confidence: float) -> dict[str, Any]:
        payload = copy.deepcopy(entry.response)
        payload["source"] = f"{payload.get('source') or 'direct'}{suffix}"
        payload["confidence"] = confidence
        payload["cached"] = True
        return payload

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now - e.stored_at > self.ttl_seconds]
        for k in expired:
            del self._entries[k]

    def _evict_oldest(self) -> None:
        count = max(1, math.floor(self.max_entries * EVICTION_FRACTION))
        oldest = sorted(self._entries.items(), key=lambda item: item[1].stored_at)[:count]
        for k, _ in oldest:
            del self._entries[k]
        self._evictions += len(oldest)
        log_event("cache_evicted", level="debug", evicted=len(oldest), remaining=len(self._entries))
