"""Process-local topic cache with TTL expiry and oldest-first eviction."""

from __future__ import annotations

import hashlib
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from instructly_classifier.domain.interfaces import ITopicCache
from instructly_classifier.domain.models import AnalysisType, Topic

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 50


def topic_cache_key(topic: str, analysis_type: AnalysisType | str) -> str:
    """Stable key derived from the literal topic text and analysis type."""

    kind = AnalysisType(analysis_type).value
    digest = hashlib.sha256(f"{topic}-{kind}".encode("utf-8")).hexdigest()
    return f"ai:analysis:{digest}:{kind}"


@dataclass(frozen=True)
class CacheEntry:
    topic: Topic
    created_at: float


class InMemoryTopicCache(ITopicCache):
    """Map-backed cache; safe to share between threads and coroutines."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than zero")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Topic]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at > self._ttl:
                del self._entries[key]
                return None
            return entry.topic

    def set(self, key: str, topic: Topic) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(topic=topic, created_at=self._clock())
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
