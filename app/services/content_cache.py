"""
Process-lifetime cache for generated content (answers keyed by question id, guidance keyed by
alert fingerprint). Entries older than the TTL are treated as misses and overwritten by the
next put; sweep_expired() drops them on demand.
Writes are unlocked, last writer wins: values are pure functions of Gemini output.
"""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    content: Any
    generated_at: float
    model: str | None = None


class ContentCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Fresh content for key, or None on miss/stale."""

    @abstractmethod
    def put(self, key: str, content: Any, model: str | None = None) -> None:
        ...

    @abstractmethod
    def sweep_expired(self) -> int:
        """Remove stale entries; returns how many were removed."""

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...


class TTLContentCache(ContentCache):
    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.generated_at < self.ttl_seconds

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry, self._clock()):
            return None
        return entry.content

    def get_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def put(self, key: str, content: Any, model: str | None = None) -> None:
        self._entries[key] = CacheEntry(content=content, generated_at=self._clock(), model=model)

    def sweep_expired(self) -> int:
        now = self._clock()
        stale = [k for k, e in list(self._entries.items()) if not self._is_fresh(e, now)]
        for k in stale:
            self._entries.pop(k, None)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
