"""Dedup caches with time-to-live semantics."""

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Optional

from hamspot.schemas import DedupKey


def format_key(key: DedupKey) -> str:
    """Render a dedup key as ``CALLSIGN-mode-frequency``."""
    callsign, mode, frequency = key
    return f"{callsign.upper()}-{mode.lower()}-{frequency}"


class DedupCache(ABC):
    """Answers "have I already notified about this event recently?"."""

    def __init__(self, ttl: float):
        self.ttl = ttl

    @abstractmethod
    async def seen_recently(self, key: DedupKey) -> bool:
        """True iff ``mark_seen`` was called for ``key`` less than its ttl ago."""
        pass

    @abstractmethod
    async def mark_seen(self, key: DedupKey, ttl: Optional[float] = None) -> None:
        """Record ``key`` as notified, expiring ``ttl`` seconds from now."""
        pass

    @abstractmethod
    async def size(self) -> int:
        pass


class MemoryDedupCache(DedupCache):
    """
    In-process dedup cache.

    Entries are kept in expiry order, re-sorted when a write uses a shorter
    ttl, so the sweep on every write can stop at the first live entry.
    Lookups also check expiry, so an entry that outlived its ttl is never
    reported even before it is swept.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.time):
        super().__init__(ttl)
        self._clock = clock
        self._entries: OrderedDict[str, float] = OrderedDict()
        self._lock = threading.Lock()

    def _cleanup_expired(self, now: float) -> None:
        expired = []
        for key, expires_at in self._entries.items():
            if expires_at > now:
                break
            expired.append(key)
        for key in expired:
            del self._entries[key]

    async def seen_recently(self, key: DedupKey) -> bool:
        name = format_key(key)
        with self._lock:
            expires_at = self._entries.get(name)
            if expires_at is None:
                return False
            if expires_at <= self._clock():
                del self._entries[name]
                return False
            return True

    async def mark_seen(self, key: DedupKey, ttl: Optional[float] = None) -> None:
        name = format_key(key)
        ttl = self.ttl if ttl is None else ttl
        with self._lock:
            now = self._clock()
            self._cleanup_expired(now)
            self._entries.pop(name, None)
            expires_at = now + ttl
            latest = next(reversed(self._entries.values()), None)
            self._entries[name] = expires_at
            # A shorter ttl than the newest entry breaks expiry order
            if latest is not None and expires_at < latest:
                self._entries = OrderedDict(sorted(self._entries.items(), key=lambda item: item[1]))

    async def size(self) -> int:
        with self._lock:
            self._cleanup_expired(self._clock())
            return len(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisDedupCache(DedupCache):
    """Dedup cache backed by Redis keys with native expiry."""

    def __init__(self, redis, ttl: float, prefix: str = "spot:"):
        super().__init__(ttl)
        self._redis = redis
        self._prefix = prefix

    async def seen_recently(self, key: DedupKey) -> bool:
        return bool(await self._redis.exists(self._prefix + format_key(key)))

    async def mark_seen(self, key: DedupKey, ttl: Optional[float] = None) -> None:
        ttl = self.ttl if ttl is None else ttl
        # px keeps sub-second ttls meaningful
        await self._redis.set(self._prefix + format_key(key), 1, px=max(1, int(ttl * 1000)))

    async def size(self) -> int:
        count = 0
        async for _ in self._redis.scan_iter(match=self._prefix + "*"):
            count += 1
        return count
