"""
In-memory response cache with per-entry TTL.

Entries expire lazily on read and are also removed by a background sweep
task that runs on a fixed interval while the application is up.
"""
import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    key: str
    payload: Any
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


class ResponseCache:
    """Maps a request URL to the JSON body that was sent for it."""

    def __init__(self, default_ttl: float = 300, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._sweeper: Optional[asyncio.Task] = None
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on a miss or an expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            self.misses += 1
            return None
        self.hits += 1
        return entry.payload

    def set(self, key: str, payload: Any, ttl: Optional[float] = None) -> None:
        self._entries[key] = CacheEntry(
            key=key,
            payload=payload,
            created_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def clear_matching(self, pattern: str) -> int:
        """Delete every entry whose key contains pattern."""
        doomed = [key for key in self._entries if pattern in key]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def sweep(self) -> int:
        """Remove all expired entries and return how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Swept expired cache entries", removed=len(expired), remaining=len(self._entries))
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        return {
            "entries": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "sweeper_running": self.is_sweeping,
            "cache_ages": {key: int(now - entry.created_at) for key, entry in self._entries.items()},
        }

    # Lifecycle

    @property
    def is_sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start(self, interval: float) -> None:
        """Start the periodic sweep on the running event loop."""
        if self.is_sweeping:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever(interval))
        logger.info("Cache sweeper started", interval=interval)

    async def stop(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("Cache sweeper stopped")

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.sweep()
