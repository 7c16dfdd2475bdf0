"""
Resolution Cache Implementations.

In-memory caching of resolver results so that the many range requests a
seeking client issues do not each re-run extraction.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Optional, Tuple
from datetime import datetime, timedelta

from ..domain.interfaces import ResolutionCache
from ..domain.models import ResolvedMedia


class InMemoryResolutionCache(ResolutionCache):
    """In-memory TTL cache of resolved media"""

    def __init__(self, max_entries: int = 64, max_age_minutes: int = 30):
        self.max_entries = max_entries
        self.max_age = timedelta(minutes=max_age_minutes)
        self.logger = logging.getLogger(__name__)

        # Cache storage: {identifier: (resolved, timestamp)}, oldest first
        self._cache: "OrderedDict[str, Tuple[ResolvedMedia, datetime]]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, identifier: str) -> Optional[ResolvedMedia]:
        """Get cached resolution"""
        async with self._lock:
            if identifier in self._cache:
                resolved, timestamp = self._cache[identifier]

                if self._now() - timestamp <= self.max_age:
                    self.logger.debug(f"Resolution cache hit for {identifier}")
                    return resolved
                else:
                    del self._cache[identifier]
                    self.logger.debug(f"Resolution cache entry expired for {identifier}")

            return None

    async def put(self, resolved: ResolvedMedia) -> None:
        """Cache a resolution"""
        async with self._lock:
            self._cache.pop(resolved.identifier, None)

            while len(self._cache) >= self.max_entries and self._cache:
                evicted, _ = self._cache.popitem(last=False)
                self.logger.debug(f"Evicted oldest resolution cache entry: {evicted}")

            self._cache[resolved.identifier] = (resolved, self._now())

    async def invalidate(self, identifier: str) -> None:
        """Drop cached resolution"""
        async with self._lock:
            if self._cache.pop(identifier, None) is not None:
                self.logger.info(f"Invalidated resolution cache for {identifier}")

    async def cleanup(self) -> int:
        """Remove expired entries"""
        async with self._lock:
            current_time = self._now()
            expired = [key for key, (_, timestamp) in self._cache.items() if current_time - timestamp > self.max_age]

            for key in expired:
                del self._cache[key]

        if expired:
            self.logger.info(f"Resolution cache cleanup removed {len(expired)} entries")

        return len(expired)

    def _now(self) -> datetime:
        return datetime.now()

    def __len__(self) -> int:
        return len(self._cache)


class NoOpResolutionCache(ResolutionCache):
    """Cache that never stores anything"""

    async def get(self, identifier: str) -> Optional[ResolvedMedia]:
        return None

    async def put(self, resolved: ResolvedMedia) -> None:
        pass

    async def invalidate(self, identifier: str) -> None:
        pass

    async def cleanup(self) -> int:
        return 0
