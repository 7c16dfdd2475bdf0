"""
Video Domain Interfaces.

Abstract interfaces that define contracts for resolution and upstream reads.
These interfaces allow dependency inversion - domain logic doesn't depend on
yt-dlp or httpx, and tests substitute fakes.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, AsyncIterator, Optional

from .models import FormatDescriptor, ResolvedMedia, StreamRange


class SourceResolver(ABC):
    """Resolves an identifier into metadata and one combined format"""

    @abstractmethod
    async def resolve(self, identifier: str) -> ResolvedMedia:
        """
        Resolve an identifier.

        Raises ResolutionFailure on network errors, rejected identifiers, or
        when no combined audio+video format exists.
        """
        pass


class ByteSource(ABC):
    """Upstream byte source for a selected format"""

    @abstractmethod
    def open(
        self,
        descriptor: FormatDescriptor,
        byte_range: Optional[StreamRange] = None
    ) -> AsyncContextManager[AsyncIterator[bytes]]:
        """
        Open the upstream, bounded to ``byte_range`` when given.

        Entering the context raises StreamTransportFailure if the upstream
        cannot be opened. Iterating raises StreamTransportFailure if it drops
        mid-stream. Leaving the context releases the upstream connection.
        """
        pass

    async def close(self) -> None:
        """Release pooled resources"""
        return None


class ResolutionCache(ABC):
    """Cache of resolver results shared across requests"""

    @abstractmethod
    async def get(self, identifier: str) -> Optional[ResolvedMedia]:
        """Get a cached resolution"""
        pass

    @abstractmethod
    async def put(self, resolved: ResolvedMedia) -> None:
        """Cache a resolution"""
        pass

    @abstractmethod
    async def invalidate(self, identifier: str) -> None:
        """Drop a cached resolution"""
        pass

    @abstractmethod
    async def cleanup(self) -> int:
        """Remove expired entries, returning how many were removed"""
        pass
