"""
Video Infrastructure Layer.

Concrete adapters for yt-dlp resolution, httpx upstream reads and caching.
"""

from .resolvers import YtDlpSourceResolver
from .upstream import HttpxByteSource
from .caching import InMemoryResolutionCache, NoOpResolutionCache

__all__ = ["YtDlpSourceResolver", "HttpxByteSource", "InMemoryResolutionCache", "NoOpResolutionCache"]
