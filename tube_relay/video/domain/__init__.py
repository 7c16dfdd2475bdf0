"""
Video Domain Layer.

Pure business entities and interfaces for resolved media and byte ranges.
"""

from .models import FormatDescriptor, MediaMetadata, ResolvedMedia, StreamRange
from .interfaces import SourceResolver, ByteSource, ResolutionCache

__all__ = ["FormatDescriptor", "MediaMetadata", "ResolvedMedia", "StreamRange", "SourceResolver", "ByteSource", "ResolutionCache"]
