"""
Video Metadata Application Service.

Resolves identifiers through the source resolver, with optional caching.
"""

import logging
from typing import Optional

from ..domain.interfaces import SourceResolver, ResolutionCache
from ..domain.models import MediaMetadata, ResolvedMedia
from ...core.errors import ResolutionFailure, TubeRelayError
from ...core.identifiers import validate_identifier


class MetadataService:
    """Application service for identifier resolution and metadata"""

    def __init__(
        self,
        source_resolver: SourceResolver,
        resolution_cache: Optional[ResolutionCache] = None
    ):
        self.source_resolver = source_resolver
        self.resolution_cache = resolution_cache
        self.logger = logging.getLogger(__name__)

    async def resolve(self, identifier: str) -> ResolvedMedia:
        """
        Resolve an identifier into metadata plus a combined format.

        Raises InvalidIdentifier for malformed identifiers and
        ResolutionFailure for anything that goes wrong upstream.
        """
        validate_identifier(identifier)

        if self.resolution_cache is not None:
            cached = await self.resolution_cache.get(identifier)
            if cached:
                return cached

        try:
            resolved = await self.source_resolver.resolve(identifier)
        except TubeRelayError:
            raise
        except Exception as e:
            self.logger.error(f"Unexpected resolver error for {identifier}: {e}")
            raise ResolutionFailure(identifier=identifier) from e

        if not resolved.format.is_combined:
            raise ResolutionFailure("Resolver returned a format without both audio and video", identifier=identifier)

        if self.resolution_cache is not None:
            await self.resolution_cache.put(resolved)

        return resolved

    async def get_metadata(self, identifier: str) -> MediaMetadata:
        """Get display metadata for an identifier"""
        resolved = await self.resolve(identifier)
        return resolved.metadata

    async def invalidate(self, identifier: str) -> None:
        """Forget a cached resolution, e.g. after its media URL expired"""
        if self.resolution_cache is not None:
            await self.resolution_cache.invalidate(identifier)

    async def cleanup_cache(self) -> int:
        """Remove expired cache entries"""
        if self.resolution_cache is not None:
            return await self.resolution_cache.cleanup()
        return 0
