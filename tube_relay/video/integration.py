"""
Video Module Integration.

Composition root for the video module: builds the resolver, byte source,
cache, services and controllers, and exposes their routes.
"""

import logging
from typing import Optional

from ..core.config import Config

# Domain interfaces
from .domain.interfaces import SourceResolver, ByteSource, ResolutionCache

# Infrastructure implementations
from .infrastructure.resolvers import YtDlpSourceResolver
from .infrastructure.upstream import HttpxByteSource
from .infrastructure.caching import InMemoryResolutionCache, NoOpResolutionCache

# Application services
from .application.metadata_service import MetadataService
from .application.streaming_service import StreamingService

# Presentation layer
from .presentation.controllers import VideoInfoController, StreamingController
from .presentation.routes import create_video_routes, create_admin_video_routes


class VideoModule:
    """
    Main video module that provides dependency injection and service composition.

    Resolver and byte source may be injected, which is how tests run the
    whole HTTP surface without network access.
    """

    def __init__(
        self,
        config: Config,
        source_resolver: Optional[SourceResolver] = None,
        byte_source: Optional[ByteSource] = None,
        resolution_cache: Optional[ResolutionCache] = None
    ):
        self.config = config
        self.logger = logging.getLogger(__name__)

        # Infrastructure layer
        self.source_resolver = source_resolver if source_resolver is not None else self._create_source_resolver()
        self.byte_source = byte_source if byte_source is not None else self._create_byte_source()
        # An empty cache is falsy, so test for None explicitly
        self.resolution_cache = resolution_cache if resolution_cache is not None else self._create_resolution_cache()

        # Application layer
        self.metadata_service = MetadataService(
            source_resolver=self.source_resolver,
            resolution_cache=None if isinstance(self.resolution_cache, NoOpResolutionCache) else self.resolution_cache
        )
        self.streaming_service = StreamingService(
            metadata_service=self.metadata_service,
            byte_source=self.byte_source
        )

        # Presentation layer
        self.video_info_controller = VideoInfoController(self.metadata_service)
        self.streaming_controller = StreamingController(self.streaming_service)

        self.logger.info("Video module initialized successfully")

    def _create_source_resolver(self) -> SourceResolver:
        """Create source resolver implementation"""
        return YtDlpSourceResolver(self.config.resolver)

    def _create_byte_source(self) -> ByteSource:
        """Create upstream byte source implementation"""
        return HttpxByteSource(self.config.stream)

    def _create_resolution_cache(self) -> ResolutionCache:
        """Create resolution cache implementation"""
        if self.config.stream.enable_cache:
            return InMemoryResolutionCache(
                max_entries=self.config.stream.cache_max_entries,
                max_age_minutes=self.config.stream.cache_ttl_minutes
            )
        else:
            return NoOpResolutionCache()

    def get_api_routes(self):
        """Get FastAPI routes for video functionality"""
        return create_video_routes(
            video_info_controller=self.video_info_controller,
            streaming_controller=self.streaming_controller
        )

    def get_admin_routes(self):
        """Get admin routes for cache management"""
        return create_admin_video_routes(video_info_controller=self.video_info_controller)

    async def cleanup(self):
        """Clean up video module resources"""
        try:
            await self.metadata_service.cleanup_cache()
            await self.byte_source.close()
            self.logger.info("Video module cleanup completed")

        except Exception as e:
            self.logger.error(f"Error during video module cleanup: {e}")

    def get_module_status(self) -> dict:
        """Get status information about the video module"""
        return {
            "source_resolver": type(self.source_resolver).__name__,
            "byte_source": type(self.byte_source).__name__,
            "resolution_cache": type(self.resolution_cache).__name__,
            "caching_enabled": self.metadata_service.resolution_cache is not None,
        }
