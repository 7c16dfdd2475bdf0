"""
Video Streaming Application Service.

Turns an identifier and an optional Range header into a stream plan: status
code, response headers and the exact upstream byte range to pull.
"""

import logging
from dataclasses import dataclass, field
from typing import AsyncContextManager, AsyncIterator, Dict, Optional

from ..domain.interfaces import ByteSource
from ..domain.models import FormatDescriptor, ResolvedMedia, StreamRange
from .metadata_service import MetadataService

STREAM_MEDIA_TYPE = "video/mp4"


@dataclass(frozen=True)
class StreamPlan:
    """Everything needed to answer one stream request"""
    identifier: str
    descriptor: FormatDescriptor
    status_code: int
    byte_range: Optional[StreamRange] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return self.status_code == 206


class StreamingService:
    """Application service for range-aware stream proxying"""

    def __init__(self, metadata_service: MetadataService, byte_source: ByteSource):
        self.metadata_service = metadata_service
        self.byte_source = byte_source
        self.logger = logging.getLogger(__name__)

    async def plan_stream(self, identifier: str, range_header: Optional[str] = None) -> StreamPlan:
        """
        Resolve an identifier and plan the response for a Range header.

        Raises InvalidIdentifier, ResolutionFailure or RangeUnsatisfiable.
        """
        resolved = await self.metadata_service.resolve(identifier)
        return self.build_plan(resolved, range_header)

    def build_plan(self, resolved: ResolvedMedia, range_header: Optional[str] = None) -> StreamPlan:
        """Compute status, headers and upstream range for a resolved format"""
        descriptor = resolved.format
        content_length = descriptor.content_length
        headers = {"Accept-Ranges": "bytes", "Content-Type": STREAM_MEDIA_TYPE}

        byte_range = None
        if range_header and descriptor.supports_ranges:
            try:
                byte_range = StreamRange.from_header(range_header, content_length)
            except ValueError as e:
                # Unparseable ranges are ignored and the full body is served
                self.logger.warning(f"Ignoring Range header {range_header!r} for {resolved.identifier}: {e}")

        if byte_range is not None:
            headers["Content-Range"] = byte_range.content_range(content_length)
            headers["Content-Length"] = str(byte_range.size)
            self.logger.debug(f"Partial content for {resolved.identifier}: {headers['Content-Range']}")
            return StreamPlan(identifier=resolved.identifier, descriptor=descriptor, status_code=206, byte_range=byte_range, headers=headers)

        if content_length is not None:
            headers["Content-Length"] = str(content_length)

        return StreamPlan(identifier=resolved.identifier, descriptor=descriptor, status_code=200, headers=headers)

    def open_upstream(self, plan: StreamPlan) -> AsyncContextManager[AsyncIterator[bytes]]:
        """Open the upstream bounded to the plan's byte range"""
        return self.byte_source.open(plan.descriptor, plan.byte_range)
