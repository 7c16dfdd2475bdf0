"""
Video HTTP Controllers.

Handle HTTP requests and responses for metadata and stream proxying.
"""

import contextlib
import logging
from typing import AsyncIterator

from fastapi import HTTPException, Request, Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from ..application.metadata_service import MetadataService
from ..application.streaming_service import StreamingService, StreamPlan, STREAM_MEDIA_TYPE
from ...core.errors import InvalidIdentifier, RangeUnsatisfiable, ResolutionFailure, StreamTransportFailure
from ...core.logging_config import ErrorTracker, get_error_tracker
from .schemas import VideoInfoResponse, CacheCleanupResponse, CacheInvalidateResponse


class VideoInfoController:
    """Controller for metadata lookups"""

    def __init__(self, metadata_service: MetadataService, error_tracker: ErrorTracker = None):
        self.metadata_service = metadata_service
        self.error_tracker = error_tracker or get_error_tracker("video_info")
        self.logger = logging.getLogger(__name__)

    async def get_video_info(self, identifier: str) -> VideoInfoResponse:
        """Get resolved metadata for an identifier"""
        try:
            metadata = await self.metadata_service.get_metadata(identifier)
        except InvalidIdentifier:
            raise HTTPException(status_code=400, detail=InvalidIdentifier.public_message)
        except ResolutionFailure as e:
            self.error_tracker.log_error(e, "video_info", {"identifier": identifier}, exc_info=False)
            raise HTTPException(status_code=500, detail="Failed to fetch video info")

        return VideoInfoResponse(
            title=metadata.title,
            author=metadata.author,
            length_seconds=metadata.length_seconds,
            thumbnail=metadata.thumbnail_url,
            description=metadata.description,
        )

    async def cleanup_cache(self) -> CacheCleanupResponse:
        """Remove expired resolution cache entries"""
        entries_removed = await self.metadata_service.cleanup_cache()
        return CacheCleanupResponse(cache_cleaned=True, entries_removed=entries_removed)

    async def invalidate_cache(self, identifier: str) -> CacheInvalidateResponse:
        """Forget a cached resolution"""
        await self.metadata_service.invalidate(identifier)
        enabled = self.metadata_service.resolution_cache is not None
        return CacheInvalidateResponse(identifier=identifier, cache_invalidated=enabled, detail=None if enabled else "Resolution cache disabled")


class StreamingController:
    """Controller for range-aware stream proxying"""

    def __init__(self, streaming_service: StreamingService, error_tracker: ErrorTracker = None):
        self.streaming_service = streaming_service
        self.error_tracker = error_tracker or get_error_tracker("stream_proxy")
        self.logger = logging.getLogger(__name__)

    async def stream_video(self, identifier: str, request: Request) -> Response:
        """Stream video with range request support"""
        range_header = request.headers.get("range")

        try:
            plan = await self.streaming_service.plan_stream(identifier, range_header)
        except InvalidIdentifier:
            raise HTTPException(status_code=400, detail=InvalidIdentifier.public_message)
        except RangeUnsatisfiable as e:
            self.logger.info(f"Unsatisfiable range {range_header!r} for {identifier} (length {e.content_length})")
            raise HTTPException(status_code=416, detail=RangeUnsatisfiable.public_message, headers={"Content-Range": f"bytes */{e.content_length}"})
        except ResolutionFailure as e:
            self.error_tracker.log_error(e, "stream_resolution", {"identifier": identifier}, exc_info=False)
            raise HTTPException(status_code=500, detail="Failed to stream video")

        # Open upstream before any header goes out so failures still get an error body
        upstream = contextlib.AsyncExitStack()
        try:
            chunks = await upstream.enter_async_context(self.streaming_service.open_upstream(plan))
        except StreamTransportFailure as e:
            await upstream.aclose()
            self.error_tracker.log_error(e, "stream_open", {"identifier": identifier, "range": range_header}, exc_info=False)
            raise HTTPException(status_code=500, detail=StreamTransportFailure.public_message)

        self.logger.debug(f"Streaming {identifier}: HTTP {plan.status_code} {plan.headers.get('Content-Range', 'full')}")

        return StreamingResponse(
            self._relay(plan, chunks, upstream),
            status_code=plan.status_code,
            headers=plan.headers,
            media_type=STREAM_MEDIA_TYPE,
            background=BackgroundTask(upstream.aclose),
        )

    async def _relay(self, plan: StreamPlan, chunks: AsyncIterator[bytes], upstream: contextlib.AsyncExitStack) -> AsyncIterator[bytes]:
        """Pipe upstream chunks to the client; headers are already sent"""
        sent = 0
        try:
            async for chunk in chunks:
                sent += len(chunk)
                yield chunk
        except StreamTransportFailure as e:
            # Response already started: drop the connection instead of writing an error
            self.error_tracker.log_error(e, "stream_relay", {"identifier": plan.identifier, "bytes_sent": sent}, exc_info=False)
            raise
        finally:
            await upstream.aclose()
            self.logger.debug(f"Stream for {plan.identifier} closed after {sent} bytes")
