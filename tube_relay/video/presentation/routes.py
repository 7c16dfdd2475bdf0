"""
Video API Routes.

FastAPI route definitions for metadata and stream proxying.
"""

from fastapi import APIRouter, Request

from .controllers import VideoInfoController, StreamingController
from .schemas import VideoInfoResponse, ErrorResponse, CacheCleanupResponse, CacheInvalidateResponse

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid video identifier"},
    500: {"model": ErrorResponse, "description": "Resolution or streaming failure"},
}


def create_video_routes(
    video_info_controller: VideoInfoController,
    streaming_controller: StreamingController
) -> APIRouter:
    """Create video API routes with dependency injection"""

    router = APIRouter(prefix="/api", tags=["videos"])

    @router.get("/video-info/{identifier}", response_model=VideoInfoResponse, responses=_ERROR_RESPONSES)
    async def get_video_info(identifier: str):
        """
        Get metadata for a video.

        - **identifier**: 11-character video identifier
        """
        return await video_info_controller.get_video_info(identifier)

    @router.get("/stream/{identifier}", responses={**_ERROR_RESPONSES, 416: {"model": ErrorResponse, "description": "Range not satisfiable"}})
    async def stream_video(identifier: str, request: Request):
        """
        Proxy the video byte stream with HTTP range request support.

        Supports:
        - **Range requests**: `bytes=start-end`, `bytes=start-` and `bytes=-suffix`
        - **Partial content**: 206 responses when the content length is known
        - **Full stream**: 200 responses without a range or without a known length

        Usage in HTML5:
        ```html
        <video controls>
            <source src="/api/stream/{identifier}" type="video/mp4">
        </video>
        ```
        """
        return await streaming_controller.stream_video(identifier, request)

    return router


def create_admin_video_routes(video_info_controller: VideoInfoController) -> APIRouter:
    """Create admin routes for resolution cache management"""

    router = APIRouter(prefix="/api/admin", tags=["admin"])

    @router.post("/cache/cleanup", response_model=CacheCleanupResponse)
    async def cleanup_resolution_cache():
        """Remove expired resolution cache entries."""
        return await video_info_controller.cleanup_cache()

    @router.post("/cache/{identifier}/invalidate", response_model=CacheInvalidateResponse)
    async def invalidate_resolution_cache(identifier: str):
        """
        Forget the cached resolution for a video.

        Useful when the upstream media URL has expired.
        """
        return await video_info_controller.invalidate_cache(identifier)

    return router
