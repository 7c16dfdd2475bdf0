"""
Video API Request/Response Schemas.

Pydantic models for API serialization and validation.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class VideoInfoResponse(BaseModel):
    """Resolved video metadata"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Big Buck Bunny",
                "author": "Blender Foundation",
                "lengthSeconds": 596,
                "thumbnail": "https://i.ytimg.com/vi/aqz-KE-bpKQ/maxresdefault.jpg",
                "description": "Big Buck Bunny tells the story of a giant rabbit..."
            }
        },
    )

    title: str = Field(..., description="Video title")
    author: str = Field(..., description="Channel or uploader name")
    length_seconds: int = Field(..., alias="lengthSeconds", description="Duration in seconds")
    thumbnail: str = Field(..., description="Largest available thumbnail URL")
    description: str = Field("", description="Video description")


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint"""
    model_config = ConfigDict(json_schema_extra={"example": {"error": "Invalid video identifier"}})

    error: str = Field(..., description="Generic, user-presentable error message")


class CacheCleanupResponse(BaseModel):
    """Resolution cache cleanup result"""
    cache_cleaned: bool = Field(..., description="Whether cleanup ran")
    entries_removed: int = Field(..., description="Number of expired entries removed")


class CacheInvalidateResponse(BaseModel):
    """Resolution cache invalidation result"""
    identifier: str = Field(..., description="Video identifier")
    cache_invalidated: bool = Field(..., description="Whether a cache is configured")
    detail: Optional[str] = Field(None, description="Additional information")
