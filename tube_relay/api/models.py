"""
Data models for the Tube Relay API.

This module defines Pydantic models for server-level responses. Video
endpoint schemas live with the video module.
"""

from typing import Any, Dict
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model"""

    status: str
    timestamp: str
    uptime_seconds: float
    video_module: Dict[str, Any]
    errors: Dict[str, Dict[str, Any]]
