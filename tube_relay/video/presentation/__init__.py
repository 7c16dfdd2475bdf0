"""
Video Presentation Layer.

HTTP controllers, routes and schemas for the video endpoints.
"""

from .controllers import VideoInfoController, StreamingController
from .routes import create_video_routes

__all__ = ["VideoInfoController", "StreamingController", "create_video_routes"]
