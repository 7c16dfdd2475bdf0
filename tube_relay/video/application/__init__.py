"""
Video Application Layer.

Use cases for stream planning and metadata lookup.
"""

from .streaming_service import StreamingService, StreamPlan
from .metadata_service import MetadataService

__all__ = ["StreamingService", "StreamPlan", "MetadataService"]
