"""
Video Domain Models.

Pure business entities and value objects for resolved media and byte ranges.
These models contain no external dependencies.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ...core.errors import RangeUnsatisfiable


@dataclass(frozen=True)
class FormatDescriptor:
    """One encoded rendition of a media item"""
    has_video: bool
    has_audio: bool
    mime_type: str
    url: str
    content_length: Optional[int] = None
    format_id: Optional[str] = None
    height: Optional[int] = None
    http_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_combined(self) -> bool:
        """Audio and video in one byte stream"""
        return self.has_video and self.has_audio

    @property
    def supports_ranges(self) -> bool:
        """Partial content is only possible with a known length"""
        return self.content_length is not None and self.content_length > 0


@dataclass(frozen=True)
class MediaMetadata:
    """Display metadata for a media item"""
    title: str
    author: str
    length_seconds: int
    thumbnail_url: str
    description: str = ""


@dataclass(frozen=True)
class ResolvedMedia:
    """Successful resolver result: metadata plus the selected combined format"""
    identifier: str
    metadata: MediaMetadata
    format: FormatDescriptor


@dataclass(frozen=True)
class StreamRange:
    """HTTP range request value object"""
    start: int
    end: Optional[int] = None

    def __post_init__(self):
        if self.start < 0:
            raise ValueError("Start byte cannot be negative")
        if self.end is not None and self.end < self.start:
            raise ValueError("End byte cannot be less than start byte")

    @property
    def size(self) -> Optional[int]:
        """Get range size in bytes"""
        if self.end is not None:
            return self.end - self.start + 1
        return None

    def content_range(self, content_length: int) -> str:
        """Content-Range header value for this range"""
        return f"bytes {self.start}-{self.end}/{content_length}"

    def header_value(self) -> str:
        """Range header value for an upstream request"""
        end = "" if self.end is None else str(self.end)
        return f"bytes={self.start}-{end}"

    @classmethod
    def from_header(cls, range_header: str, content_length: int) -> 'StreamRange':
        """
        Parse an HTTP Range header against a known content length.

        Raises ValueError for syntax the proxy does not understand (the caller
        ignores the header in that case) and RangeUnsatisfiable when the
        syntax is fine but the range lies outside the resource.
        """
        if not range_header.startswith('bytes='):
            raise ValueError("Invalid range header format")

        range_spec = range_header[6:].strip()

        if ',' in range_spec:
            raise ValueError("Multiple ranges are not supported")

        if '-' not in range_spec:
            raise ValueError("Invalid range specification")

        start_str, end_str = (part.strip() for part in range_spec.split('-', 1))

        if not start_str:
            # Suffix range (e.g., "-500" means last 500 bytes)
            if not end_str.isdigit():
                raise ValueError("Invalid range specification")
            suffix_length = int(end_str)
            if suffix_length == 0:
                raise RangeUnsatisfiable(content_length)
            return cls(start=max(0, content_length - suffix_length), end=content_length - 1)

        if not start_str.isdigit() or (end_str and not end_str.isdigit()):
            raise ValueError("Invalid range specification")

        start = int(start_str)
        if start >= content_length:
            raise RangeUnsatisfiable(content_length)

        if end_str:
            end = int(end_str)
            if end < start:
                raise RangeUnsatisfiable(content_length)
            end = min(end, content_length - 1)
        else:
            end = content_length - 1

        return cls(start=start, end=end)
