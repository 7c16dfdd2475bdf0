"""
Source Resolver Implementations.

yt-dlp based resolution of identifiers into metadata and a combined format.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import yt_dlp
from yt_dlp.utils import YoutubeDLError

from ..domain.interfaces import SourceResolver
from ..domain.models import FormatDescriptor, MediaMetadata, ResolvedMedia
from ...core.config import ResolverConfig
from ...core.errors import ResolutionFailure
from ...core.identifiers import validate_identifier, watch_url

# Only plain HTTP renditions can be proxied with byte ranges
_PROXYABLE_PROTOCOLS = ("http", "https")


class YtDlpSourceResolver(SourceResolver):
    """Resolver backed by yt-dlp metadata extraction"""

    def __init__(self, config: Optional[ResolverConfig] = None):
        self.config = config or ResolverConfig()
        self.logger = logging.getLogger(__name__)
        self._ydl_opts = {
            'quiet': True,
            'no_warnings': True,
            'skip_download': True,
            'noplaylist': True,
            'socket_timeout': self.config.socket_timeout_seconds,
            'http_headers': {
                'User-Agent': self.config.user_agent,
                'Accept-Language': 'en-US,en;q=0.9',
            },
            'extractor_args': {
                'youtube': {
                    'player_client': list(self.config.player_clients),
                },
            },
        }

    async def resolve(self, identifier: str) -> ResolvedMedia:
        """Resolve an identifier in a worker thread"""
        validate_identifier(identifier)
        info = await asyncio.to_thread(self._extract_info, identifier)
        return self.build_resolved_media(identifier, info)

    def _extract_info(self, identifier: str) -> Dict[str, Any]:
        """Blocking yt-dlp extraction"""
        with yt_dlp.YoutubeDL(self._ydl_opts) as ydl:
            try:
                info = ydl.extract_info(watch_url(identifier), download=False)
            except YoutubeDLError as e:
                self.logger.error(f"yt-dlp extraction failed for {identifier}: {e}")
                raise ResolutionFailure(identifier=identifier) from e

        if not info:
            raise ResolutionFailure("No info extracted", identifier=identifier)

        return info

    def build_resolved_media(self, identifier: str, info: Dict[str, Any]) -> ResolvedMedia:
        """Convert a yt-dlp info dict into a ResolvedMedia"""
        descriptor = self.select_combined_format(info.get('formats') or [])
        if descriptor is None:
            self.logger.warning(f"No combined audio+video format for {identifier}")
            raise ResolutionFailure("No combined audio+video format available", identifier=identifier)

        metadata = MediaMetadata(
            title=info.get('title') or 'Unknown Title',
            author=info.get('uploader') or info.get('channel') or 'Unknown',
            length_seconds=int(info.get('duration') or 0),
            thumbnail_url=self._best_thumbnail(info),
            description=info.get('description') or '',
        )

        self.logger.debug(f"Resolved {identifier}: format {descriptor.format_id} ({descriptor.height}p, {descriptor.content_length} bytes)")
        return ResolvedMedia(identifier=identifier, metadata=metadata, format=descriptor)

    def select_combined_format(self, formats: List[Dict[str, Any]]) -> Optional[FormatDescriptor]:
        """Pick the highest video quality among formats carrying both audio and video"""
        candidates = []

        for f in formats:
            has_video = f.get('vcodec') not in (None, 'none')
            has_audio = f.get('acodec') not in (None, 'none')

            if not (has_video and has_audio):
                continue
            if not f.get('url') or f.get('protocol', 'https') not in _PROXYABLE_PROTOCOLS:
                continue

            candidates.append(f)

        if not candidates:
            return None

        best = max(candidates, key=lambda f: (f.get('height') or 0, f.get('tbr') or 0))

        # filesize_approx is not exact enough to advertise Content-Length
        content_length = best.get('filesize')

        return FormatDescriptor(
            has_video=True,
            has_audio=True,
            mime_type=f"video/{best.get('ext') or 'mp4'}",
            url=best['url'],
            content_length=int(content_length) if content_length else None,
            format_id=best.get('format_id'),
            height=best.get('height'),
            http_headers=dict(best.get('http_headers') or {}),
        )

    def _best_thumbnail(self, info: Dict[str, Any]) -> str:
        """Last thumbnail is the largest"""
        thumbnails = info.get('thumbnails') or []
        for thumbnail in reversed(thumbnails):
            if thumbnail.get('url'):
                return thumbnail['url']
        return info.get('thumbnail') or ''
