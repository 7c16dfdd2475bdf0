"""
HTTP client for the relay's metadata endpoint.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ..core.config import ClientConfig
from ..core.errors import ResolutionFailure
from ..video.presentation.schemas import VideoInfoResponse


class MetadataClient:
    """Fetches video metadata and builds stream URLs against one relay"""

    def __init__(self, config: Optional[ClientConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or ClientConfig()
        self.base_url = self.config.api_base_url.rstrip("/")
        self.logger = logging.getLogger(__name__)
        self._client = client or httpx.AsyncClient(timeout=self.config.request_timeout_seconds)

    async def get_video_info(self, identifier: str) -> VideoInfoResponse:
        """Fetch metadata; any failure surfaces as ResolutionFailure"""
        url = f"{self.base_url}/api/video-info/{identifier}"
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise ResolutionFailure(f"Metadata request failed: {e}", identifier=identifier) from e

        if response.status_code != 200:
            try:
                message = response.json().get("error", response.reason_phrase)
            except (ValueError, AttributeError):
                message = response.reason_phrase
            raise ResolutionFailure(f"Metadata request returned {response.status_code}: {message}", identifier=identifier)

        try:
            return VideoInfoResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ResolutionFailure(f"Malformed metadata response: {e}", identifier=identifier) from e

    def stream_url(self, identifier: str) -> str:
        return f"{self.base_url}/api/stream/{identifier}"

    async def close(self) -> None:
        await self._client.aclose()
