"""
Upstream Byte Source Implementations.

httpx based bounded reads from the selected format's media URL.
"""

import contextlib
import logging
from typing import AsyncIterator, Optional

import httpx

from ..domain.interfaces import ByteSource
from ..domain.models import FormatDescriptor, StreamRange
from ...core.config import StreamConfig
from ...core.errors import StreamTransportFailure


class HttpxByteSource(ByteSource):
    """Byte source that pulls ranges over a pooled httpx client"""

    def __init__(self, config: Optional[StreamConfig] = None, client: Optional[httpx.AsyncClient] = None):
        self.config = config or StreamConfig()
        self.logger = logging.getLogger(__name__)
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.upstream_read_timeout_seconds, connect=self.config.upstream_connect_timeout_seconds),
            follow_redirects=True,
        )

    @contextlib.asynccontextmanager
    async def open(
        self,
        descriptor: FormatDescriptor,
        byte_range: Optional[StreamRange] = None
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open the upstream and yield a chunk iterator"""
        headers = {"User-Agent": self.config.user_agent, "Accept": "*/*"}
        headers.update(descriptor.http_headers)
        if byte_range is not None:
            headers["Range"] = byte_range.header_value()

        request = self._client.build_request("GET", descriptor.url, headers=headers)

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise StreamTransportFailure(f"Upstream connection failed: {e}") from e

        try:
            if response.status_code >= 400:
                raise StreamTransportFailure(f"Upstream returned HTTP {response.status_code}")

            if byte_range is not None and response.status_code != 206:
                raise StreamTransportFailure(f"Upstream ignored range request (HTTP {response.status_code})")

            yield self._iter_chunks(response)
        finally:
            await response.aclose()

    async def _iter_chunks(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Read the upstream body in bounded chunks"""
        try:
            async for chunk in response.aiter_bytes(chunk_size=self.config.chunk_size_bytes):
                yield chunk
        except httpx.HTTPError as e:
            raise StreamTransportFailure(f"Upstream read failed: {e}") from e

    async def close(self) -> None:
        """Close the pooled client"""
        await self._client.aclose()
