"""Shared fixtures and in-memory fakes for the Tube Relay test suite."""

import asyncio
import contextlib
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from tube_relay.api.server import APIServer
from tube_relay.client.events import MediaEventType
from tube_relay.client.keyboard import KeyboardHub
from tube_relay.client.media import FullscreenHost, MediaElement
from tube_relay.core.config import Config
from tube_relay.core.errors import ResolutionFailure, StreamTransportFailure
from tube_relay.video.domain.interfaces import ByteSource, SourceResolver
from tube_relay.video.domain.models import FormatDescriptor, MediaMetadata, ResolvedMedia, StreamRange
from tube_relay.video.integration import VideoModule
from tube_relay.video.presentation.schemas import VideoInfoResponse

VIDEO_ID = "dQw4w9WgXcQ"
OTHER_ID = "aqz-KE-bpKQ"
THIRD_ID = "jNQXAC9IVRw"
PAYLOAD = bytes(range(256)) * 4


def make_resolved(identifier: str = VIDEO_ID, content_length: Optional[int] = len(PAYLOAD), has_audio: bool = True) -> ResolvedMedia:
    return ResolvedMedia(
        identifier=identifier,
        metadata=MediaMetadata(
            title="Me at the zoo",
            author="jawed",
            length_seconds=19,
            thumbnail_url=f"https://i.ytimg.com/vi/{identifier}/hqdefault.jpg",
            description="The first video",
        ),
        format=FormatDescriptor(
            has_video=True,
            has_audio=has_audio,
            mime_type="video/mp4",
            url=f"https://media.example.test/{identifier}.mp4",
            content_length=content_length,
            format_id="18",
            height=360,
        ),
    )


# --- Server-side fakes ---


class FakeSourceResolver(SourceResolver):
    """Resolver answering from a dict; exceptions in the dict are raised"""

    def __init__(self, results: Optional[Dict[str, object]] = None):
        self.results = results if results is not None else {VIDEO_ID: make_resolved()}
        self.calls: List[str] = []

    async def resolve(self, identifier: str) -> ResolvedMedia:
        self.calls.append(identifier)
        result = self.results.get(identifier)
        if result is None:
            raise ResolutionFailure("Video unavailable", identifier=identifier)
        if isinstance(result, Exception):
            raise result
        return result


class FakeByteSource(ByteSource):
    """Serves PAYLOAD in small chunks and records what was requested"""

    def __init__(self, payload: bytes = PAYLOAD, chunk_size: int = 100):
        self.payload = payload
        self.chunk_size = chunk_size
        self.fail_on_open = False
        self.fail_after_chunks: Optional[int] = None
        self.requested_ranges: List[Optional[StreamRange]] = []
        self.released = 0
        self.closed = False

    @contextlib.asynccontextmanager
    async def open(self, descriptor: FormatDescriptor, byte_range: Optional[StreamRange] = None):
        self.requested_ranges.append(byte_range)
        if self.fail_on_open:
            raise StreamTransportFailure("Upstream refused the connection")

        data = self.payload
        if byte_range is not None:
            data = data[byte_range.start:byte_range.end + 1]

        try:
            yield self._chunks(data)
        finally:
            self.released += 1

    async def _chunks(self, data: bytes):
        for index, offset in enumerate(range(0, len(data), self.chunk_size)):
            if self.fail_after_chunks is not None and index >= self.fail_after_chunks:
                raise StreamTransportFailure("Upstream connection reset")
            yield data[offset:offset + self.chunk_size]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    cfg = Config(str(tmp_path / "config.json"))
    cfg.system.log_file = None
    return cfg


@pytest.fixture
def resolver():
    return FakeSourceResolver()


@pytest.fixture
def byte_source():
    return FakeByteSource()


@pytest.fixture
def video_module(config, resolver, byte_source):
    return VideoModule(config, source_resolver=resolver, byte_source=byte_source)


@pytest.fixture
def api_server(config, video_module):
    return APIServer(config, video_module)


@pytest.fixture
def client(api_server):
    with TestClient(api_server.app) as test_client:
        yield test_client


# --- Client-side fakes ---


class FakeMediaElement(MediaElement):
    """
    In-memory media element.

    play() only records the request; tests confirm it with confirm_play()
    the way a browser fires "play" once playback really starts.
    """

    def __init__(self, duration: float = float("nan")):
        super().__init__()
        self._src: Optional[str] = None
        self._current_time = 0.0
        self._duration = duration
        self._paused = True
        self._volume = 1.0
        self._muted = False
        self.play_requests = 0
        self.pause_requests = 0
        self.load_requests = 0

    @property
    def src(self):
        return self._src

    @src.setter
    def src(self, value):
        self._src = value

    @property
    def current_time(self):
        return self._current_time

    @current_time.setter
    def current_time(self, value):
        self._current_time = value

    @property
    def duration(self):
        return self._duration

    @property
    def paused(self):
        return self._paused

    @property
    def volume(self):
        return self._volume

    @volume.setter
    def volume(self, value):
        self._volume = value

    @property
    def muted(self):
        return self._muted

    @muted.setter
    def muted(self, value):
        self._muted = value

    def play(self):
        self.play_requests += 1

    def pause(self):
        self.pause_requests += 1
        if not self._paused:
            self._paused = True
            self.dispatch_event(MediaEventType.PAUSE)

    def load(self):
        self.load_requests += 1
        self._paused = True

    # Test drivers

    def confirm_play(self):
        self._paused = False
        self.dispatch_event(MediaEventType.PLAY)

    def advance(self, seconds: float):
        self._current_time = seconds
        self.dispatch_event(MediaEventType.TIME_UPDATE)

    def set_duration(self, seconds: float):
        self._duration = seconds
        self.dispatch_event(MediaEventType.DURATION_CHANGE)

    def fail(self, message: str = "network error"):
        self.dispatch_event(MediaEventType.ERROR, {"message": message})


class FakeFullscreenHost(FullscreenHost):
    def __init__(self):
        self._fullscreen = False

    @property
    def is_fullscreen(self):
        return self._fullscreen

    def request_fullscreen(self):
        self._fullscreen = True

    def exit_fullscreen(self):
        self._fullscreen = False


class FakeTimerHandle:
    def __init__(self, when: float, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Manual clock with a call_later compatible with asyncio loops"""

    def __init__(self):
        self.now = 0.0
        self.handles: List[FakeTimerHandle] = []

    def call_later(self, delay, callback, *args):
        handle = FakeTimerHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeTimerHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float):
        self.now += seconds
        due = [h for h in self.pending if h.when <= self.now]
        for handle in due:
            self.handles.remove(handle)
            handle.callback(*handle.args)


class FakeMetadataClient:
    """MetadataClient stand-in with optional per-identifier gates"""

    def __init__(self):
        self.failures = set()
        self.gates: Dict[str, asyncio.Event] = {}
        self.requests: List[str] = []
        self.closed = False

    async def get_video_info(self, identifier: str) -> VideoInfoResponse:
        self.requests.append(identifier)
        gate = self.gates.get(identifier)
        if gate is not None:
            await gate.wait()
        if identifier in self.failures:
            raise ResolutionFailure("Metadata request returned 500", identifier=identifier)
        return VideoInfoResponse(
            title=f"Title {identifier}",
            author="Uploader",
            length_seconds=60,
            thumbnail=f"https://i.ytimg.com/vi/{identifier}/hqdefault.jpg",
        )

    def stream_url(self, identifier: str) -> str:
        return f"http://relay.test/api/stream/{identifier}"

    async def close(self):
        self.closed = True


@pytest.fixture
def element():
    return FakeMediaElement(duration=100.0)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def keyboard_hub():
    return KeyboardHub()


@pytest.fixture
def fullscreen_host():
    return FakeFullscreenHost()


@pytest.fixture
def media_element_factory():
    return FakeMediaElement


@pytest.fixture
def metadata_client():
    return FakeMetadataClient()
