"""
View models rendered by the playback client.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.identifiers import watch_url

EMPTY_MESSAGE = 'Paste a YouTube URL and click "Load Video" to start watching'
LOADING_MESSAGE = "Loading video..."
ERROR_MESSAGE = "Failed to load video. The video might be restricted or unavailable."
EMPTY_PLAYLIST_MESSAGE = "No videos in queue"


class PlaceholderKind(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class Placeholder:
    """Shown in place of the player surface"""
    kind: PlaceholderKind
    message: str
    fallback_url: Optional[str] = None

    @classmethod
    def empty(cls) -> "Placeholder":
        return cls(PlaceholderKind.EMPTY, EMPTY_MESSAGE)

    @classmethod
    def loading(cls) -> "Placeholder":
        return cls(PlaceholderKind.LOADING, LOADING_MESSAGE)

    @classmethod
    def error(cls, identifier: str) -> "Placeholder":
        return cls(PlaceholderKind.ERROR, ERROR_MESSAGE, fallback_url=watch_url(identifier))


@dataclass(frozen=True)
class PlayerView:
    """The bound player surface and the metadata shown beside it"""
    identifier: str
    stream_url: str
    poster_url: str
    title: str
    author: str
    description: str = ""


@dataclass(frozen=True)
class PlaylistRow:
    identifier: str
    thumbnail_url: str
    title: str
    added_at_text: str
    active: bool


@dataclass(frozen=True)
class PlaylistView:
    rows: List[PlaylistRow] = field(default_factory=list)

    @property
    def empty_message(self) -> Optional[str]:
        return None if self.rows else EMPTY_PLAYLIST_MESSAGE
