"""
Playback client for Tube Relay.

Headless model of the browser client: the playlist/session controller, the
playback controller state machine and the persistence they rely on.
"""

from .events import EventTarget, MediaEventType
from .keyboard import KeyboardHub, KeyEvent
from .media import MediaElement, FullscreenHost
from .playback import PlaybackController, PlaybackState, ControlSurface, format_time
from .playlist import Playlist, PlaylistEntry
from .storage import LocalStorage, PlaylistStore
from .api_client import MetadataClient
from .session import SessionController

__all__ = [
    "EventTarget",
    "MediaEventType",
    "KeyboardHub",
    "KeyEvent",
    "MediaElement",
    "FullscreenHost",
    "PlaybackController",
    "PlaybackState",
    "ControlSurface",
    "format_time",
    "Playlist",
    "PlaylistEntry",
    "LocalStorage",
    "PlaylistStore",
    "MetadataClient",
    "SessionController",
]
