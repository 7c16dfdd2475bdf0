"""
Media surface interfaces.

The playback controller drives a media element and a fullscreen host
through these abstractions. A browser binding implements them for real
playback; tests implement them in memory.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .events import EventTarget


class MediaElement(EventTarget, ABC):
    """A seekable media element that emits MediaEventType notifications"""

    @property
    @abstractmethod
    def src(self) -> Optional[str]:
        pass

    @src.setter
    @abstractmethod
    def src(self, value: Optional[str]) -> None:
        pass

    @property
    @abstractmethod
    def current_time(self) -> float:
        pass

    @current_time.setter
    @abstractmethod
    def current_time(self, value: float) -> None:
        pass

    @property
    @abstractmethod
    def duration(self) -> float:
        """Total duration in seconds, NaN until metadata is known"""
        pass

    @property
    @abstractmethod
    def paused(self) -> bool:
        pass

    @property
    @abstractmethod
    def volume(self) -> float:
        pass

    @volume.setter
    @abstractmethod
    def volume(self, value: float) -> None:
        pass

    @property
    @abstractmethod
    def muted(self) -> bool:
        pass

    @muted.setter
    @abstractmethod
    def muted(self, value: bool) -> None:
        pass

    @abstractmethod
    def play(self) -> None:
        """Request playback; PLAY is emitted once playback actually starts"""
        pass

    @abstractmethod
    def pause(self) -> None:
        """Request a pause; PAUSE is emitted once the element is paused"""
        pass

    @abstractmethod
    def load(self) -> None:
        """Discard the current stream and request ``src`` again"""
        pass


class FullscreenHost(ABC):
    """The player container that can enter and leave fullscreen"""

    @property
    @abstractmethod
    def is_fullscreen(self) -> bool:
        pass

    @abstractmethod
    def request_fullscreen(self) -> None:
        pass

    @abstractmethod
    def exit_fullscreen(self) -> None:
        pass
