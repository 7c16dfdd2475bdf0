"""
Client playback controller.

A state machine bound to one media element. It keeps the control surface
(progress fill, time readouts, play icon, volume slider, controls
visibility) consistent with what the element actually reports, and maps
seek gestures and shortcuts onto element operations. Every seek becomes a
new range request against the stream proxy.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.config import ClientConfig
from .events import Event, MediaEventType
from .keyboard import KeyboardHub, KeyboardRegistration, KeyEvent, default_hub
from .media import MediaElement, FullscreenHost
from .timers import HideTimer, Scheduler


class PlaybackState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    SEEKING = "seeking"
    ERROR = "error"


# States in which the element holds a bound stream
_BOUND_STATES = (PlaybackState.READY, PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.SEEKING)


@dataclass
class ControlSurface:
    """What the custom controls currently display"""
    progress: float = 0.0
    current_time_text: str = "0:00"
    duration_text: str = "0:00"
    play_icon: str = "play"
    volume_slider: int = 100
    controls_visible: bool = True


def format_time(seconds: float) -> str:
    """Format seconds as m:ss, or h:mm:ss from one hour up"""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class PlaybackController:
    """Drives one media element and its control surface"""

    def __init__(
        self,
        element: MediaElement,
        fullscreen_host: Optional[FullscreenHost] = None,
        scheduler: Optional[Scheduler] = None,
        keyboard_hub: Optional[KeyboardHub] = None,
        config: Optional[ClientConfig] = None
    ):
        self.element = element
        self.fullscreen_host = fullscreen_host
        self.keyboard_hub = keyboard_hub or default_hub
        self.config = config or ClientConfig()
        self.logger = logging.getLogger(__name__)

        self.state = PlaybackState.IDLE
        self.surface = ControlSurface()
        self.stream_url: Optional[str] = None

        self._hide_timer = HideTimer(scheduler or asyncio.get_running_loop(), self.config.controls_hide_delay_seconds, self._hide_controls)
        self._keyboard: Optional[KeyboardRegistration] = None
        self._attached = False
        self._was_playing_before_seek = False
        self._last_volume = element.volume if element.volume > 0 else 1.0
        self._last_position = 0.0

        self._listeners = {
            MediaEventType.PLAY: self._on_play,
            MediaEventType.PAUSE: self._on_pause,
            MediaEventType.TIME_UPDATE: self._on_time_update,
            MediaEventType.LOADED_METADATA: self._on_duration_known,
            MediaEventType.DURATION_CHANGE: self._on_duration_known,
            MediaEventType.ERROR: self._on_error,
        }

    @property
    def seeking(self) -> bool:
        return self.state is PlaybackState.SEEKING

    # Lifecycle

    def begin_loading(self) -> None:
        """Idle -> Loading while metadata is being fetched"""
        self.state = PlaybackState.LOADING

    def ready(self, stream_url: str, autoplay: bool = True) -> None:
        """Loading -> Ready: bind the stream, attach listeners, request autoplay"""
        if self.state is not PlaybackState.LOADING:
            self.logger.warning(f"ready() called in state {self.state.value}")
            return

        self.stream_url = stream_url
        self.element.src = stream_url
        self._attach()
        self.state = PlaybackState.READY
        self.surface.volume_slider = 0 if self.element.muted else round(self.element.volume * 100)

        if autoplay:
            self.element.play()

    def fail(self) -> None:
        """Loading -> Error; terminal until a new video is selected"""
        self.state = PlaybackState.ERROR
        self._show_controls()

    def dispose(self) -> None:
        """Detach from the element and release the keyboard"""
        if self._attached:
            for event_type, listener in self._listeners.items():
                self.element.remove_event_listener(event_type, listener)
            self._attached = False

        if self._keyboard is not None:
            self._keyboard.dispose()
            self._keyboard = None

        self._hide_timer.cancel()

    def _attach(self) -> None:
        if not self._attached:
            for event_type, listener in self._listeners.items():
                self.element.add_event_listener(event_type, listener)
            self._attached = True

        self._keyboard = self.keyboard_hub.acquire(self, self.handle_key)

    def reload(self) -> None:
        """Re-request the stream after a transport failure, keeping the position"""
        if self.stream_url is None:
            return

        position = self._last_position
        self.logger.info(f"Reloading stream at {format_time(position)}")
        self.element.load()
        self.element.current_time = position
        self.state = PlaybackState.READY
        self.surface.play_icon = "play"
        self.element.play()

    # Element notifications

    def _on_play(self, event: Event) -> None:
        self.surface.play_icon = "pause"
        if not self.seeking:
            self.state = PlaybackState.PLAYING

    def _on_pause(self, event: Event) -> None:
        self.surface.play_icon = "play"
        if not self.seeking:
            self.state = PlaybackState.PAUSED
            self._show_controls()

    def _on_time_update(self, event: Event) -> None:
        if self.seeking:
            return

        current = self.element.current_time
        self._last_position = current
        duration = self.element.duration
        if math.isfinite(duration) and duration > 0:
            self.surface.progress = _clamp(current / duration, 0.0, 1.0)
        self.surface.current_time_text = format_time(current)

    def _on_duration_known(self, event: Event) -> None:
        self.surface.duration_text = format_time(self.element.duration)

    def _on_error(self, event: Event) -> None:
        self.logger.error(f"Media element error for {self.stream_url}: {event.data.get('message', 'unknown')}")
        self.state = PlaybackState.ERROR
        self._show_controls()

    # User intents

    def toggle_play(self) -> None:
        """Ask the element to play or pause; the icon waits for its confirmation"""
        # A drag owns play/pause until pointer_up
        if self.state not in _BOUND_STATES or self.seeking:
            return
        if self.element.paused:
            self.element.play()
        else:
            self.element.pause()

    def pointer_down(self, fraction: float) -> None:
        """Start dragging on the progress track"""
        if self.state not in _BOUND_STATES or self.seeking:
            return

        self._was_playing_before_seek = not self.element.paused
        self.state = PlaybackState.SEEKING
        self.element.pause()
        self._apply_seek(fraction)

    def pointer_move(self, fraction: float) -> None:
        if self.seeking:
            self._apply_seek(fraction)

    def pointer_up(self, fraction: Optional[float] = None) -> None:
        """Finish dragging; resume only if playback was active before"""
        if not self.seeking:
            return

        if fraction is not None:
            self._apply_seek(fraction)

        self.state = PlaybackState.PAUSED if self.element.paused else PlaybackState.PLAYING
        if self._was_playing_before_seek and self.element.paused:
            self.element.play()

    def _apply_seek(self, fraction: float) -> None:
        duration = self.element.duration
        if not math.isfinite(duration) or duration <= 0:
            return

        fraction = _clamp(fraction, 0.0, 1.0)
        target = fraction * duration
        self.surface.progress = fraction
        self.surface.current_time_text = format_time(target)
        self.element.current_time = target
        self._last_position = target

    def seek_by(self, seconds: float) -> None:
        """Relative seek clamped to [0, duration]"""
        if self.state not in _BOUND_STATES:
            return

        target = self.element.current_time + seconds
        duration = self.element.duration
        if math.isfinite(duration) and duration > 0:
            target = _clamp(target, 0.0, duration)
        else:
            target = max(0.0, target)
        self.element.current_time = target
        self._last_position = target

    def set_volume_percent(self, percent: float) -> None:
        """Apply the 0-100 slider to the element's 0.0-1.0 volume"""
        percent = _clamp(percent, 0, 100)
        volume = percent / 100
        self.element.volume = volume
        if volume > 0:
            self._last_volume = volume
            self.element.muted = False
        self.surface.volume_slider = round(percent)

    def adjust_volume(self, delta: float) -> None:
        self.set_volume_percent((self.element.volume + delta) * 100)

    def toggle_mute(self) -> None:
        muted = not self.element.muted
        self.element.muted = muted
        if muted:
            self.surface.volume_slider = 0
            return

        # Unmuting from a zero volume brings back the last audible level
        if self.element.volume <= 0:
            self.element.volume = self._last_volume
        self.surface.volume_slider = round(self.element.volume * 100)

    def toggle_fullscreen(self) -> None:
        if self.fullscreen_host is None:
            return
        if self.fullscreen_host.is_fullscreen:
            self.fullscreen_host.exit_fullscreen()
        else:
            self.fullscreen_host.request_fullscreen()

    def handle_key(self, event: KeyEvent) -> bool:
        """Keyboard shortcuts; returns True when the key was consumed"""
        if event.target_is_text_input:
            return False

        key = event.key.lower() if len(event.key) == 1 else event.key
        step = self.config.seek_step_seconds
        jump = self.config.seek_jump_seconds
        volume_step = self.config.volume_step

        if key in (" ", "k"):
            self.toggle_play()
        elif key == "ArrowLeft":
            self.seek_by(-step)
        elif key == "ArrowRight":
            self.seek_by(step)
        elif key == "j":
            self.seek_by(-jump)
        elif key == "l":
            self.seek_by(jump)
        elif key == "ArrowUp":
            self.adjust_volume(volume_step)
        elif key == "ArrowDown":
            self.adjust_volume(-volume_step)
        elif key == "m":
            self.toggle_mute()
        elif key == "f":
            self.toggle_fullscreen()
        else:
            return False
        return True

    # Controls visibility

    def pointer_activity(self) -> None:
        """Pointer moved over the player"""
        self._show_controls()
        self._hide_timer.restart()

    def _show_controls(self) -> None:
        self.surface.controls_visible = True
        self._hide_timer.cancel()

    def _hide_controls(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.surface.controls_visible = False
