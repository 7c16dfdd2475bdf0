"""
Event dispatch for the playback client.

Media elements publish their notifications through an EventTarget. The
playback controller subscribes while it is bound to an element and
unsubscribes on dispose.
"""

import logging
from typing import Dict, List, Callable, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MediaEventType(Enum):
    """Notifications a media element can emit"""
    PLAY = "play"
    PAUSE = "pause"
    TIME_UPDATE = "timeupdate"
    LOADED_METADATA = "loadedmetadata"
    DURATION_CHANGE = "durationchange"
    ERROR = "error"


@dataclass
class Event:
    """Event data structure"""
    event_type: MediaEventType
    target: Any
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


class EventTarget:
    """Synchronous listener registry, one list per event type"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._listeners: Dict[MediaEventType, List[Callable[[Event], None]]] = {}

    def add_event_listener(self, event_type: MediaEventType, callback: Callable[[Event], None]) -> None:
        """Subscribe to an event type"""
        listeners = self._listeners.setdefault(event_type, [])
        if callback not in listeners:
            listeners.append(callback)

    def remove_event_listener(self, event_type: MediaEventType, callback: Callable[[Event], None]) -> None:
        """Unsubscribe from an event type"""
        listeners = self._listeners.get(event_type)
        if listeners and callback in listeners:
            listeners.remove(callback)

    def dispatch_event(self, event_type: MediaEventType, data: Optional[Dict[str, Any]] = None) -> Event:
        """Deliver an event to every current listener"""
        event = Event(event_type=event_type, target=self, data=data or {})

        for callback in list(self._listeners.get(event_type, [])):
            try:
                callback(event)
            except Exception as e:
                self.logger.error(f"Error in event listener for {event_type.value}: {e}")

        return event

    def listener_count(self, event_type: Optional[MediaEventType] = None) -> int:
        """Number of listeners for one type, or for all types"""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(listeners) for listeners in self._listeners.values())
