"""
Process-wide keyboard routing.

Only one playback controller may listen to the keyboard at a time. When a
new controller acquires the hub, the previous registration is disposed
before the new handler is installed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class KeyEvent:
    """A key press as seen by the document"""
    key: str
    target_is_text_input: bool = False


class KeyboardRegistration:
    """Handle returned by KeyboardHub.acquire"""

    def __init__(self, hub: "KeyboardHub", owner: Any, handler: Callable[[KeyEvent], bool]):
        self._hub = hub
        self.owner = owner
        self.handler = handler
        self.disposed = False

    def dispose(self) -> None:
        """Release the keyboard if this registration still holds it"""
        if self.disposed:
            return
        self.disposed = True
        self._hub._release(self)


class KeyboardHub:
    """Routes key events to a single owner"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._current: Optional[KeyboardRegistration] = None

    @property
    def owner(self) -> Optional[Any]:
        return self._current.owner if self._current else None

    def acquire(self, owner: Any, handler: Callable[[KeyEvent], bool]) -> KeyboardRegistration:
        """Take ownership of the keyboard, disposing any previous owner"""
        if self._current is not None:
            self.logger.debug(f"Keyboard ownership moves from {self._current.owner!r} to {owner!r}")
            self._current.dispose()

        self._current = KeyboardRegistration(self, owner, handler)
        return self._current

    def _release(self, registration: KeyboardRegistration) -> None:
        if self._current is registration:
            self._current = None

    def dispatch(self, event: KeyEvent) -> bool:
        """Deliver a key event; returns True if it was handled"""
        if event.target_is_text_input or self._current is None:
            return False
        return bool(self._current.handler(event))


# Shared by every controller in the process
default_hub = KeyboardHub()
