"""
Tube Relay

A personal video-playback relay: resolves external video identifiers into a
playable combined format and proxies the byte stream with range support so
that a browser-style client can seek.
"""

__version__ = "1.0.0"
__author__ = "Tube Relay Team"

from .main import TubeRelaySystem

__all__ = ["TubeRelaySystem"]
