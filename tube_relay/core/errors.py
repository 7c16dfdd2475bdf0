"""
Error taxonomy for Tube Relay.

Every failure the relay knows how to handle is one of these. The HTTP layer
maps them to status codes and the client maps them to placeholders.
"""

from typing import Optional


class TubeRelayError(Exception):
    """Base class for all relay errors"""

    status_code: int = 500
    public_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, identifier: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.identifier = identifier


class InvalidIdentifier(TubeRelayError):
    """Malformed identifier or unrecognized URL"""

    status_code = 400
    public_message = "Invalid video identifier"


class ResolutionFailure(TubeRelayError):
    """Metadata or format lookup failed, or no usable combined format exists"""

    status_code = 500
    public_message = "Failed to resolve video"


class StreamTransportFailure(TubeRelayError):
    """Upstream byte source failed"""

    status_code = 500
    public_message = "Streaming error"


class PersistenceFailure(TubeRelayError):
    """Local storage read or write failed"""

    status_code = 500
    public_message = "Failed to access local storage"


class RangeUnsatisfiable(TubeRelayError):
    """Requested byte range lies outside the resource"""

    status_code = 416
    public_message = "Range not satisfiable"

    def __init__(self, content_length: int, message: Optional[str] = None, identifier: Optional[str] = None):
        super().__init__(message, identifier)
        self.content_length = content_length
