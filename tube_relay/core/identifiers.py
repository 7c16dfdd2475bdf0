"""
Media identifier validation and extraction.

Identifiers are 11-character tokens of letters, digits, ``-`` and ``_``. Users
may paste either the bare token or one of the known URL shapes.
"""

import re
from typing import Optional

from .errors import InvalidIdentifier

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

_URL_PATTERNS = [
    re.compile(r"youtube\.com/watch\?v=([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"youtube\.com/embed/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
]


def is_valid_identifier(value: str) -> bool:
    """Check the syntactic shape of an identifier"""
    return bool(value) and IDENTIFIER_PATTERN.fullmatch(value) is not None


def validate_identifier(value: str) -> str:
    """Return the identifier unchanged or raise InvalidIdentifier"""
    if not is_valid_identifier(value):
        raise InvalidIdentifier(identifier=value)
    return value


def extract_identifier(raw: str) -> Optional[str]:
    """Extract an identifier from user input, or None if nothing matches"""
    if not raw:
        return None

    text = raw.strip()
    for pattern in _URL_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)

    if is_valid_identifier(text):
        return text

    return None


def watch_url(identifier: str) -> str:
    """External page for an identifier, used as a fallback link"""
    return f"https://www.youtube.com/watch?v={identifier}"


def thumbnail_url(identifier: str) -> str:
    """Medium-quality thumbnail for playlist rows"""
    return f"https://img.youtube.com/vi/{identifier}/mqdefault.jpg"
