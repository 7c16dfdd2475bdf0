"""
Playlist model.

An ordered map of identifier to entry, most recently added first. Adding an
identifier that is already present does not move it.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from ..core.errors import InvalidIdentifier
from ..core.identifiers import validate_identifier


@dataclass(frozen=True)
class PlaylistEntry:
    """A queued video"""
    id: str
    source_url: str
    added_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "url": self.source_url, "addedAt": self.added_at.isoformat()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlaylistEntry":
        """Build an entry from its stored form; raises ValueError on bad data"""
        if not isinstance(data, dict):
            raise ValueError(f"Playlist entry must be an object, got {type(data).__name__}")

        try:
            identifier = validate_identifier(data["id"])
            added_at = datetime.fromisoformat(str(data["addedAt"]).replace("Z", "+00:00"))
        except (KeyError, TypeError, InvalidIdentifier) as e:
            raise ValueError(f"Malformed playlist entry: {data!r}") from e

        return cls(id=identifier, source_url=str(data.get("url", "")), added_at=added_at)


class Playlist:
    """Ordered, de-duplicated collection of playlist entries"""

    def __init__(self, entries: Optional[List[PlaylistEntry]] = None):
        self._entries: "OrderedDict[str, PlaylistEntry]" = OrderedDict()
        for entry in entries or []:
            self._entries.setdefault(entry.id, entry)

    def add(self, entry: PlaylistEntry) -> bool:
        """Insert at the front if absent; returns False when already queued"""
        if entry.id in self._entries:
            return False
        self._entries[entry.id] = entry
        self._entries.move_to_end(entry.id, last=False)
        return True

    def remove(self, identifier: str) -> Optional[PlaylistEntry]:
        return self._entries.pop(identifier, None)

    def get(self, identifier: str) -> Optional[PlaylistEntry]:
        return self._entries.get(identifier)

    def first(self) -> Optional[PlaylistEntry]:
        return next(iter(self._entries.values()), None)

    def ids(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __iter__(self) -> Iterator[PlaylistEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries.values()]

    @classmethod
    def from_list(cls, items: Any) -> "Playlist":
        """Rebuild from the stored JSON list; raises ValueError on bad data"""
        if not isinstance(items, list):
            raise ValueError(f"Stored playlist must be a list, got {type(items).__name__}")
        return cls([PlaylistEntry.from_dict(item) for item in items])
