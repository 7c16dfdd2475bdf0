"""
Local key/value persistence for the playback client.

LocalStorage keeps string values under string keys in a single JSON file,
the way browser local storage does. PlaylistStore serializes the playlist
under one key and never lets a storage problem block playback.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import aiofiles

from ..core.config import ClientConfig
from ..core.errors import PersistenceFailure
from ..core.logging_config import get_error_tracker
from .playlist import Playlist


class LocalStorage:
    """JSON file backed string key/value store"""

    def __init__(self, path: str):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)

    async def _read_all(self) -> Dict[str, str]:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise PersistenceFailure(f"Cannot read {self.path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise PersistenceFailure(f"Corrupt storage file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceFailure(f"Corrupt storage file {self.path}: expected an object")
        return data

    async def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2))
        except OSError as e:
            raise PersistenceFailure(f"Cannot write {self.path}: {e}") from e

    async def get_item(self, key: str) -> Optional[str]:
        data = await self._read_all()
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        try:
            data = await self._read_all()
        except PersistenceFailure as e:
            self.logger.warning(f"Discarding unreadable storage: {e}")
            data = {}
        data[key] = value
        await self._write_all(data)

    async def remove_item(self, key: str) -> None:
        data = await self._read_all()
        if data.pop(key, None) is not None:
            await self._write_all(data)


class PlaylistStore:
    """Loads and saves the playlist under a single storage key"""

    def __init__(self, storage: LocalStorage, key: str = ClientConfig.storage_key):
        self.storage = storage
        self.key = key
        self.logger = logging.getLogger(__name__)
        self.error_tracker = get_error_tracker("playlist_store")

    @classmethod
    def from_config(cls, config: ClientConfig) -> "PlaylistStore":
        """Store backed by ``config.storage_file`` under ``config.storage_key``"""
        return cls(LocalStorage(config.storage_file), config.storage_key)

    async def load(self) -> Playlist:
        """Stored playlist, or an empty one when missing or unreadable"""
        try:
            raw = await self.storage.get_item(self.key)
            if raw is None:
                return Playlist()
            return Playlist.from_list(json.loads(raw))
        except (PersistenceFailure, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            self.error_tracker.log_warning(f"Starting with an empty playlist: {e}", "load")
            return Playlist()

    async def save(self, playlist: Playlist) -> bool:
        """Persist the playlist; a failed write is logged and skipped"""
        try:
            await self.storage.set_item(self.key, json.dumps(playlist.to_list()))
            return True
        except PersistenceFailure as e:
            self.error_tracker.log_error(e, "save", exc_info=False)
            return False
