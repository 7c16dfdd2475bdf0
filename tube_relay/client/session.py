"""
Playlist/session controller.

Owns the playlist, the active video and whatever currently fills the player
area: a placeholder or a bound PlaybackController. Metadata results are
tagged with a generation number so that a slow response for an older
selection never replaces a newer one.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from ..core.config import ClientConfig
from ..core.errors import InvalidIdentifier, ResolutionFailure
from ..core.identifiers import extract_identifier, thumbnail_url
from ..core.logging_config import get_error_tracker
from .api_client import MetadataClient
from .keyboard import KeyboardHub
from .media import MediaElement, FullscreenHost
from .playback import PlaybackController
from .playlist import Playlist, PlaylistEntry
from .storage import PlaylistStore
from .timers import Scheduler
from .views import Placeholder, PlayerView, PlaylistRow, PlaylistView


class SessionController:
    """Coordinates the playlist, persistence and the active player"""

    def __init__(
        self,
        metadata_client: MetadataClient,
        store: PlaylistStore,
        element_factory: Callable[[], MediaElement],
        fullscreen_host: Optional[FullscreenHost] = None,
        scheduler: Optional[Scheduler] = None,
        keyboard_hub: Optional[KeyboardHub] = None,
        config: Optional[ClientConfig] = None
    ):
        self.metadata_client = metadata_client
        self.store = store
        self.element_factory = element_factory
        self.fullscreen_host = fullscreen_host
        self.scheduler = scheduler
        self.keyboard_hub = keyboard_hub
        self.config = config or ClientConfig()
        self.logger = logging.getLogger(__name__)
        self.error_tracker = get_error_tracker("session")

        self.playlist = Playlist()
        self.active_id: Optional[str] = None
        self.placeholder: Optional[Placeholder] = Placeholder.empty()
        self.player_view: Optional[PlayerView] = None
        self.controller: Optional[PlaybackController] = None
        self.playlist_view = PlaylistView()

        self._generation = 0

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        element_factory: Callable[[], MediaElement],
        fullscreen_host: Optional[FullscreenHost] = None,
        scheduler: Optional[Scheduler] = None,
        keyboard_hub: Optional[KeyboardHub] = None
    ) -> "SessionController":
        """Session talking to ``config.api_base_url`` and persisting to ``config.storage_file``"""
        return cls(
            MetadataClient(config),
            PlaylistStore.from_config(config),
            element_factory,
            fullscreen_host=fullscreen_host,
            scheduler=scheduler,
            keyboard_hub=keyboard_hub,
            config=config
        )

    async def start(self) -> None:
        """Restore the persisted playlist and play its first entry"""
        self.playlist = await self.store.load()
        self.logger.info(f"Restored playlist with {len(self.playlist)} entries")
        self.render_playlist()

        first = self.playlist.first()
        if first is not None:
            await self.play_video(first.id)

    async def load_video(self, raw_input: str) -> str:
        """Queue the video named by a URL or identifier and play it"""
        text = (raw_input or "").strip()
        if not text:
            raise InvalidIdentifier("Please enter a YouTube URL")

        identifier = extract_identifier(text)
        if identifier is None:
            raise InvalidIdentifier("Please enter a valid YouTube URL", identifier=text)

        if self.playlist.add(PlaylistEntry(id=identifier, source_url=text, added_at=datetime.now())):
            await self.store.save(self.playlist)

        await self.play_video(identifier)
        return identifier

    async def play_video(self, identifier: str) -> None:
        """Make ``identifier`` active and bind a player once metadata arrives"""
        self._generation += 1
        generation = self._generation

        self._dispose_controller()
        self.active_id = identifier
        self.player_view = None
        self.placeholder = Placeholder.loading()
        self.render_playlist()

        controller = PlaybackController(
            self.element_factory(),
            fullscreen_host=self.fullscreen_host,
            scheduler=self.scheduler,
            keyboard_hub=self.keyboard_hub,
            config=self.config
        )
        controller.begin_loading()
        self.controller = controller

        try:
            info = await self.metadata_client.get_video_info(identifier)
        except ResolutionFailure as e:
            if generation != self._generation:
                return
            self.error_tracker.log_error(e, f"play_video {identifier}", exc_info=False)
            controller.fail()
            self.placeholder = Placeholder.error(identifier)
            self.render_playlist()
            return

        if generation != self._generation:
            self.logger.debug(f"Discarding stale metadata for {identifier}")
            return

        stream_url = self.metadata_client.stream_url(identifier)
        self.player_view = PlayerView(
            identifier=identifier,
            stream_url=stream_url,
            poster_url=info.thumbnail,
            title=info.title,
            author=info.author,
            description=info.description
        )
        self.placeholder = None
        controller.ready(stream_url)
        self.render_playlist()

    async def remove_video(self, identifier: str) -> None:
        """Drop a video; removing the active one advances to the new first entry"""
        if self.playlist.remove(identifier) is None:
            return
        await self.store.save(self.playlist)

        if identifier == self.active_id:
            self.active_id = None
            first = self.playlist.first()
            if first is not None:
                await self.play_video(first.id)
                return
            self._reset()

        self.render_playlist()

    def render_playlist(self) -> PlaylistView:
        """Project the playlist into rows; safe to call any number of times"""
        rows = [
            PlaylistRow(
                identifier=entry.id,
                thumbnail_url=thumbnail_url(entry.id),
                title=f"Video ID: {entry.id}",
                added_at_text=entry.added_at.strftime("%Y-%m-%d %H:%M"),
                active=entry.id == self.active_id
            )
            for entry in self.playlist
        ]
        self.playlist_view = PlaylistView(rows=rows)
        return self.playlist_view

    def _reset(self) -> None:
        # Invalidate any metadata request still in flight
        self._generation += 1
        self._dispose_controller()
        self.player_view = None
        self.placeholder = Placeholder.empty()

    def _dispose_controller(self) -> None:
        if self.controller is not None:
            self.controller.dispose()
            self.controller = None

    async def close(self) -> None:
        self._dispose_controller()
        await self.metadata_client.close()
