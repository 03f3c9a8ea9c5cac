"""Dependency Injection Container

Wires settings, persistence, audio infrastructure and the session registry.
Components are created on first access and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import discord

    from ..application.interfaces.audio_source import AudioResourceFactory
    from ..application.interfaces.session_hooks import NowPlayingNotifier
    from ..application.services.session_registry import GuildSessionRegistry
    from ..domain.music.repository import PlayerUpdatesRepository
    from ..domain.shared.events import EventBus
    from ..infrastructure.audio.ytdlp_resolver import YtDlpStreamResolver
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    The now-playing notifier needs a Discord client; without one (set via
    ``set_bot``) sessions are built with no notifier at all.
    """

    settings: Settings
    _bot: discord.Client | None = None

    # Persistence layer
    _database: Database | None = None
    _player_updates_repository: PlayerUpdatesRepository | None = None

    # Infrastructure adapters
    _stream_resolver: YtDlpStreamResolver | None = None
    _resource_factory: AudioResourceFactory | None = None
    _notifier: NowPlayingNotifier | None = None

    # Application services
    _session_registry: GuildSessionRegistry | None = None

    def set_bot(self, bot: discord.Client) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> discord.Client:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    @property
    def event_bus(self) -> EventBus:
        from ..domain.shared.events import get_event_bus

        return get_event_bus()

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    @property
    def player_updates_repository(self) -> PlayerUpdatesRepository:
        if self._player_updates_repository is None:
            from ..infrastructure.persistence.repositories.player_updates_repository import (
                SQLitePlayerUpdatesRepository,
            )

            self._player_updates_repository = SQLitePlayerUpdatesRepository(self.database)
        return self._player_updates_repository

    # === Audio ===

    @property
    def stream_resolver(self) -> YtDlpStreamResolver:
        if self._stream_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpStreamResolver

            self._stream_resolver = YtDlpStreamResolver(self.settings.audio)
        return self._stream_resolver

    @property
    def resource_factory(self) -> AudioResourceFactory:
        if self._resource_factory is None:
            from ..infrastructure.audio.ffmpeg_source import FFmpegAudioResourceFactory

            self._resource_factory = FFmpegAudioResourceFactory(
                self.stream_resolver, self.settings.audio
            )
        return self._resource_factory

    @property
    def notifier(self) -> NowPlayingNotifier | None:
        if self._notifier is None and self._bot is not None:
            from ..infrastructure.discord.now_playing_notifier import (
                DiscordNowPlayingNotifier,
            )

            self._notifier = DiscordNowPlayingNotifier(self._bot, self.player_updates_repository)
        return self._notifier

    # === Sessions ===

    @property
    def session_registry(self) -> GuildSessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import GuildSessionRegistry

            self._session_registry = GuildSessionRegistry(
                resource_factory=self.resource_factory,
                notifier=self.notifier,
                settings=self.settings.session,
                event_bus=self.event_bus,
            )
        return self._session_registry

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Tear down every live session and close the database."""
        if self._session_registry is not None:
            try:
                await self._session_registry.destroy_all()
            except Exception as exc:
                logger.warning("Failed destroying sessions on shutdown: %r", exc)

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
