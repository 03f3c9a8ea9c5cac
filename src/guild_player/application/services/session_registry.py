"""In-memory registry of guild sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...domain.shared.events import EventBus, SessionDestroyed, get_event_bus
from ...domain.shared.exceptions import ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ..interfaces.session_hooks import SessionRegistry
from .guild_session import GuildSession

if TYPE_CHECKING:
    from ...config.settings import SessionSettings
    from ..interfaces.audio_player import AudioPlayer
    from ..interfaces.audio_source import AudioResourceFactory
    from ..interfaces.session_hooks import NowPlayingNotifier
    from ..interfaces.voice_transport import VoiceTransport

logger = logging.getLogger(__name__)


class GuildSessionRegistry(SessionRegistry):
    """Holds at most one session per guild and tears sessions down on request."""

    def __init__(
        self,
        *,
        resource_factory: AudioResourceFactory,
        notifier: NowPlayingNotifier | None = None,
        settings: SessionSettings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._factory = resource_factory
        self._notifier = notifier
        self._settings = settings
        self._event_bus = event_bus or get_event_bus()
        self._sessions: dict[DiscordSnowflake, GuildSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def get(self, guild_id: DiscordSnowflake) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def add(self, session: GuildSession) -> None:
        """Register a session built elsewhere; a guild holds at most one."""
        self._ensure_vacant(session.guild_id)
        self._sessions[session.guild_id] = session
        logger.info(LogTemplates.SESSION_CREATED, session.guild_id)

    def _ensure_vacant(self, guild_id: DiscordSnowflake) -> None:
        if guild_id in self._sessions:
            raise ValidationError(
                ErrorMessages.SESSION_ALREADY_EXISTS.format(guild_id=guild_id), field="guild_id"
            )

    def create(
        self,
        guild_id: DiscordSnowflake,
        transport: VoiceTransport,
        player: AudioPlayer,
        **overrides: Any,
    ) -> GuildSession:
        """Build a session for a freshly joined voice channel and register it."""
        self._ensure_vacant(guild_id)
        options: dict[str, Any] = {
            "resource_factory": self._factory,
            "notifier": self._notifier,
            "settings": self._settings,
            "event_bus": self._event_bus,
        }
        options.update(overrides)
        session = GuildSession(
            guild_id=guild_id,
            transport=transport,
            player=player,
            registry=self,
            **options,
        )
        self.add(session)
        return session

    async def destroy(self, guild_id: DiscordSnowflake, reason: str = "") -> bool:
        session = self._sessions.pop(guild_id, None)
        if session is None:
            logger.debug(LogTemplates.SESSION_NOT_FOUND, guild_id)
            return False

        session.close()
        session.stop()
        session.transport.destroy()
        logger.info(LogTemplates.SESSION_DESTROYED, guild_id, reason or "requested")
        await self._event_bus.publish(SessionDestroyed(guild_id=guild_id, reason=reason))
        return True

    async def destroy_all(self) -> int:
        guild_ids = list(self._sessions)
        for guild_id in guild_ids:
            await self.destroy(guild_id, reason="shutdown")
        return len(guild_ids)
