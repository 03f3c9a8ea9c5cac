"""Application services for guild playback sessions."""

from guild_player.application.services.connection_supervisor import ConnectionSupervisor
from guild_player.application.services.guild_session import GuildSession
from guild_player.application.services.queue_engine import PlaybackQueueEngine
from guild_player.application.services.session_registry import GuildSessionRegistry

__all__ = [
    "ConnectionSupervisor",
    "GuildSession",
    "GuildSessionRegistry",
    "PlaybackQueueEngine",
]
