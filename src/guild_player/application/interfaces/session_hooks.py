"""Port interfaces for collaborators that outlive or observe a session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from guild_player.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..services.guild_session import GuildSession


class SessionRegistry(ABC):
    """Owns the per-guild sessions and tears them down."""

    @abstractmethod
    async def destroy(self, guild_id: DiscordSnowflake, reason: str = "") -> bool:
        """Stop and forget the session for *guild_id*. Returns False if none existed."""
        ...


class NowPlayingNotifier(ABC):
    """Announces the track a session has just started."""

    @abstractmethod
    async def notify(self, session: "GuildSession") -> None:
        ...
