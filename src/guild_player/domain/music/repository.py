"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for data persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod


class PlayerUpdatesRepository(ABC):
    """Abstract repository for per-guild "now playing" channel settings."""

    @abstractmethod
    async def get_channel_id(self, guild_id: int) -> int | None:
        """Get the channel that receives now-playing messages.

        Args:
            guild_id: The Discord guild ID.

        Returns:
            The configured channel ID, or None if updates are disabled.
        """
        ...

    @abstractmethod
    async def set_channel(self, guild_id: int, channel_id: int) -> None:
        """Enable now-playing messages for a guild in the given channel."""
        ...

    @abstractmethod
    async def remove(self, guild_id: int) -> bool:
        """Disable now-playing messages for a guild.

        Returns:
            True if a setting was removed, False if none existed.
        """
        ...
