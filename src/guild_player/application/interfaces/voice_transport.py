"""Port interface for the real-time voice connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from guild_player.domain.music.value_objects import TransportState, TransportStatus

if TYPE_CHECKING:
    from .audio_player import AudioPlayer

TransportListener = Callable[[TransportState, TransportState], None]
Unsubscribe = Callable[[], None]


class VoiceTransport(ABC):
    """Interface for the voice connection a session streams through."""

    @property
    @abstractmethod
    def state(self) -> TransportState:
        ...

    @property
    @abstractmethod
    def rejoin_attempts(self) -> int:
        """Number of rejoins requested since the connection was last ready."""
        ...

    @abstractmethod
    def rejoin(self) -> bool:
        """Ask the transport to reconnect to its voice channel."""
        ...

    @abstractmethod
    async def wait_for(self, status: TransportStatus, timeout: float) -> None:
        """Return once the transport is in *status*.

        Raises:
            TransportTimeoutError: If *status* is not reached within *timeout* seconds.
        """
        ...

    @abstractmethod
    def subscribe(self, listener: TransportListener) -> Unsubscribe:
        """Register a ``(old, new)`` state-change listener and return its remover."""
        ...

    @abstractmethod
    def attach_player(self, player: AudioPlayer) -> None:
        """Route the player's audio frames through this transport."""
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Permanently close the connection."""
        ...
