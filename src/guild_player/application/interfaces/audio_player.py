"""Port interface for the audio-frame player."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from guild_player.domain.music.value_objects import PlayerStatus

PlayerListener = Callable[[PlayerStatus, PlayerStatus], None]
Unsubscribe = Callable[[], None]


class AudioPlayer(ABC):
    """Interface for the component that streams an audio resource's frames."""

    @property
    @abstractmethod
    def status(self) -> PlayerStatus:
        ...

    @abstractmethod
    def play(self, resource: Any) -> None:
        """Start streaming *resource*, replacing whatever is playing."""
        ...

    @abstractmethod
    def pause(self) -> bool:
        ...

    @abstractmethod
    def unpause(self) -> bool:
        ...

    @abstractmethod
    def stop(self, force: bool = False) -> bool:
        """Stop streaming and go idle. Returns False if nothing was playing."""
        ...

    @abstractmethod
    def subscribe(self, listener: PlayerListener) -> Unsubscribe:
        """Register a ``(old, new)`` state-change listener and return its remover."""
        ...
