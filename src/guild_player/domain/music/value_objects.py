"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from guild_player.domain.shared.messages import ErrorMessages


class TrackVariant(Enum):
    """Source family a track link belongs to."""

    YOUTUBE = "youtube"
    SOUNDCLOUD = "soundcloud"
    SPOTIFY = "spotify"
    ARBITRARY = "arbitrary"


class PlayerStatus(Enum):
    """States reported by the audio player.

    State transitions:
    - IDLE -> BUFFERING (resource handed to the player)
    - BUFFERING -> PLAYING (first frames sent)
    - PLAYING <-> PAUSED (manual pause/unpause)
    - PLAYING <-> AUTO_PAUSED (no transport to send frames to)
    - Any -> IDLE (resource finished or player stopped)
    """

    IDLE = "idle"
    BUFFERING = "buffering"
    PLAYING = "playing"
    PAUSED = "paused"
    AUTO_PAUSED = "autopaused"

    @property
    def is_playing(self) -> bool:
        return self == PlayerStatus.PLAYING

    @property
    def is_idle(self) -> bool:
        return self == PlayerStatus.IDLE


class TransportStatus(Enum):
    """Connection states of the voice transport."""

    SIGNALLING = "signalling"
    CONNECTING = "connecting"
    READY = "ready"
    DISCONNECTED = "disconnected"
    DESTROYED = "destroyed"

    @property
    def is_establishing(self) -> bool:
        return self in {TransportStatus.SIGNALLING, TransportStatus.CONNECTING}


class DisconnectReason(Enum):
    """Why the voice transport entered the disconnected state."""

    WEBSOCKET_CLOSE = "websocket_close"
    ADAPTER_UNAVAILABLE = "adapter_unavailable"
    ENDPOINT_REMOVED = "endpoint_removed"
    MANUAL = "manual"


@dataclass(frozen=True)
class TransportState:
    """Snapshot of the voice transport carried by state-change notifications."""

    status: TransportStatus
    reason: DisconnectReason | None = None
    close_code: int | None = None

    def __str__(self) -> str:
        if self.close_code is not None:
            return f"{self.status.value}({self.close_code})"
        return self.status.value


@dataclass(frozen=True)
class AudioResourceOptions:
    """Options baked into an audio resource when it is created.

    ``speed`` is None for normal speed; ``seek`` is a start offset in seconds.
    """

    speed: float | None = None
    seek: float | None = None

    def __post_init__(self) -> None:
        if self.speed is not None and self.speed <= 0:
            raise ValueError(ErrorMessages.INVALID_PLAYBACK_SPEED.format(speed=self.speed))
        if self.seek is not None and self.seek < 0:
            raise ValueError(ErrorMessages.INVALID_SEEK_SECONDS.format(seconds=self.seek))

    @classmethod
    def for_speed(cls, speed: float, seek: float | None = None) -> AudioResourceOptions:
        """Build options, omitting the speed when it is the normal 1x."""
        return cls(speed=speed if speed != 1 else None, seek=seek)
