"""
Music Bounded Context

Domain logic for tracks, the play queue and play-time bookkeeping.
"""

from guild_player.domain.music.entities import Track
from guild_player.domain.music.playback_clock import PlaybackClock, PlaybackTimeTracker
from guild_player.domain.music.queue import PlaybackQueue
from guild_player.domain.music.repository import PlayerUpdatesRepository
from guild_player.domain.music.value_objects import (
    AudioResourceOptions,
    DisconnectReason,
    PlayerStatus,
    TrackVariant,
    TransportState,
    TransportStatus,
)

__all__ = [
    # Entities
    "Track",
    # Value Objects
    "TrackVariant",
    "AudioResourceOptions",
    "PlayerStatus",
    "TransportStatus",
    "TransportState",
    "DisconnectReason",
    # State
    "PlaybackQueue",
    "PlaybackClock",
    "PlaybackTimeTracker",
    # Repository
    "PlayerUpdatesRepository",
]
