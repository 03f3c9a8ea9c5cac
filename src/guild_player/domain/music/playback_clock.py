"""Elapsed play-time bookkeeping for the current audio resource.

The audio pipeline does not report a position, so the elapsed time is
approximated from player state transitions and wall-clock reads.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from guild_player.domain.music.value_objects import PlayerStatus
from guild_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class PlaybackClock:
    """Timestamps and offsets for the resource in flight, all in milliseconds."""

    # Only set once the player actually reports Playing; buffering is excluded.
    started: float | None = None
    pause_started: float | None = None
    total_pause_ms: float = 0.0
    seek_offset_ms: float | None = None
    speed: float = 1.0


class PlaybackTimeTracker:
    """Converts player state transitions into an elapsed-time estimate."""

    def __init__(self, clock: Clock | None = None, speed: float = 1.0) -> None:
        self._clock = clock or monotonic_ms
        self._state = PlaybackClock(speed=speed)

    @property
    def state(self) -> PlaybackClock:
        return self._state

    @property
    def speed(self) -> float:
        return self._state.speed

    @property
    def is_paused(self) -> bool:
        return self._state.pause_started is not None

    def reset(self, speed: float, seek_offset_ms: float | None = None) -> None:
        """Start bookkeeping for a new resource (new track or seek)."""
        self._state = PlaybackClock(seek_offset_ms=seek_offset_ms, speed=speed)

    def on_player_state_change(self, old: PlayerStatus, new: PlayerStatus) -> None:
        state = self._state
        if new.is_playing and state.started is None:
            state.started = self._clock()

        # A replaced resource leaves Playing before the new one has started;
        # that is buffering, not a pause.
        if not new.is_playing and old.is_playing and state.started is not None:
            state.pause_started = self._clock()
            logger.debug(LogTemplates.PLAYTIME_PAUSED, state.pause_started)
        elif new.is_playing and not old.is_playing and state.pause_started is not None:
            paused_for = self._clock() - state.pause_started
            state.total_pause_ms += paused_for
            state.pause_started = None
            logger.debug(LogTemplates.PLAYTIME_RESUMED, paused_for, state.total_pause_ms)

    def elapsed_ms(self) -> float:
        """Approximate time played in the current resource, seek offset included."""
        state = self._state
        if state.started is None:
            return state.seek_offset_ms or 0.0

        now = self._clock()
        paused = state.total_pause_ms
        if state.pause_started is not None:
            paused += now - state.pause_started

        played = (now - state.started - paused) * state.speed
        if state.seek_offset_ms is not None:
            return played + state.seek_offset_ms
        return played
