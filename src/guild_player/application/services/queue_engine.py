"""Playback Queue Engine - serializes advancing a guild's queue to the next track."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from typing import TYPE_CHECKING, Any

from ...config.settings import SessionSettings
from ...domain.music.value_objects import AudioResourceOptions, PlayerStatus
from ...domain.shared.events import (
    DomainEvent,
    EventBus,
    QueueExhausted,
    TrackPlaybackFailed,
    TrackStartedPlaying,
    get_event_bus,
)
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.playback_clock import PlaybackTimeTracker
    from ...domain.music.queue import PlaybackQueue
    from ..interfaces.audio_player import AudioPlayer
    from ..interfaces.audio_source import AudioResourceFactory

logger = logging.getLogger(__name__)

TrackStartedCallback = Callable[["Track"], Awaitable[None]]


class PlaybackQueueEngine:
    """Owns the current track and the locked "advance to next track" procedure.

    Only one advance runs at a time. A call that arrives while another is in
    flight is dropped rather than queued; the player going idle afterwards
    triggers the next attempt.
    """

    def __init__(
        self,
        *,
        guild_id: DiscordSnowflake,
        queue: PlaybackQueue,
        player: AudioPlayer,
        resource_factory: AudioResourceFactory,
        tracker: PlaybackTimeTracker,
        settings: SessionSettings | None = None,
        event_bus: EventBus | None = None,
        on_track_started: TrackStartedCallback | None = None,
    ) -> None:
        self._guild_id = guild_id
        self._queue = queue
        self._player = player
        self._factory = resource_factory
        self._tracker = tracker
        self._settings = settings or SessionSettings()
        self._event_bus = event_bus or get_event_bus()
        self._on_track_started = on_track_started

        self._current: Track | None = None
        self._speed = self._settings.default_playback_speed
        self._locked = False
        self._halted = False
        self._played = False
        self._missed_idle = False
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def current_track(self) -> Track | None:
        return self._current

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_halted(self) -> bool:
        return self._halted

    @property
    def speed(self) -> float:
        """Speed the next produced resource will carry."""
        return self._speed

    @speed.setter
    def speed(self, value: float) -> None:
        self._speed = value

    def resource_options(self, seek: float | None = None) -> AudioResourceOptions:
        return AudioResourceOptions.for_speed(self._speed, seek=seek)

    # === Player events ===

    def on_player_state_change(self, old: PlayerStatus, new: PlayerStatus) -> None:
        # Entering Idle from anything else means a resource finished playing.
        if not new.is_idle or old.is_idle:
            return
        if not self._locked:
            self._schedule(self.advance())
        elif self._played and not self._halted:
            # The resource this advance started has already ended; retry on release.
            logger.debug(LogTemplates.ADVANCE_IDLE_DEFERRED, self._guild_id)
            self._missed_idle = True

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def join(self) -> None:
        """Wait until every advance scheduled by player events has finished."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def close(self) -> None:
        self._missed_idle = False
        current = asyncio.current_task()
        for task in list(self._pending):
            if task is not current:
                task.cancel()

    # === Queue operations ===

    async def enqueue(self, tracks: Sequence[Track], push_to_front: bool = False) -> None:
        self._queue.add(tracks, push_to_front=push_to_front)
        await self.advance()

    async def skip(self, extra_skips: int = 0) -> None:
        """Skip the current track, plus ``extra_skips`` more from the queue front."""
        dropped = self._queue.drop_front(extra_skips)
        logger.info(LogTemplates.QUEUE_SKIPPED, dropped, self._guild_id)
        await self.advance(force_skip=True)

    def publish_soon(self, event: DomainEvent) -> None:
        """Publish from synchronous code; the event goes out on the next loop turn."""
        self._schedule(self._publish(event))

    def halt(self) -> None:
        """Engage the lock for good so no later advance can restart playback."""
        self._halted = True
        self._locked = True
        self._current = None

    # === Advance ===

    async def advance(self, force_skip: bool = False) -> None:
        if self._locked:
            logger.debug(LogTemplates.ADVANCE_LOCKED, self._guild_id)
            return

        status = self._player.status
        if not force_skip and not status.is_idle:
            logger.debug(LogTemplates.ADVANCE_SKIPPED_NOT_IDLE, self._guild_id, status.value)
            return

        self._locked = True
        self._played = False
        try:
            await self._advance(force_skip)
        finally:
            if not self._halted:
                self._locked = False
                if self._missed_idle:
                    self._missed_idle = False
                    self._schedule(self.advance())

    def _next_track(self) -> Track | None:
        if not self._queue and not self._queue.is_looped:
            self._queue.unshuffle()

        # Exhausted a looped queue: refill it, reshuffling the loop if applicable.
        if not self._queue and self._queue.is_looped:
            count = self._queue.refill_from_loop()
            logger.debug(
                LogTemplates.ADVANCE_QUEUE_REFILLED,
                self._guild_id,
                count,
                self._queue.is_shuffled,
            )

        return self._queue.dequeue()

    async def _advance(self, force_skip: bool) -> None:
        failures = 0
        while True:
            track = self._next_track()
            self._current = track
            if track is None:
                if force_skip:
                    self._player.stop(force=True)
                logger.info(LogTemplates.ADVANCE_QUEUE_EXHAUSTED, self._guild_id)
                await self._publish(QueueExhausted(guild_id=self._guild_id))
                return

            try:
                resource = await self._factory.create(track, self.resource_options())
                if self._halted:
                    logger.info(LogTemplates.ADVANCE_DISCARDED_AFTER_STOP, self._guild_id, track)
                    return
                # Buffering delay is excluded: the clock starts on the next Playing report.
                self._tracker.reset(speed=self._speed)
                self._player.play(resource)
                self._played = True
            except Exception as e:
                failures += 1
                logger.warning(
                    LogTemplates.TRACK_FAILED, track.link, track.variant.value, self._guild_id, e
                )
                await self._publish(
                    TrackPlaybackFailed(
                        guild_id=self._guild_id,
                        track_link=track.link,
                        track_variant=track.variant.value,
                        error=str(e),
                    )
                )
                if failures >= self._settings.max_consecutive_failures:
                    logger.error(LogTemplates.ADVANCE_FAILURE_CAP, failures, self._guild_id)
                    self._current = None
                    self._player.stop(force=True)
                    return
                continue

            logger.info(LogTemplates.TRACK_STARTED, track.link, track.variant.value, self._guild_id)
            await self._publish(
                TrackStartedPlaying(
                    guild_id=self._guild_id,
                    track_link=track.link,
                    track_variant=track.variant.value,
                    speed=self._speed,
                )
            )
            await self._announce(track)
            return

    async def _announce(self, track: Track) -> None:
        if self._on_track_started is None:
            return
        try:
            await self._on_track_started(track)
        except Exception:
            logger.exception(LogTemplates.NOW_PLAYING_FAILED, self._guild_id)

    async def _publish(self, event: DomainEvent) -> None:
        await self._event_bus.publish(event)
