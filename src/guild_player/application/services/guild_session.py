"""Guild Session - composition root for one guild's voice playback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ...config.settings import SessionSettings
from ...domain.music.playback_clock import Clock, PlaybackTimeTracker
from ...domain.music.queue import PlaybackQueue
from ...domain.music.value_objects import PlayerStatus
from ...domain.shared.events import EventBus, PlaybackStopped, get_event_bus
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .connection_supervisor import ConnectionSupervisor, Sleep
from .queue_engine import PlaybackQueueEngine

if TYPE_CHECKING:
    import random

    from ...domain.music.entities import Track
    from ..interfaces.audio_player import AudioPlayer
    from ..interfaces.audio_source import AudioResourceFactory
    from ..interfaces.session_hooks import NowPlayingNotifier, SessionRegistry
    from ..interfaces.voice_transport import VoiceTransport

logger = logging.getLogger(__name__)


class GuildSession:
    """Public control surface for a guild's queue, player and voice transport.

    The session subscribes to the transport and player on construction and
    unsubscribes in :meth:`close`.
    """

    def __init__(
        self,
        *,
        guild_id: DiscordSnowflake,
        transport: VoiceTransport,
        player: AudioPlayer,
        resource_factory: AudioResourceFactory,
        registry: SessionRegistry,
        notifier: NowPlayingNotifier | None = None,
        settings: SessionSettings | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        sleep: Sleep = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._guild_id = guild_id
        self._transport = transport
        self._player = player
        self._factory = resource_factory
        self._notifier = notifier
        self._settings = settings or SessionSettings()
        self._event_bus = event_bus or get_event_bus()

        self._queue = PlaybackQueue(rng=rng)
        self._tracker = PlaybackTimeTracker(clock=clock, speed=self._settings.default_playback_speed)
        self._engine = PlaybackQueueEngine(
            guild_id=guild_id,
            queue=self._queue,
            player=player,
            resource_factory=resource_factory,
            tracker=self._tracker,
            settings=self._settings,
            event_bus=self._event_bus,
            on_track_started=self._announce if notifier is not None else None,
        )
        self._supervisor = ConnectionSupervisor(
            guild_id=guild_id,
            transport=transport,
            registry=registry,
            on_destroyed=self.stop,
            settings=self._settings,
            event_bus=self._event_bus,
            sleep=sleep,
        )

        self._unsubscribers = [
            transport.subscribe(self._supervisor.on_state_change),
            player.subscribe(self._tracker.on_player_state_change),
            player.subscribe(self._engine.on_player_state_change),
        ]
        transport.attach_player(player)
        logger.debug(LogTemplates.SESSION_CREATED, guild_id)

    # === Collaborators ===

    @property
    def guild_id(self) -> DiscordSnowflake:
        return self._guild_id

    @property
    def transport(self) -> VoiceTransport:
        return self._transport

    @property
    def player(self) -> AudioPlayer:
        return self._player

    @property
    def engine(self) -> PlaybackQueueEngine:
        return self._engine

    @property
    def supervisor(self) -> ConnectionSupervisor:
        return self._supervisor

    # === Queue ===

    @property
    def queue(self) -> list[Track]:
        return self._queue.tracks

    @property
    def loop_queue(self) -> list[Track]:
        return self._queue.loop_tracks

    def get_current_track(self) -> Track | None:
        return self._engine.current_track

    def loop(self) -> None:
        self._queue.loop(self._engine.current_track)

    def unloop(self) -> None:
        self._queue.unloop()

    def is_looped(self) -> bool:
        return self._queue.is_looped

    def shuffle(self) -> None:
        self._queue.shuffle()

    def unshuffle(self) -> None:
        """Stop reshuffling the loop; the current order is kept as is."""
        self._queue.unshuffle()

    def is_shuffled(self) -> bool:
        return self._queue.is_shuffled

    def reverse(self) -> None:
        self._queue.reverse()

    def clear(self) -> None:
        self._queue.clear()

    def remove(self, index: int) -> Track | None:
        return self._queue.remove(index)

    def move(self, from_index: int, to_index: int) -> Track | None:
        return self._queue.move(from_index, to_index)

    async def enqueue(self, tracks: Sequence[Track], push_to_front: bool = False) -> None:
        await self._engine.enqueue(tracks, push_to_front=push_to_front)

    async def skip(self, extra_skips: int = 0) -> None:
        """Skip the current track.

        Args:
            extra_skips: Additional tracks to drop from the front of the queue.
        """
        await self._engine.skip(extra_skips)

    # === Player ===

    def pause(self) -> bool:
        return self._player.pause()

    def resume(self) -> bool:
        return self._player.unpause()

    def is_paused(self) -> bool:
        return self._player.status is PlayerStatus.PAUSED

    def stop(self) -> None:
        """Empty the queue and stop the player for good.

        The queue lock stays engaged afterwards, so neither an advance already
        in flight nor a later idle event can restart playback.
        """
        self._engine.halt()
        self._queue.clear()
        self._tracker.reset(speed=self._engine.speed)
        self._player.stop(force=True)
        logger.info(LogTemplates.SESSION_STOPPED, self._guild_id)
        self._engine.publish_soon(PlaybackStopped(guild_id=self._guild_id))

    def set_playback_speed(self, speed: float) -> bool:
        """Set the speed for the next resource produced; the current one is unaffected.

        Returns False, leaving the speed unchanged, for a non-positive value.
        """
        if speed <= 0:
            logger.warning(LogTemplates.SPEED_REJECTED, speed, self._guild_id)
            return False
        self._engine.speed = speed
        return True

    def get_playback_speed(self) -> float:
        """Speed of the resource currently in flight."""
        return self._tracker.speed

    async def seek(self, seconds: float) -> bool:
        """Restart the current track at *seconds* with a fresh resource.

        Returns False when nothing is playing, the offset is negative, the
        resource could not be made, or the session stopped or moved on to another
        track while it was loading. Whatever is playing keeps playing then.
        """
        track = self._engine.current_track
        if track is None:
            return False
        if seconds < 0:
            logger.warning(LogTemplates.SEEK_REJECTED, seconds, self._guild_id)
            return False
        try:
            resource = await self._factory.create(
                track, self._engine.resource_options(seek=seconds)
            )
        except Exception as e:
            logger.warning(
                LogTemplates.TRACK_FAILED, track.link, track.variant.value, self._guild_id, e
            )
            return False
        if self._engine.is_halted or self._engine.current_track is not track:
            logger.info(LogTemplates.SEEK_DISCARDED, self._guild_id, seconds)
            return False
        # It could buffer before starting, so the start time is set on the next Playing report.
        self._tracker.reset(speed=self._engine.speed, seek_offset_ms=seconds * 1000)
        self._player.play(resource)
        logger.info(LogTemplates.TRACK_SEEKED, seconds, track.link, self._guild_id)
        return True

    def get_current_track_play_time(self) -> float:
        """Approximate milliseconds played in the current resource."""
        return self._tracker.elapsed_ms()

    # === Lifecycle ===

    async def _announce(self, track: Track) -> None:
        if self._notifier is not None:
            await self._notifier.notify(self)

    async def join(self) -> None:
        """Wait for pending advances and connection timers."""
        await self._engine.join()
        await self._supervisor.join()

    def close(self) -> None:
        """Unsubscribe from the transport and player and cancel pending work."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._engine.close()
        self._supervisor.close()
        logger.debug(LogTemplates.SESSION_CLOSED, self._guild_id)
