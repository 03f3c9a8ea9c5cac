"""AudioPlayer implementation over a discord.py voice client."""

from __future__ import annotations

import asyncio
import logging

import discord

from guild_player.application.interfaces.audio_player import (
    AudioPlayer,
    PlayerListener,
    Unsubscribe,
)
from guild_player.domain.music.value_objects import PlayerStatus
from guild_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class DiscordAudioPlayer(AudioPlayer):
    """Drives a ``discord.VoiceClient`` and reports its state transitions.

    discord.py has no player state events, so transitions are emitted here:
    Buffering then Playing on ``play``, Paused/Playing on pause and unpause,
    and Idle when a source finishes. A source replaced by a newer ``play`` or
    by ``stop`` still fires its ``after`` callback from the audio thread;
    those stale callbacks are recognised by their generation and ignored.
    """

    def __init__(self, voice_client: discord.VoiceClient, guild_id: int) -> None:
        self._vc = voice_client
        self._guild_id = guild_id
        self._status = PlayerStatus.IDLE
        self._listeners: list[PlayerListener] = []
        self._generation = 0

    @property
    def status(self) -> PlayerStatus:
        return self._status

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._vc

    def subscribe(self, listener: PlayerListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_status(self, new: PlayerStatus) -> None:
        old = self._status
        if old is new:
            return
        self._status = new
        logger.debug(LogTemplates.PLAYER_STATE_CHANGED, self._guild_id, old.value, new.value)
        for listener in list(self._listeners):
            try:
                listener(old, new)
            except Exception:
                logger.exception(LogTemplates.PLAYER_LISTENER_ERROR, self._guild_id)

    def play(self, resource: discord.AudioSource) -> None:
        self._generation += 1
        generation = self._generation
        loop = asyncio.get_running_loop()

        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

        def after_callback(error: Exception | None = None) -> None:
            if error:
                logger.warning(LogTemplates.PLAYER_SOURCE_ERROR, self._guild_id, error)
            loop.call_soon_threadsafe(self._on_source_finished, generation)

        self._set_status(PlayerStatus.BUFFERING)
        try:
            self._vc.play(resource, after=after_callback)
        except discord.ClientException:
            self._generation += 1
            self._set_status(PlayerStatus.IDLE)
            raise
        self._set_status(PlayerStatus.PLAYING)

    def _on_source_finished(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug(LogTemplates.PLAYER_STALE_CALLBACK, self._guild_id)
            return
        self._set_status(PlayerStatus.IDLE)

    def pause(self) -> bool:
        if not self._vc.is_playing():
            return False
        self._vc.pause()
        self._set_status(PlayerStatus.PAUSED)
        return True

    def unpause(self) -> bool:
        if not self._vc.is_paused():
            return False
        self._vc.resume()
        self._set_status(PlayerStatus.PLAYING)
        return True

    def stop(self, force: bool = False) -> bool:
        if self._status is PlayerStatus.IDLE:
            return False
        # Any after-callback from the stopped source is now stale.
        self._generation += 1
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()
        self._set_status(PlayerStatus.IDLE)
        logger.debug(LogTemplates.PLAYER_STOPPED, self._guild_id)
        return True
