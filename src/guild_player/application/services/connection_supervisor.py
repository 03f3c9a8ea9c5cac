"""Connection Supervisor - reconnection and teardown policy for a voice transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any

from ...config.settings import SessionSettings
from ...domain.music.value_objects import DisconnectReason, TransportState, TransportStatus
from ...domain.shared.events import EventBus, VoiceConnectionLost, get_event_bus
from ...domain.shared.exceptions import TransportTimeoutError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..interfaces.session_hooks import SessionRegistry
    from ..interfaces.voice_transport import VoiceTransport

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ConnectionSupervisor:
    """Reacts to voice transport state changes.

    - Disconnected with the ambiguous close code: the bot was either moved or
      kicked. Give the transport a grace period to start reconnecting on its
      own, otherwise treat it as kicked and tear the session down.
    - Any other disconnect: rejoin with a linear backoff until the attempts
      run out, then tear down.
    - Destroyed: stop playback.
    - Signalling/Connecting: the connection must become ready in time, so it
      never lingers half-established.
    """

    def __init__(
        self,
        *,
        guild_id: DiscordSnowflake,
        transport: VoiceTransport,
        registry: SessionRegistry,
        on_destroyed: Callable[[], None],
        settings: SessionSettings | None = None,
        event_bus: EventBus | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._guild_id = guild_id
        self._transport = transport
        self._registry = registry
        self._on_destroyed = on_destroyed
        self._settings = settings or SessionSettings()
        self._event_bus = event_bus or get_event_bus()
        self._sleep = sleep

        self._awaiting_ready = False
        self._torn_down = False
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def is_awaiting_ready(self) -> bool:
        return self._awaiting_ready

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    def rejoin_delay(self, attempts: int) -> float:
        """Seconds to wait before the next rejoin, growing linearly with attempts."""
        return (attempts + 1) * self._settings.rejoin_backoff_step_s

    def on_state_change(self, old: TransportState, new: TransportState) -> None:
        logger.debug(LogTemplates.TRANSPORT_STATE_CHANGED, self._guild_id, old, new)

        if new.status is TransportStatus.DISCONNECTED:
            self._schedule(self._handle_disconnect(new))
        elif new.status is TransportStatus.DESTROYED:
            logger.info(LogTemplates.TRANSPORT_DESTROYED, self._guild_id)
            self._on_destroyed()
        elif new.status.is_establishing and not self._awaiting_ready:
            self._awaiting_ready = True
            self._schedule(self._await_ready())

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def join(self) -> None:
        """Wait for every pending timer to run its course."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def close(self) -> None:
        current = asyncio.current_task()
        for task in list(self._pending):
            if task is not current:
                task.cancel()

    def _is_ambiguous_close(self, state: TransportState) -> bool:
        return (
            state.reason is DisconnectReason.WEBSOCKET_CLOSE
            and state.close_code == self._settings.ambiguous_close_code
        )

    async def _handle_disconnect(self, state: TransportState) -> None:
        if self._is_ambiguous_close(state):
            grace = self._settings.ambiguous_disconnect_grace_s
            logger.info(
                LogTemplates.TRANSPORT_AMBIGUOUS_CLOSE, self._guild_id, state.close_code, grace
            )
            try:
                # Probably moved voice channel
                await self._transport.wait_for(TransportStatus.CONNECTING, grace)
            except TransportTimeoutError:
                # Probably removed from voice channel
                logger.info(LogTemplates.TRANSPORT_PROBABLY_KICKED, self._guild_id)
                await self._teardown("kicked")
            return

        attempts = self._transport.rejoin_attempts
        max_attempts = self._settings.max_rejoin_attempts
        if attempts < max_attempts:
            delay = self.rejoin_delay(attempts)
            logger.info(
                LogTemplates.TRANSPORT_REJOIN_SCHEDULED,
                self._guild_id,
                delay,
                attempts + 1,
                max_attempts,
            )
            await self._sleep(delay)
            self._transport.rejoin()
        else:
            logger.warning(LogTemplates.TRANSPORT_REJOIN_EXHAUSTED, self._guild_id, max_attempts)
            await self._teardown("rejoin attempts exhausted")

    async def _await_ready(self) -> None:
        timeout = self._settings.readiness_timeout_s
        try:
            await self._transport.wait_for(TransportStatus.READY, timeout)
        except TransportTimeoutError:
            logger.warning(LogTemplates.TRANSPORT_NOT_READY, self._guild_id, timeout)
            await self._teardown("not ready in time")
        finally:
            self._awaiting_ready = False

    async def _teardown(self, reason: str) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        await self._event_bus.publish(VoiceConnectionLost(guild_id=self._guild_id, reason=reason))
        try:
            await self._registry.destroy(self._guild_id, reason=reason)
        except Exception:
            logger.exception(LogTemplates.SESSION_TEARDOWN_FAILED, self._guild_id)
