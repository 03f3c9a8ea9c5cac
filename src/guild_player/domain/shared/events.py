"""Domain event bus for publishing and subscribing to session events."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from guild_player.domain.shared.messages import LogTemplates
from guild_player.domain.shared.types import DiscordSnowflake, NonEmptyStr, PositiveFloat

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


# === Playback Events ===


class TrackStartedPlaying(DomainEvent):
    guild_id: DiscordSnowflake
    track_link: str = ""
    track_variant: str = ""
    speed: PositiveFloat = 1.0


class TrackPlaybackFailed(DomainEvent):
    guild_id: DiscordSnowflake
    track_link: str = ""
    track_variant: str = ""
    error: str = ""


class QueueExhausted(DomainEvent):
    guild_id: DiscordSnowflake


class PlaybackStopped(DomainEvent):
    guild_id: DiscordSnowflake


# === Voice Events ===


class VoiceConnectionLost(DomainEvent):
    guild_id: DiscordSnowflake
    reason: str = ""


# === Session Events ===


class SessionDestroyed(DomainEvent):
    guild_id: DiscordSnowflake
    reason: str = ""


# === Event Bus ===


class EventBus:
    """In-memory pub/sub event bus for domain events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed handler to: %s", event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type.__name__)

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers for %s", event_type.__name__)
            return

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_type.__name__, e)

        await asyncio.gather(*(safe_call(handler) for handler in handlers))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get or create the global event bus singleton."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Reset the global event bus (for testing)."""
    global _event_bus
    if _event_bus is not None:
        _event_bus.clear()
    _event_bus = None
