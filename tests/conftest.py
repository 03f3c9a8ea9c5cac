from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from guild_player.application.interfaces.audio_player import AudioPlayer
from guild_player.application.interfaces.session_hooks import SessionRegistry
from guild_player.application.interfaces.voice_transport import VoiceTransport
from guild_player.config.settings import SessionSettings
from guild_player.domain.music.entities import Track
from guild_player.domain.music.value_objects import (
    PlayerStatus,
    TrackVariant,
    TransportState,
    TransportStatus,
)
from guild_player.domain.shared.events import DomainEvent, EventBus, reset_event_bus

# ============================================================================
# Fakes
# ============================================================================


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakePlayer(AudioPlayer):
    """Player that reports transitions synchronously, like the discord.py one."""

    def __init__(self) -> None:
        self._status = PlayerStatus.IDLE
        self._listeners: list[Any] = []
        self.played: list[Any] = []
        self.play_error: Exception | None = None

    @property
    def status(self) -> PlayerStatus:
        return self._status

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, new: PlayerStatus) -> None:
        old = self._status
        if old is new:
            return
        self._status = new
        for listener in list(self._listeners):
            listener(old, new)

    def play(self, resource: Any) -> None:
        if self.play_error is not None:
            raise self.play_error
        self.played.append(resource)
        self.emit(PlayerStatus.BUFFERING)
        self.emit(PlayerStatus.PLAYING)

    def finish(self) -> None:
        """The current resource ran out of frames."""
        self.emit(PlayerStatus.IDLE)

    def pause(self) -> bool:
        if self._status is not PlayerStatus.PLAYING:
            return False
        self.emit(PlayerStatus.PAUSED)
        return True

    def unpause(self) -> bool:
        if self._status is not PlayerStatus.PAUSED:
            return False
        self.emit(PlayerStatus.PLAYING)
        return True

    def stop(self, force: bool = False) -> bool:
        if self._status is PlayerStatus.IDLE:
            return False
        self.emit(PlayerStatus.IDLE)
        return True


class FakeTransport(VoiceTransport):
    def __init__(self) -> None:
        self._state = TransportState(TransportStatus.READY)
        self._listeners: list[Any] = []
        self.attempts = 0
        self.rejoin_calls = 0
        self.attached: AudioPlayer | None = None
        self.destroyed = False
        self.wait_for_mock = AsyncMock()

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def rejoin_attempts(self) -> int:
        return self.attempts

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def rejoin(self) -> bool:
        self.rejoin_calls += 1
        self.attempts += 1
        return True

    async def wait_for(self, status: TransportStatus, timeout: float) -> None:
        await self.wait_for_mock(status, timeout)

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, new: TransportState) -> None:
        old = self._state
        self._state = new
        for listener in list(self._listeners):
            listener(old, new)

    def attach_player(self, player: AudioPlayer) -> None:
        self.attached = player

    def destroy(self) -> None:
        self.destroyed = True
        self.emit(TransportState(TransportStatus.DESTROYED))


class EventRecorder:
    """Collects every event of the subscribed types, in publish order."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[Any]:
        return [e for e in self.events if isinstance(e, event_type)]


def make_track(name: str, variant: TrackVariant = TrackVariant.YOUTUBE) -> Track:
    return Track(link=f"https://example.com/{name}", variant=variant)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Keep the global event bus from leaking handlers between tests."""
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def recorder(event_bus):
    from guild_player.domain.shared import events

    rec = EventRecorder()
    for event_type in (
        events.TrackStartedPlaying,
        events.TrackPlaybackFailed,
        events.QueueExhausted,
        events.PlaybackStopped,
        events.VoiceConnectionLost,
        events.SessionDestroyed,
    ):
        event_bus.subscribe(event_type, rec)
    return rec


@pytest.fixture
def clock():
    return FakeClock(1_000.0)


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def resource_factory():
    """Factory whose resources are plain strings naming the track link."""
    factory = MagicMock()
    factory.create = AsyncMock(side_effect=lambda track, options: f"resource:{track.link}")
    return factory


@pytest.fixture
def registry():
    return MagicMock(spec=SessionRegistry)


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def session_settings():
    return SessionSettings()


@pytest.fixture
def session(transport, player, resource_factory, registry, session_settings, event_bus, clock, sleep):
    """A session wired to fakes; the notifier is left out."""
    import random

    from guild_player.application.services.guild_session import GuildSession

    return GuildSession(
        guild_id=123456789,
        transport=transport,
        player=player,
        resource_factory=resource_factory,
        registry=registry,
        settings=session_settings,
        event_bus=event_bus,
        clock=clock,
        sleep=sleep,
        rng=random.Random(7),
    )


@pytest.fixture(name="make_track")
def make_track_fixture():
    return make_track


@pytest.fixture
def track_a():
    return make_track("a")


@pytest.fixture
def track_b():
    return make_track("b")


@pytest.fixture
def track_c():
    return make_track("c")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from guild_player.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def player_updates_repository(in_memory_database):
    from guild_player.infrastructure.persistence.repositories.player_updates_repository import (
        SQLitePlayerUpdatesRepository,
    )

    return SQLitePlayerUpdatesRepository(in_memory_database)
