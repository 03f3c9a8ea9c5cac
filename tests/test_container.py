"""Tests for the dependency injection container."""

from unittest.mock import MagicMock

import pytest

from guild_player.application.services.session_registry import GuildSessionRegistry
from guild_player.config.container import Container, create_container
from guild_player.config.settings import DatabaseSettings, Settings
from guild_player.infrastructure.audio.ffmpeg_source import FFmpegAudioResourceFactory
from guild_player.infrastructure.audio.ytdlp_resolver import YtDlpStreamResolver
from guild_player.infrastructure.discord.now_playing_notifier import DiscordNowPlayingNotifier
from guild_player.infrastructure.persistence.repositories.player_updates_repository import (
    SQLitePlayerUpdatesRepository,
)


@pytest.fixture
def container():
    settings = Settings(_env_file=None, database=DatabaseSettings(url="sqlite:///:memory:"))
    return create_container(settings)


class TestContainer:
    def test_create_container(self, container):
        assert isinstance(container, Container)

    def test_bot_required(self, container):
        with pytest.raises(RuntimeError, match="Bot not initialized"):
            _ = container.bot

    def test_components_are_cached(self, container):
        assert container.database is container.database
        assert container.stream_resolver is container.stream_resolver
        assert container.session_registry is container.session_registry

    def test_component_types(self, container):
        assert isinstance(container.player_updates_repository, SQLitePlayerUpdatesRepository)
        assert isinstance(container.stream_resolver, YtDlpStreamResolver)
        assert isinstance(container.resource_factory, FFmpegAudioResourceFactory)
        assert isinstance(container.session_registry, GuildSessionRegistry)

    def test_notifier_needs_bot(self, container):
        assert container.notifier is None

        container.set_bot(MagicMock())

        assert isinstance(container.notifier, DiscordNowPlayingNotifier)

    async def test_lifecycle(self, container):
        await container.initialize()
        assert container.database.is_initialized

        await container.shutdown()
        assert not container.database.is_initialized

    async def test_shutdown_destroys_sessions(self, container, transport, player):
        await container.initialize()
        registry = container.session_registry
        registry.create(1, transport, player)

        await container.shutdown()

        assert len(registry) == 0
        assert transport.destroyed
