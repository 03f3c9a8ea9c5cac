"""
Tests for bootstrap.py - Startup Entry Point

Tests for:
- Logging configured from settings
- Container creation and initialization
- Optional bot wiring
"""

from unittest.mock import MagicMock, patch

import pytest

from guild_player.bootstrap import bootstrap
from guild_player.config.settings import DatabaseSettings, Settings
from guild_player.infrastructure.discord.now_playing_notifier import DiscordNowPlayingNotifier


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        environment="test",
        log_level="debug",
        database=DatabaseSettings(url="sqlite:///:memory:"),
    )


class TestBootstrap:
    async def test_configures_logging_from_settings(self, settings):
        with patch("guild_player.bootstrap.setup_logging") as mock_setup:
            container = await bootstrap(settings=settings)

        mock_setup.assert_called_once_with("DEBUG")
        await container.shutdown()

    async def test_initializes_container(self, settings):
        with patch("guild_player.bootstrap.setup_logging"):
            container = await bootstrap(settings=settings)

        assert container.settings is settings
        assert container.database.is_initialized
        assert container.notifier is None
        await container.shutdown()

    async def test_wires_bot(self, settings):
        bot = MagicMock()
        with patch("guild_player.bootstrap.setup_logging"):
            container = await bootstrap(bot, settings=settings)

        assert container.bot is bot
        assert isinstance(container.notifier, DiscordNowPlayingNotifier)
        await container.shutdown()

    async def test_defaults_to_cached_settings(self, settings):
        with (
            patch("guild_player.bootstrap.get_settings", return_value=settings) as mock_get,
            patch("guild_player.bootstrap.setup_logging"),
        ):
            container = await bootstrap()

        mock_get.assert_called_once_with()
        assert container.settings is settings
        await container.shutdown()

    async def test_logs_environment(self, settings, caplog):
        caplog.set_level("INFO", logger="guild_player.bootstrap")
        with patch("guild_player.bootstrap.setup_logging"):
            container = await bootstrap(settings=settings)

        assert "environment: test" in caplog.text
        await container.shutdown()
