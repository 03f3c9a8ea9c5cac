"""Startup entry point for a host bot embedding guild playback sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from guild_player.config.container import create_container
from guild_player.config.settings import get_settings
from guild_player.domain.shared.messages import LogTemplates
from guild_player.utils.logging import setup_logging

if TYPE_CHECKING:
    import discord

    from guild_player.config.container import Container
    from guild_player.config.settings import Settings


async def bootstrap(
    bot: discord.Client | None = None, settings: Settings | None = None
) -> Container:
    """Configure logging, then build and initialize the container.

    Args:
        bot: Client used to post now-playing messages. Can also be set later
            with ``Container.set_bot``.
        settings: Defaults to the cached environment settings.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.CORE_STARTING, settings.environment, settings.log_level)

    container = create_container(settings)
    if bot is not None:
        container.set_bot(bot)
    await container.initialize()

    logger.info(LogTemplates.CORE_READY)
    return container
