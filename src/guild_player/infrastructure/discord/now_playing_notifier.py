"""Posts a now-playing message to a guild's configured player-updates channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from guild_player.application.interfaces.session_hooks import NowPlayingNotifier
from guild_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...application.services.guild_session import GuildSession
    from ...domain.music.repository import PlayerUpdatesRepository

logger = logging.getLogger(__name__)

UP_NEXT_LIMIT = 3


class DiscordNowPlayingNotifier(NowPlayingNotifier):
    """Sends a now-playing embed when a guild has player updates enabled.

    Failures are logged and never reach the session: a missing channel or a
    failed send must not interrupt playback.
    """

    def __init__(self, bot: discord.Client, repository: PlayerUpdatesRepository) -> None:
        self._bot = bot
        self._repository = repository

    async def notify(self, session: GuildSession) -> None:
        try:
            await self._notify(session)
        except Exception:
            logger.exception(LogTemplates.NOW_PLAYING_FAILED, session.guild_id)

    async def _notify(self, session: GuildSession) -> None:
        channel_id = await self._repository.get_channel_id(session.guild_id)
        if channel_id is None:
            logger.debug(LogTemplates.NOW_PLAYING_NO_CHANNEL, session.guild_id)
            return

        channel = self._bot.get_channel(channel_id) or await self._bot.fetch_channel(channel_id)
        if not isinstance(channel, discord.TextChannel | discord.Thread):
            logger.warning(LogTemplates.NOW_PLAYING_NOT_TEXT, channel_id, session.guild_id)
            return

        embed = self.build_now_playing_embed(session)
        if embed is None:
            return
        await channel.send(embed=embed)
        logger.debug(LogTemplates.NOW_PLAYING_SENT, session.guild_id, channel_id)

    @staticmethod
    def build_now_playing_embed(session: GuildSession) -> discord.Embed | None:
        track = session.get_current_track()
        if track is None:
            return None

        embed = discord.Embed(
            title="\U0001f3b5 Now Playing",
            description=track.link,
            color=discord.Color.green(),
        )
        embed.add_field(name="Source", value=track.variant.value, inline=True)

        speed = session.get_playback_speed()
        if speed != 1:
            embed.add_field(name="Speed", value=f"{speed:g}x", inline=True)

        flags = []
        if session.is_looped():
            flags.append("\U0001f501 Looped")
        if session.is_shuffled():
            flags.append("\U0001f500 Shuffled")
        if flags:
            embed.add_field(name="Mode", value=" ".join(flags), inline=True)

        upcoming = session.queue[:UP_NEXT_LIMIT]
        if upcoming:
            embed.add_field(
                name="⏭️ Up Next",
                value="\n".join(f"{idx}. {t.link}" for idx, t in enumerate(upcoming, start=1)),
                inline=False,
            )
        return embed
