"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite repositories)
- Discord (audio player, now-playing notifier)
- Audio (yt-dlp, FFmpeg)
"""

from guild_player.infrastructure.discord.audio_player import DiscordAudioPlayer
from guild_player.infrastructure.persistence.database import Database

__all__ = [
    "DiscordAudioPlayer",
    "Database",
]
