"""Audio infrastructure - yt-dlp stream resolver and FFmpeg resource factory."""

from guild_player.infrastructure.audio.ffmpeg_source import (
    FFmpegArgs,
    FFmpegAudioResourceFactory,
    atempo_chain,
)
from guild_player.infrastructure.audio.ytdlp_resolver import (
    AudioFormatInfo,
    CacheEntry,
    StreamInfo,
    YtDlpOpts,
    YtDlpStreamResolver,
)

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "FFmpegArgs",
    "FFmpegAudioResourceFactory",
    "StreamInfo",
    "YtDlpOpts",
    "YtDlpStreamResolver",
    "atempo_chain",
]
