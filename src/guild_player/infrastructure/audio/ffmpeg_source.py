"""
FFmpeg Audio Resources

Infrastructure component that turns tracks into discord.py audio sources,
with the seek offset and playback speed baked into the ffmpeg arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import discord

from guild_player.application.interfaces.audio_source import AudioResourceFactory
from guild_player.config.settings import AudioSettings
from guild_player.domain.shared.exceptions import AudioResourceError
from guild_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.value_objects import AudioResourceOptions

logger = logging.getLogger(__name__)

# ffmpeg's atempo filter only accepts factors in this range, so larger
# changes are expressed as a chain of filters.
ATEMPO_MIN: float = 0.5
ATEMPO_MAX: float = 2.0


class StreamUrlResolver(Protocol):
    async def resolve_stream_url(self, link: str) -> str: ...


def atempo_chain(speed: float) -> list[float]:
    """Split *speed* into atempo factors that each stay within ffmpeg's limits."""
    if speed <= 0:
        raise ValueError(f"Playback speed must be greater than 0, got {speed}")
    factors: list[float] = []
    remaining = speed
    while remaining > ATEMPO_MAX:
        factors.append(ATEMPO_MAX)
        remaining /= ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        factors.append(ATEMPO_MIN)
        remaining /= ATEMPO_MIN
    factors.append(round(remaining, 6))
    return factors


@dataclass
class FFmpegArgs:
    """Builds ffmpeg argument strings for one resource."""

    before_options: str = ""
    options: str = "-vn"
    seek: float | None = None
    speed: float | None = None

    def get_before_options(self) -> str:
        opts = [self.before_options] if self.before_options else []
        if self.seek:
            # Input seeking: ffmpeg skips ahead before decoding.
            opts.append(f"-ss {self.seek:g}")
        return " ".join(opts)

    def get_options(self) -> str:
        opts = [self.options] if self.options else []
        if self.speed is not None and self.speed != 1:
            filters = ",".join(f"atempo={factor:g}" for factor in atempo_chain(self.speed))
            opts.append(f'-filter:a "{filters}"')
        return " ".join(opts)


class FFmpegAudioResourceFactory(AudioResourceFactory):
    """Produces single-use FFmpeg audio sources wrapped in a volume transformer."""

    def __init__(
        self, resolver: StreamUrlResolver, settings: AudioSettings | None = None
    ) -> None:
        self._resolver = resolver
        self._settings = settings or AudioSettings()

    def build_args(self, options: AudioResourceOptions) -> FFmpegArgs:
        return FFmpegArgs(
            before_options=self._settings.ffmpeg_before_options,
            options=self._settings.ffmpeg_options,
            seek=options.seek,
            speed=options.speed,
        )

    async def create(
        self, track: Track, options: AudioResourceOptions
    ) -> discord.PCMVolumeTransformer[discord.FFmpegPCMAudio]:
        stream_url = await self._resolver.resolve_stream_url(track.link)
        args = self.build_args(options)

        try:
            source = discord.FFmpegPCMAudio(
                stream_url,
                before_options=args.get_before_options(),
                options=args.get_options(),
            )
        except discord.ClientException as e:
            raise AudioResourceError(track.link, str(e)) from e

        logger.debug(LogTemplates.RESOURCE_CREATED, track.link, options.speed, options.seek)
        return discord.PCMVolumeTransformer(source, volume=self._settings.default_volume)
