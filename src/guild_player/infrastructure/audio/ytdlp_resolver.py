"""yt-dlp backed lookup of direct stream URLs for track links."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Final, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator
from yt_dlp import YoutubeDL

from guild_player.config.settings import AudioSettings
from guild_player.domain.shared.exceptions import AudioResourceError
from guild_player.domain.shared.messages import ErrorMessages, LogTemplates
from guild_player.domain.shared.types import NonEmptyStr, NonNegativeFloat, PositiveInt

CACHE_MAX_SIZE: Final[int] = 500
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
LOG_URL_TRUNCATE: Final[int] = 60

logger = logging.getLogger(__name__)


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None


class StreamInfo(BaseModel):
    """The part of a yt-dlp extraction result needed to stream audio."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("url", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        if isinstance(v, str) and v.strip():
            return v
        return None

    @field_validator("formats", mode="before")
    @classmethod
    def _coerce_formats(cls, v: Any) -> list[Any]:
        return v if isinstance(v, list) else []

    def stream_url(self) -> str | None:
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None


class CacheEntry(BaseModel):
    """Cached stream URL with the time it was resolved."""

    model_config = ConfigDict(frozen=True)

    stream_url: NonEmptyStr
    cached_at: NonNegativeFloat


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True


class YtDlpStreamResolver:
    """Resolves a track link to a URL ffmpeg can read, caching results for a while."""

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._opts = YtDlpOpts(format=self._settings.ytdlp_format)
        self._ttl = self._settings.stream_cache_ttl_s
        self._cache: dict[str, CacheEntry] = {}

    async def resolve_stream_url(self, link: str) -> str:
        """Return a direct stream URL for *link*.

        Raises:
            AudioResourceError: If yt-dlp fails or finds nothing streamable.
        """
        cached = self._cached(link)
        if cached is not None:
            return cached

        info = await asyncio.to_thread(self._extract_info_sync, link)
        stream_url = info.stream_url() if info is not None else None
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, link[:LOG_URL_TRUNCATE])
            raise AudioResourceError(link, ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(link=link))

        self._store(link, stream_url)
        return stream_url

    def _cached(self, link: str) -> str | None:
        entry = self._cache.get(link)
        if entry is None:
            return None
        if time.time() - entry.cached_at < self._ttl:
            logger.debug(LogTemplates.YTDLP_CACHE_HIT, link[:LOG_URL_TRUNCATE])
            return entry.stream_url
        self._cache.pop(link, None)
        return None

    def _store(self, link: str, stream_url: str) -> None:
        now = time.time()
        # Re-inserting keeps the dict ordered oldest first.
        self._cache.pop(link, None)
        self._cache[link] = CacheEntry(stream_url=stream_url, cached_at=now)
        if len(self._cache) > CACHE_MAX_SIZE:
            expired = [k for k, e in self._cache.items() if now - e.cached_at >= self._ttl]
            for k in expired:
                self._cache.pop(k, None)
        while len(self._cache) > CACHE_MAX_SIZE:
            oldest = next(iter(self._cache))
            del self._cache[oldest]
            logger.debug(LogTemplates.YTDLP_CACHE_EVICTED, oldest[:LOG_URL_TRUNCATE])

    def _extract_info_sync(self, link: str) -> StreamInfo | None:
        try:
            with YoutubeDL(params=cast(Any, self._opts.model_dump())) as ydl:
                data = ydl.extract_info(link, download=False)
                return StreamInfo.model_validate(dict(data)) if isinstance(data, dict) else None
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, link[:LOG_URL_TRUNCATE])
            return None
