"""Core domain entities for the music bounded context."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from guild_player.domain.music.value_objects import TrackVariant
from guild_player.domain.shared.types import HttpUrlStr


class Track(BaseModel):
    """Immutable descriptor of one playable audio item.

    A Track is identified by its link and variant. The audio resource it
    produces can only be consumed once, so a track that must be played again
    is duplicated into a fresh instance rather than shared.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    link: HttpUrlStr
    variant: TrackVariant = TrackVariant.ARBITRARY

    def duplicate(self) -> Track:
        """Return a new, independent instance with the same identity."""
        return Track(link=self.link, variant=self.variant)

    def __str__(self) -> str:
        return f"{self.link} ({self.variant.value})"


def duplicate_tracks(tracks: Iterable[Track]) -> list[Track]:
    """Duplicate tracks without reusing any of the given instances."""
    return [track.duplicate() for track in tracks]
