"""Port interface for turning tracks into playable audio resources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.value_objects import AudioResourceOptions


class AudioResourceFactory(ABC):
    """Interface for producing single-use audio resources from tracks."""

    @abstractmethod
    async def create(self, track: "Track", options: "AudioResourceOptions") -> Any:
        """Produce a fresh resource for *track* with speed/seek baked in.

        Raises:
            AudioResourceError: If the track cannot be played.
        """
        ...
