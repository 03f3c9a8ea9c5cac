"""Play queue and loop-queue state for a guild session."""

from __future__ import annotations

import random
from collections.abc import Sequence

from guild_player.domain.music.entities import Track, duplicate_tracks


class PlaybackQueue:
    """Ordered play queue plus the loop template replayed when it runs dry.

    The live queue and the loop queue never hold the same Track instances:
    everything copied into the loop queue is duplicated first.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._tracks: list[Track] = []
        self._loop: list[Track] = []
        self._shuffled = False
        self._rng = rng or random.Random()

    @property
    def tracks(self) -> list[Track]:
        """Snapshot of the live queue, front first."""
        return list(self._tracks)

    @property
    def loop_tracks(self) -> list[Track]:
        """Snapshot of the loop queue."""
        return list(self._loop)

    @property
    def is_looped(self) -> bool:
        return len(self._loop) > 0

    @property
    def is_shuffled(self) -> bool:
        return self._shuffled

    def __len__(self) -> int:
        return len(self._tracks)

    def __bool__(self) -> bool:
        return bool(self._tracks)

    def add(self, tracks: Sequence[Track], push_to_front: bool = False) -> None:
        """Insert tracks at the front or back, mirroring them into the loop queue."""
        incoming = list(tracks)
        if self._shuffled:
            self._rng.shuffle(incoming)

        if push_to_front:
            self._tracks[0:0] = incoming
        else:
            self._tracks.extend(incoming)

        if self.is_looped:
            copies = duplicate_tracks(incoming)
            if push_to_front:
                self._loop[0:0] = copies
            else:
                self._loop.extend(copies)

    def dequeue(self) -> Track | None:
        if not self._tracks:
            return None
        return self._tracks.pop(0)

    def drop_front(self, count: int) -> int:
        """Discard up to ``count`` tracks from the front and return how many went."""
        if count <= 0:
            return 0
        dropped = min(count, len(self._tracks))
        del self._tracks[:dropped]
        return dropped

    def remove(self, index: int) -> Track | None:
        if not 0 <= index < len(self._tracks):
            return None
        return self._tracks.pop(index)

    def move(self, from_index: int, to_index: int) -> Track | None:
        if not 0 <= from_index < len(self._tracks):
            return None
        if not 0 <= to_index < len(self._tracks):
            return None
        track = self._tracks.pop(from_index)
        self._tracks.insert(to_index, track)
        return track

    def reverse(self) -> None:
        self._tracks.reverse()

    def clear(self) -> None:
        """Empty the queue and drop both the shuffle and loop settings."""
        self._tracks.clear()
        self.unshuffle()
        self.unloop()

    def shuffle(self) -> None:
        self._rng.shuffle(self._tracks)
        self._rng.shuffle(self._loop)
        self._shuffled = True

    def unshuffle(self) -> None:
        """Stop reshuffling on loop refill.

        Note: this does not restore the original order of the queue.
        """
        self._shuffled = False

    def loop(self, current: Track | None) -> None:
        """Snapshot ``[current] + queue`` as the loop template."""
        source = [current, *self._tracks] if current is not None else self._tracks
        self._loop = duplicate_tracks(source)

    def unloop(self) -> None:
        self._loop.clear()

    def refill_from_loop(self) -> int:
        """Move the loop template into the empty live queue and rebuild the template.

        The template is rebuilt from fresh duplicates so that no consumed track
        is ever replayed, and is reshuffled independently while shuffling is on.
        """
        if not self.is_looped:
            return 0
        self._tracks.extend(self._loop)
        fresh = duplicate_tracks(self._loop)
        if self._shuffled:
            self._rng.shuffle(fresh)
        self._loop = fresh
        return len(self._tracks)
