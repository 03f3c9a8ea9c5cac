"""
Unit Tests for the Music Domain

Tests for:
- Track validation and duplication
- AudioResourceOptions construction
- PlaybackQueue mutations, looping and shuffling
"""

import random
from collections import Counter

import pytest
from pydantic import ValidationError

from guild_player.domain.music.entities import Track, duplicate_tracks
from guild_player.domain.music.queue import PlaybackQueue
from guild_player.domain.music.value_objects import (
    AudioResourceOptions,
    DisconnectReason,
    PlayerStatus,
    TrackVariant,
    TransportState,
    TransportStatus,
)


def links(tracks):
    return [t.link for t in tracks]


@pytest.fixture
def queue():
    return PlaybackQueue(rng=random.Random(42))


# =============================================================================
# Track Tests
# =============================================================================


class TestTrack:
    def test_defaults_to_arbitrary_variant(self):
        track = Track(link="https://example.com/song.mp3")
        assert track.variant is TrackVariant.ARBITRARY

    def test_rejects_non_http_link(self):
        with pytest.raises(ValidationError):
            Track(link="ftp://example.com/song.mp3")

    def test_is_frozen(self, track_a):
        with pytest.raises(ValidationError):
            track_a.link = "https://example.com/other"

    def test_duplicate_is_equal_but_independent(self, track_a):
        copy = track_a.duplicate()

        assert copy == track_a
        assert copy is not track_a

    def test_duplicate_tracks_never_reuses_instances(self, track_a, track_b):
        originals = [track_a, track_b]
        copies = duplicate_tracks(originals)

        assert copies == originals
        assert all(c is not o for c, o in zip(copies, originals, strict=True))

    def test_str(self, track_a):
        assert str(track_a) == "https://example.com/a (youtube)"


# =============================================================================
# Value Object Tests
# =============================================================================


class TestValueObjects:
    def test_player_status_flags(self):
        assert PlayerStatus.PLAYING.is_playing
        assert not PlayerStatus.AUTO_PAUSED.is_playing
        assert PlayerStatus.IDLE.is_idle
        assert not PlayerStatus.BUFFERING.is_idle

    @pytest.mark.parametrize(
        "status,expected",
        [
            (TransportStatus.SIGNALLING, True),
            (TransportStatus.CONNECTING, True),
            (TransportStatus.READY, False),
            (TransportStatus.DISCONNECTED, False),
            (TransportStatus.DESTROYED, False),
        ],
    )
    def test_transport_establishing(self, status, expected):
        assert status.is_establishing is expected

    def test_transport_state_str_includes_close_code(self):
        state = TransportState(
            TransportStatus.DISCONNECTED, DisconnectReason.WEBSOCKET_CLOSE, close_code=4014
        )
        assert str(state) == "disconnected(4014)"
        assert str(TransportState(TransportStatus.READY)) == "ready"

    def test_options_omit_normal_speed(self):
        assert AudioResourceOptions.for_speed(1.0) == AudioResourceOptions()
        assert AudioResourceOptions.for_speed(1.5, seek=30).speed == 1.5

    @pytest.mark.parametrize("kwargs", [{"speed": 0}, {"speed": -1.0}, {"seek": -5}])
    def test_options_reject_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            AudioResourceOptions(**kwargs)


# =============================================================================
# PlaybackQueue Tests
# =============================================================================


class TestPlaybackQueueBasics:
    def test_add_appends_and_prepends(self, queue, track_a, track_b, track_c):
        queue.add([track_a])
        queue.add([track_b])
        queue.add([track_c], push_to_front=True)

        assert queue.tracks == [track_c, track_a, track_b]
        assert len(queue) == 3

    def test_dequeue_front_then_none(self, queue, track_a, track_b):
        queue.add([track_a, track_b])

        assert queue.dequeue() is track_a
        assert queue.dequeue() is track_b
        assert queue.dequeue() is None
        assert not queue

    def test_tracks_is_a_snapshot(self, queue, track_a):
        queue.add([track_a])
        snapshot = queue.tracks
        snapshot.clear()

        assert len(queue) == 1

    def test_drop_front(self, queue, make_track):
        queue.add([make_track(str(i)) for i in range(4)])

        assert queue.drop_front(0) == 0
        assert queue.drop_front(2) == 2
        assert links(queue.tracks) == ["https://example.com/2", "https://example.com/3"]
        assert queue.drop_front(10) == 2
        assert len(queue) == 0

    def test_remove(self, queue, track_a, track_b):
        queue.add([track_a, track_b])

        assert queue.remove(1) is track_b
        assert queue.tracks == [track_a]

    @pytest.mark.parametrize("index", [-1, 2, 100])
    def test_remove_out_of_range_returns_none(self, queue, track_a, track_b, index):
        queue.add([track_a, track_b])

        assert queue.remove(index) is None
        assert queue.tracks == [track_a, track_b]

    def test_move(self, queue, track_a, track_b, track_c):
        queue.add([track_a, track_b, track_c])

        assert queue.move(0, 2) is track_a
        assert queue.tracks == [track_b, track_c, track_a]

    @pytest.mark.parametrize("from_index,to_index", [(3, 0), (0, 3), (-1, 0)])
    def test_move_out_of_range_returns_none(self, queue, track_a, track_b, from_index, to_index):
        queue.add([track_a, track_b])

        assert queue.move(from_index, to_index) is None
        assert queue.tracks == [track_a, track_b]

    def test_reverse(self, queue, track_a, track_b, track_c):
        queue.add([track_a, track_b, track_c])
        queue.reverse()

        assert queue.tracks == [track_c, track_b, track_a]

    def test_clear_drops_flags(self, queue, track_a, track_b):
        queue.add([track_a])
        queue.loop(track_b)
        queue.shuffle()

        queue.clear()

        assert len(queue) == 0
        assert not queue.is_looped
        assert not queue.is_shuffled


class TestPlaybackQueueLooping:
    def test_loop_snapshots_current_then_queue(self, queue, track_a, track_b, track_c):
        queue.add([track_b, track_c])
        queue.loop(track_a)

        assert queue.is_looped
        assert queue.loop_tracks == [track_a, track_b, track_c]
        originals = [track_a, track_b, track_c]
        assert all(c is not o for c, o in zip(queue.loop_tracks, originals, strict=True))

    def test_loop_without_current(self, queue, track_a):
        queue.add([track_a])
        queue.loop(None)

        assert queue.loop_tracks == [track_a]
        assert queue.loop_tracks[0] is not track_a

    def test_loop_then_unloop_leaves_queue_unchanged(self, queue, track_a, track_b):
        queue.add([track_a, track_b])
        before = queue.tracks

        queue.loop(None)
        queue.unloop()

        assert not queue.is_looped
        assert queue.tracks == before
        assert all(x is y for x, y in zip(queue.tracks, before, strict=True))

    def test_loop_on_empty_queue_without_current_is_not_looped(self, queue):
        queue.loop(None)
        assert not queue.is_looped

    def test_add_while_looped_mirrors_copies(self, queue, track_a, track_b, track_c):
        queue.add([track_a])
        queue.loop(None)

        queue.add([track_b])
        queue.add([track_c], push_to_front=True)

        assert queue.loop_tracks == [track_c, track_a, track_b]
        live_ids = {id(t) for t in queue.tracks}
        assert not live_ids & {id(t) for t in queue.loop_tracks}

    def test_refill_from_loop(self, queue, track_a, track_b):
        queue.add([track_a, track_b])
        queue.loop(None)
        queue.dequeue()
        queue.dequeue()

        assert queue.refill_from_loop() == 2
        assert queue.tracks == [track_a, track_b]
        assert queue.loop_tracks == [track_a, track_b]
        live_ids = {id(t) for t in queue.tracks}
        assert not live_ids & {id(t) for t in queue.loop_tracks}

    def test_refill_when_not_looped_is_noop(self, queue):
        assert queue.refill_from_loop() == 0
        assert len(queue) == 0


class TestPlaybackQueueShuffling:
    def test_shuffle_sets_flag_and_keeps_multiset(self, queue, make_track):
        tracks = [make_track(str(i)) for i in range(10)]
        queue.add(tracks)
        queue.shuffle()

        assert queue.is_shuffled
        assert Counter(links(queue.tracks)) == Counter(links(tracks))

    def test_unshuffle_keeps_current_order(self, queue, make_track):
        queue.add([make_track(str(i)) for i in range(10)])
        queue.shuffle()
        shuffled = queue.tracks

        queue.unshuffle()

        assert not queue.is_shuffled
        assert queue.tracks == shuffled

    def test_add_while_shuffled_randomizes_incoming(self, make_track):
        queue = PlaybackQueue(rng=random.Random(3))
        queue.shuffle()
        incoming = [make_track(str(i)) for i in range(20)]

        queue.add(incoming)

        assert Counter(links(queue.tracks)) == Counter(links(incoming))
        assert queue.tracks != incoming

    def test_shuffle_loop_refill_keeps_multiset_and_reorders(self, make_track):
        queue = PlaybackQueue(rng=random.Random(11))
        tracks = [make_track(str(i)) for i in range(12)]
        queue.add(tracks)
        queue.loop(None)
        queue.shuffle()
        template = links(queue.loop_tracks)

        orders = []
        for _ in range(3):
            while queue.dequeue() is not None:
                pass
            queue.refill_from_loop()
            assert Counter(links(queue.tracks)) == Counter(template)
            orders.append(links(queue.loop_tracks))

        assert len({tuple(order) for order in orders}) > 1
