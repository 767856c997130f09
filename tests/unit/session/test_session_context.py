"""Tests for SessionContext markers and session fields."""

import threading
from pathlib import Path

import pytest

from pickline.core.errors import HandlerError
from pickline.session.context import SessionContext, Stream


class TestSessionFields:
    def test_uninitialized_access_raises(self) -> None:
        ctx = SessionContext()
        assert not ctx.initialized
        with pytest.raises(HandlerError, match="not initialized"):
            _ = ctx.cwd
        with pytest.raises(HandlerError):
            _ = ctx.source

    def test_initialize_resets_markers(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(tmp_path, ["a"])
        ctx.begin(Stream.TYPED, 5)
        ctx.try_deliver(Stream.TYPED, 5, {"q": 1})
        ctx.observe_query("abc")

        ctx.initialize(tmp_path, ["b"])

        assert ctx.source == ["b"]
        assert ctx.last_query is None
        assert ctx.issued(Stream.TYPED) == -1
        assert ctx.delivered(Stream.TYPED) == -1
        assert ctx.last_result(Stream.TYPED) is None


class TestStaleness:
    def test_try_deliver_is_monotonic(self) -> None:
        ctx = SessionContext()

        assert ctx.try_deliver(Stream.TYPED, 2, "two")
        assert not ctx.try_deliver(Stream.TYPED, 1, "one")
        assert not ctx.try_deliver(Stream.TYPED, 2, "again")
        assert ctx.try_deliver(Stream.TYPED, 3, "three")
        assert ctx.delivered(Stream.TYPED) == 3
        assert ctx.last_result(Stream.TYPED) == "three"

    def test_streams_are_independent(self) -> None:
        ctx = SessionContext()
        ctx.try_deliver(Stream.TYPED, 10)

        assert ctx.try_deliver(Stream.MOVE, 1)
        assert ctx.is_stale(Stream.TYPED, 9)
        assert not ctx.is_stale(Stream.MOVE, 2)

    def test_begin_tracks_highest_issued(self) -> None:
        ctx = SessionContext()

        assert ctx.begin(Stream.MOVE, 4) == 4
        ctx.begin(Stream.MOVE, 2)

        assert ctx.issued(Stream.MOVE) == 4

    def test_only_one_winner_per_stamp_across_threads(self) -> None:
        ctx = SessionContext()
        wins: list[int] = []
        barrier = threading.Barrier(16)

        def claim(stamp: int) -> None:
            barrier.wait()
            if ctx.try_deliver(Stream.TYPED, stamp):
                wins.append(stamp)

        threads = [threading.Thread(target=claim, args=(s % 4,)) for s in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(wins) == len(set(wins))
        assert 3 in wins
        assert ctx.delivered(Stream.TYPED) == 3


class TestGeneration:
    def test_initialize_starts_new_generation(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        assert ctx.generation == 0

        ctx.initialize(tmp_path, [])
        ctx.initialize(tmp_path, [])

        assert ctx.generation == 2

    def test_previous_generation_cannot_deliver(self, tmp_path: Path) -> None:
        ctx = SessionContext()
        ctx.initialize(tmp_path, ["a"])
        started_in = ctx.generation
        ctx.begin(Stream.MOVE, 4)

        ctx.initialize(tmp_path, ["b"])

        assert not ctx.try_deliver(Stream.MOVE, 4, "old", generation=started_in)
        assert ctx.delivered(Stream.MOVE) == -1
        assert ctx.try_deliver(Stream.MOVE, 1, "new", generation=ctx.generation)
        assert ctx.last_result(Stream.MOVE) == "new"
