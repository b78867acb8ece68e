"""Tests for mos.editline.history.HistoryRing."""

from __future__ import annotations

import pytest

from mos.editline.history import HistoryRing
from mos.editline.line_buffer import LineBuffer, LineEngine

from virtual_terminal import VirtualTerminal


def make_engine(text: str = "") -> tuple[LineEngine, VirtualTerminal]:
    term = VirtualTerminal()
    engine = LineEngine(term, LineBuffer(256), columns=80)
    for ch in text:
        engine.insert(ch)
    return engine, term


def filled(*lines: str, depth: int = 8) -> HistoryRing:
    ring = HistoryRing(depth)
    for line in lines:
        ring.push(line)
    ring.reset_navigation()
    return ring


class TestHistoryPush:
    """Recording submitted lines."""

    def test_push_appends_in_order(self) -> None:
        ring = filled("one", "two")
        assert ring.entries == ("one", "two")
        assert ring.size == 2

    def test_empty_line_is_ignored(self) -> None:
        ring = filled("")
        assert ring.size == 0

    def test_consecutive_duplicate_is_ignored(self) -> None:
        ring = filled("HELP", "HELP")
        assert ring.size == 1

    def test_non_consecutive_duplicate_is_kept(self) -> None:
        ring = filled("HELP", "CAT", "HELP")
        assert ring.entries == ("HELP", "CAT", "HELP")

    def test_full_ring_evicts_oldest(self) -> None:
        ring = filled("a", "b", "c", "d", depth=3)
        assert ring.entries == ("b", "c", "d")
        assert len(ring) == 3

    def test_depth_of_one_keeps_latest(self) -> None:
        ring = filled("a", "b", depth=1)
        assert ring.entries == ("b",)

    def test_depth_is_reported(self) -> None:
        assert HistoryRing(4).depth == 4

    def test_depth_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            HistoryRing(0)


class TestHistoryNavigation:
    """Up/down replace the line through the engine."""

    def test_up_on_empty_history_does_nothing(self) -> None:
        ring = filled()
        engine, term = make_engine("typed")
        assert not ring.up(engine)
        assert engine.text == "typed"

    def test_up_shows_most_recent_first(self) -> None:
        ring = filled("one", "two")
        engine, term = make_engine("draft")
        assert ring.up(engine)
        assert engine.text == "two"
        assert engine.pos == 3
        assert term.row_text(0) == "two"
        assert ring.up(engine)
        assert engine.text == "one"

    def test_up_at_oldest_is_idempotent(self) -> None:
        ring = filled("one", "two", "three")
        engine, _ = make_engine()
        for _ in range(ring.size):
            ring.up(engine)
        for _ in range(5):
            assert ring.up(engine)
            assert engine.text == "one"
            assert ring.index == 0

    def test_up_at_oldest_restores_edited_line(self) -> None:
        ring = filled("one")
        engine, _ = make_engine()
        ring.up(engine)
        engine.insert("!")
        assert engine.text == "one!"
        ring.up(engine)
        assert engine.text == "one"

    def test_down_from_live_line_does_nothing(self) -> None:
        ring = filled("one")
        engine, _ = make_engine("draft")
        assert not ring.down(engine)
        assert engine.text == "draft"

    def test_down_past_newest_clears_line(self) -> None:
        ring = filled("one", "two")
        engine, term = make_engine()
        ring.up(engine)
        assert ring.down(engine)
        assert engine.text == ""
        assert ring.index == ring.size
        assert term.row_text(0) == ""

    def test_down_moves_to_newer_entry(self) -> None:
        ring = filled("one", "two", "three")
        engine, _ = make_engine()
        ring.up(engine)
        ring.up(engine)
        ring.up(engine)
        assert ring.down(engine)
        assert engine.text == "two"

    def test_reset_navigation_points_at_live_line(self) -> None:
        ring = filled("one", "two")
        engine, _ = make_engine()
        ring.up(engine)
        ring.reset_navigation()
        assert ring.index == 2
