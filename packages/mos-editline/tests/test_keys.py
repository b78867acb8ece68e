"""Tests for mos.editline.keys -- decoding raw terminal input."""

from __future__ import annotations

import pytest

from mos.editline import keys
from mos.editline.keys import KeyEvent, VirtualKey, is_complete_sequence, parse_key


class TestKeyEvent:
    def test_char(self) -> None:
        assert KeyEvent.char("a") == KeyEvent(ascii=0x61)

    @pytest.mark.parametrize("number", range(1, 13))
    def test_function_keys_map_to_slots(self, number: int) -> None:
        assert KeyEvent.function(number).vkey.function_index == number - 1

    def test_non_function_key_has_no_slot(self) -> None:
        assert VirtualKey.HOME.function_index is None
        assert VirtualKey.NONE.function_index is None


class TestParseKey:
    """Raw input units to key events."""

    def test_printable(self) -> None:
        assert parse_key("x") == KeyEvent(ord("x"))

    def test_high_latin1_byte(self) -> None:
        assert parse_key("\xe9") == KeyEvent(0xE9)

    def test_control_characters(self) -> None:
        assert parse_key("\r") == KeyEvent(keys.ENTER)
        assert parse_key("\t") == KeyEvent(keys.TAB)
        assert parse_key("\x17") == KeyEvent(keys.CTRL_W)
        assert parse_key("\x7f") == KeyEvent(keys.DELETE)
        assert parse_key("\n") == KeyEvent(keys.LINE_FEED)

    def test_lone_escape(self) -> None:
        assert parse_key("\x1b") == KeyEvent(keys.ESCAPE)

    @pytest.mark.parametrize(
        "sequence, expected",
        [
            ("\x1b[A", KeyEvent(keys.VERTICAL_TAB, VirtualKey.UP)),
            ("\x1bOB", KeyEvent(keys.LINE_FEED, VirtualKey.DOWN)),
            ("\x1b[C", KeyEvent(keys.CTRL_U, VirtualKey.RIGHT)),
            ("\x1b[D", KeyEvent(keys.BACKSPACE, VirtualKey.LEFT)),
            ("\x1b[H", KeyEvent(vkey=VirtualKey.HOME)),
            ("\x1b[4~", KeyEvent(vkey=VirtualKey.END)),
            ("\x1b[5~", KeyEvent(vkey=VirtualKey.PAGE_UP)),
            ("\x1b[6~", KeyEvent(vkey=VirtualKey.PAGE_DOWN)),
            ("\x1bOP", KeyEvent.function(1)),
            ("\x1b[24~", KeyEvent.function(12)),
        ],
    )
    def test_escape_sequences(self, sequence: str, expected: KeyEvent) -> None:
        assert parse_key(sequence) == expected

    def test_unknown_sequence_is_dropped(self) -> None:
        assert parse_key("\x1b[99~") is None

    def test_empty_input(self) -> None:
        assert parse_key("") is None


class TestIsCompleteSequence:
    @pytest.mark.parametrize(
        "data, complete",
        [
            ("\x1b", False),
            ("\x1b[", False),
            ("\x1b[1", False),
            ("\x1b[15~", True),
            ("\x1b[A", True),
            ("\x1bO", False),
            ("\x1bOP", True),
            ("\x1bx", True),
        ],
    )
    def test_is_complete_sequence(self, data: str, complete: bool) -> None:
        assert is_complete_sequence(data) is complete
