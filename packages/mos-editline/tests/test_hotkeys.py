"""Tests for mos.editline.hotkeys -- macro expansion and the HOTKEY command."""

from __future__ import annotations

import pytest

from mos.editline import hotkeys
from mos.editline.errors import HotkeyError
from mos.editline.hotkeys import HotkeyTable, hotkey_command
from mos.editline.line_buffer import LineBuffer, LineEngine

from virtual_terminal import VirtualTerminal


def make_engine(text: str = "", *, capacity: int = 256) -> tuple[LineEngine, VirtualTerminal]:
    term = VirtualTerminal()
    engine = LineEngine(term, LineBuffer(capacity), columns=80)
    for ch in text:
        engine.insert(ch)
    term.clear_buffer()
    return engine, term


class TestHotkeyTable:
    """Slot management."""

    def test_slots_start_empty(self) -> None:
        table = HotkeyTable()
        assert all(table.get(slot) is None for slot in range(12))

    def test_set_replaces_previous_macro(self) -> None:
        table = HotkeyTable()
        table.set(0, "CAT")
        table.set(0, "DIR")
        assert table.get(0) == "DIR"

    def test_clear_reports_whether_slot_was_set(self) -> None:
        table = HotkeyTable()
        table.set(3, "CAT")
        assert table.clear(3)
        assert not table.clear(3)

    def test_drop_empties_every_slot(self) -> None:
        table = HotkeyTable()
        table.set(0, "CAT")
        table.set(11, "DIR")
        table.drop()
        assert all(table.get(slot) is None for slot in range(len(table)))

    @pytest.mark.parametrize("slot", [-1, 12])
    def test_invalid_slot_raises(self, slot: int) -> None:
        with pytest.raises(HotkeyError):
            HotkeyTable().get(slot)

    def test_empty_macro_is_rejected(self) -> None:
        with pytest.raises(HotkeyError):
            HotkeyTable().set(0, "")


class TestHotkeyExpand:
    """Applying a macro to the line being edited."""

    def test_empty_slot_is_not_handled(self) -> None:
        engine, term = make_engine("hello")
        assert not HotkeyTable().expand(0, engine)
        assert engine.text == "hello"
        assert term.output == ""

    def test_placeholder_wraps_current_line(self) -> None:
        table = HotkeyTable()
        table.set(0, "RUN %s.bin")
        engine, term = make_engine("hello")
        assert table.expand(0, engine)
        assert engine.text == "RUN hello.bin"
        assert engine.pos == len("RUN hello.bin")
        assert term.row_text(0) == "RUN hello.bin"

    @pytest.mark.parametrize("line", ["", "x", "something else entirely"])
    def test_macro_without_placeholder_replaces_line(self, line: str) -> None:
        table = HotkeyTable()
        table.set(1, "CAT")
        engine, term = make_engine(line)
        assert table.expand(1, engine)
        assert engine.text == "CAT"
        assert term.row_text(0) == "CAT"

    def test_only_first_placeholder_is_substituted(self) -> None:
        table = HotkeyTable()
        table.set(0, "ECHO %s %s")
        engine, _ = make_engine("hi")
        table.expand(0, engine)
        assert engine.text == "ECHO hi %s"

    def test_overlong_expansion_rings_bell_and_keeps_line(self) -> None:
        table = HotkeyTable()
        table.set(0, "LOAD %s.bin")
        engine, term = make_engine("x" * 10, capacity=16)
        assert not table.expand(0, engine)
        assert engine.text == "x" * 10
        assert term.bells == 1
        assert term.output == "\x07"

    def test_expansion_one_short_of_capacity_fits(self) -> None:
        table = HotkeyTable()
        table.set(0, "A%sB")
        engine, term = make_engine("x" * 11, capacity=16)
        assert table.expand(0, engine)
        assert engine.text == "A" + "x" * 11 + "B"
        assert term.bells == 0

    def test_allocation_failure_keeps_line_and_screen(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail(prefix: str, line: str, suffix: str) -> str:
            raise MemoryError

        monkeypatch.setattr(hotkeys, "_substitute", fail)
        table = HotkeyTable()
        table.set(0, "RUN %s.bin")
        engine, term = make_engine("hello")
        assert not table.expand(0, engine)
        assert engine.text == "hello"
        assert engine.pos == 5
        assert term.output == ""
        assert term.bells == 0


class TestHotkeyCommand:
    """The HOTKEY configuration command."""

    def test_list_shows_all_slots(self) -> None:
        table = HotkeyTable()
        table.set(0, "CAT")
        output = hotkey_command(table, "")
        assert "F1: CAT\r\n" in output
        assert "F12: N/A\r\n" in output
        assert output.startswith("Hotkey assignments:")

    def test_assign_strips_quotes(self) -> None:
        table = HotkeyTable()
        assert hotkey_command(table, '2 "LOAD %s"') == ""
        assert table.get(1) == "LOAD %s"

    def test_assign_keeps_inner_spaces(self) -> None:
        table = HotkeyTable()
        hotkey_command(table, "12 RUN  fast")
        assert table.get(11) == "RUN  fast"

    def test_clear_slot(self) -> None:
        table = HotkeyTable()
        table.set(4, "DIR")
        assert hotkey_command(table, "5") == "F5 cleared.\r\n"
        assert table.get(4) is None

    def test_clear_empty_slot(self) -> None:
        output = hotkey_command(HotkeyTable(), "5")
        assert output == "F5 already clear, no hotkey command provided.\r\n"

    @pytest.mark.parametrize("args", ["0 CAT", "13 CAT"])
    def test_invalid_key_number(self, args: str) -> None:
        assert hotkey_command(HotkeyTable(), args) == "Invalid FN-key number.\r\n"

    def test_non_numeric_key_lists_assignments(self) -> None:
        table = HotkeyTable()
        table.set(1, "DIR")
        output = hotkey_command(table, "x CAT")
        assert output == hotkey_command(table, "")
        assert "F2: DIR\r\n" in output
        assert table.get(0) is None

    def test_macro_is_capped(self) -> None:
        table = HotkeyTable()
        hotkey_command(table, "1 " + "y" * 300)
        assert len(table.get(0)) == 256
