"""Tests for mos.editline.strings."""

from __future__ import annotations

import pytest

from mos.editline.strings import (
    ascii_upper,
    common_prefix_ci,
    is_single_byte,
    rfind_pathsep,
    startswith_ci,
    strbuf_append,
    strbuf_insert,
)


class TestCaseFolding:
    def test_ascii_upper_folds_only_ascii(self) -> None:
        assert ascii_upper("abc-\xe9") == "ABC-\xe9"

    def test_startswith_ci(self) -> None:
        assert startswith_ci("HOTKEY", "hot")
        assert not startswith_ci("HOT", "hotkey")
        assert startswith_ci("x", "")

    def test_is_single_byte(self) -> None:
        assert is_single_byte("caf\xe9")
        assert not is_single_byte("€")


class TestCommonPrefix:
    @pytest.mark.parametrize(
        "accumulated, candidate, expected",
        [
            ("ER", "ERS", "ER"),
            ("OAD", "S", ""),
            ("lpha.txt", "LPINE.TXT", "lp"),
            ("abc", "ab", "ab"),
            ("", "abc", ""),
        ],
    )
    def test_common_prefix_ci(self, accumulated: str, candidate: str, expected: str) -> None:
        assert common_prefix_ci(accumulated, candidate) == expected


class TestBoundedBuffers:
    def test_strbuf_append_truncates(self) -> None:
        assert strbuf_append("abc", 6, "defg") == "abcde"

    def test_strbuf_append_max_chars(self) -> None:
        assert strbuf_append("a", 10, "bcdef", max_chars=2) == "abc"

    def test_strbuf_append_full_buffer(self) -> None:
        assert strbuf_append("abcde", 6, "x") == "abcde"

    def test_strbuf_insert_fits(self) -> None:
        assert strbuf_insert("ad", 10, "bc", 1) == ("abcd", 2)

    def test_strbuf_insert_drops_tail_first(self) -> None:
        assert strbuf_insert("abcdef", 8, "XY", 3) == ("abcXYde", 2)

    def test_strbuf_insert_truncates_text(self) -> None:
        assert strbuf_insert("abcd", 6, "WXYZ", 2) == ("abWXY", 3)

    @pytest.mark.parametrize(
        "path, expected", [("a/b\\c", 3), ("dir/file", 3), ("plain", -1)]
    )
    def test_rfind_pathsep(self, path: str, expected: int) -> None:
        assert rfind_pathsep(path) == expected
