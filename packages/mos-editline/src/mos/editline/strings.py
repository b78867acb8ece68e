"""String helpers for the single-byte (CP-1252-like) command line.

All case-insensitive comparisons here fold ASCII letters only. Characters
outside ``a``-``z`` compare as themselves, matching what the serial protocol
can actually display.
"""

from __future__ import annotations

PATH_SEPARATORS = ("/", "\\")

_ASCII_UPPER = str.maketrans(
    "abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)


def ascii_upper(text: str) -> str:
    """Upper-case ASCII letters only."""
    return text.translate(_ASCII_UPPER)


def is_single_byte(text: str) -> bool:
    """Check that every character fits in one protocol byte."""
    return all(ord(ch) < 0x100 for ch in text)


def startswith_ci(text: str, prefix: str) -> bool:
    """Case-insensitive (ASCII) ``str.startswith``."""
    if len(prefix) > len(text):
        return False
    return ascii_upper(text[: len(prefix)]) == ascii_upper(prefix)


def common_prefix_ci(accumulated: str, candidate: str) -> str:
    """Truncate *accumulated* at the first case-insensitive mismatch.

    The result keeps the characters of *accumulated*; *candidate* only
    decides where it is cut.
    """
    for i, ch in enumerate(accumulated):
        if i >= len(candidate) or ascii_upper(ch) != ascii_upper(candidate[i]):
            return accumulated[:i]
    return accumulated


def rfind_pathsep(path: str) -> int:
    """Index of the last ``/`` or ``\\`` in *path*, or -1."""
    return max(path.rfind(sep) for sep in PATH_SEPARATORS)


def strbuf_append(buf: str, capacity: int, text: str, max_chars: int | None = None) -> str:
    """Append *text* to *buf* without exceeding ``capacity - 1`` characters."""
    if max_chars is not None:
        text = text[:max_chars]
    room = max(0, capacity - 1 - len(buf))
    return buf + text[:room]


def strbuf_insert(buf: str, capacity: int, text: str, index: int) -> tuple[str, int]:
    """Insert *text* at *index*, keeping the result below *capacity*.

    Characters that no longer fit are dropped from the tail first, then from
    *text* itself. Returns the new string and the number of characters of
    *text* that were inserted.
    """
    limit = capacity - 1
    inserted = max(0, min(len(text), limit - index))
    head = buf[:index] + text[:inserted]
    tail = buf[index:][: max(0, limit - len(head))]
    return head + tail, inserted
