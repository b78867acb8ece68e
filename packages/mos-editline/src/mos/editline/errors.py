"""Exceptions raised on the configuration side of the line editor.

Editing itself never raises for a refused edit; the session loop rings
the bell or ignores the key instead.
"""

from __future__ import annotations


class EditLineError(ValueError):
    """Base class for line editor configuration errors."""


class HotkeyError(EditLineError):
    """Invalid hotkey slot or macro."""
