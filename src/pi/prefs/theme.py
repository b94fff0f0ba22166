"""Styling for the preferences pane.

A theme is a set of ``Callable[[str], str]`` functions that wrap text in ANSI
SGR sequences.  Tests substitute identity functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


def _sgr(open_code: str, close_code: str) -> Callable[[str], str]:
    def style(text: str) -> str:
        return f"\x1b[{open_code}m{text}\x1b[{close_code}m"

    return style


bold = _sgr("1", "22")
dim = _sgr("2", "22")
red = _sgr("31", "39")
green = _sgr("32", "39")
yellow = _sgr("33", "39")
cyan = _sgr("36", "39")


@dataclass
class PaneTheme:
    """Colours used by ``PreferencesEditorView``.

    ``info``, ``error`` and ``warning`` style status lines of the matching
    kind; ``gutter`` styles the left-edge marker.
    """

    gutter: Callable[[str], str] = cyan
    title: Callable[[str], str] = bold
    path: Callable[[str], str] = dim
    hint: Callable[[str], str] = dim
    placeholder: Callable[[str], str] = dim
    info: Callable[[str], str] = green
    error: Callable[[str], str] = red
    warning: Callable[[str], str] = yellow
