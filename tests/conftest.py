"""Shared fixtures: identity theme, in-memory filesystem, view factory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from pi.prefs.errors import DirectoryCreateFailed, WriteFailed
from pi.prefs.preferences_editor import PreferencesEditorView
from pi.prefs.theme import PaneTheme


def _identity(text: str) -> str:
    """Return *text* unchanged -- an identity styling function."""
    return text


def plain_pane_theme() -> PaneTheme:
    return PaneTheme(
        gutter=_identity,
        title=_identity,
        path=_identity,
        hint=_identity,
        placeholder=_identity,
        info=_identity,
        error=_identity,
        warning=_identity,
    )


class MemoryFileSystem:
    """``FileSystem`` that records writes and can be told to fail."""

    def __init__(self) -> None:
        self.files: dict[Path, bytes] = {}
        self.dirs: list[Path] = []
        self.fail_mkdir: OSError | None = None
        self.fail_write: OSError | None = None

    def create_dir_all(self, path: Path) -> None:
        if self.fail_mkdir is not None:
            raise DirectoryCreateFailed(path, self.fail_mkdir)
        self.dirs.append(path)

    def write(self, path: Path, data: bytes) -> None:
        if self.fail_write is not None:
            raise WriteFailed(path, self.fail_write)
        self.files[path] = data


@pytest.fixture
def plain_theme() -> PaneTheme:
    return plain_pane_theme()


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem()


@pytest.fixture
def make_view(memory_fs: MemoryFileSystem, plain_theme: PaneTheme) -> Callable[..., PreferencesEditorView]:
    """Build a view on ``/home/user/.pi/preferences.md`` backed by ``memory_fs``."""

    def factory(contents: str = "", path: str = "/home/user/.pi/preferences.md") -> PreferencesEditorView:
        return PreferencesEditorView(Path(path), contents, fs=memory_fs, theme=plain_theme)

    return factory
