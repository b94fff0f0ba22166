"""Locating and opening the preferences file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pi.prefs.fs import FileSystem
from pi.prefs.preferences_editor import PreferencesEditorOptions, PreferencesEditorView
from pi.prefs.theme import PaneTheme

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
PREFERENCES_FILE_NAME = "preferences.md"
PREFERENCES_PATH_ENV = "PI_PREFERENCES_PATH"


def _default_agent_dir() -> str:
    """Default agent data directory (~/.pi)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def get_preferences_path() -> Path:
    """Resolve the preferences file.

    ``PI_PREFERENCES_PATH`` overrides the default ``~/.pi/preferences.md``.
    """
    override = os.environ.get(PREFERENCES_PATH_ENV, "")
    if override:
        return Path(os.path.expanduser(override)).resolve()
    return Path(_default_agent_dir()) / PREFERENCES_FILE_NAME


def load_preferences(path: Path | str) -> str:
    """Read the preferences file verbatim; a missing file reads as empty."""
    try:
        return Path(path).read_bytes().decode("utf-8")
    except (FileNotFoundError, NotADirectoryError):
        logger.debug("No preferences file at %s", path)
        return ""


def open_preferences_editor(
    path: Path | str | None = None,
    *,
    fs: FileSystem | None = None,
    theme: PaneTheme | None = None,
    options: PreferencesEditorOptions | None = None,
) -> PreferencesEditorView:
    """Create an editor view for *path* (default: :func:`get_preferences_path`)."""
    target = Path(path) if path is not None else get_preferences_path()
    return PreferencesEditorView(
        target,
        load_preferences(target),
        fs=fs,
        theme=theme,
        options=options,
    )
