"""pi-prefs: in-place file editor view for the pi bottom pane."""

# Components
from pi.prefs.components import TextArea, TextAreaState

# Configuration
from pi.prefs.config import (
    get_preferences_path,
    load_preferences,
    open_preferences_editor,
)

# Errors and filesystem
from pi.prefs.errors import DirectoryCreateFailed, SaveError, WriteFailed
from pi.prefs.fs import FileSystem, LocalFileSystem

# Geometry and rendering
from pi.prefs.geometry import Rect

# Keybindings
from pi.prefs.keybindings import (
    DEFAULT_TEXTAREA_KEYBINDINGS,
    TextAreaAction,
    TextAreaKeybindingsManager,
    get_textarea_keybindings,
    set_textarea_keybindings,
)

# Keyboard input
from pi.prefs.keys import (
    KeyEvent,
    KeyModifiers,
    is_key_release,
    matches_key,
    parse_key_event,
    parse_key_id,
    split_key_sequences,
)
from pi.prefs.layout import PaneLayout, plan_layout, textarea_rect

# Host
from pi.prefs.pane import CURSOR_MARKER, BottomPane

# Editor view
from pi.prefs.preferences_editor import PreferencesEditorOptions, PreferencesEditorView
from pi.prefs.status import StatusKind, StatusMessage
from pi.prefs.surface import Span, Surface
from pi.prefs.theme import PaneTheme
from pi.prefs.view import BottomPaneView, CancellationEvent

__all__ = [
    # Components
    "TextArea",
    "TextAreaState",
    # Configuration
    "get_preferences_path",
    "load_preferences",
    "open_preferences_editor",
    # Errors and filesystem
    "DirectoryCreateFailed",
    "SaveError",
    "WriteFailed",
    "FileSystem",
    "LocalFileSystem",
    # Geometry and rendering
    "Rect",
    "PaneLayout",
    "plan_layout",
    "textarea_rect",
    "Span",
    "Surface",
    "PaneTheme",
    # Keybindings
    "DEFAULT_TEXTAREA_KEYBINDINGS",
    "TextAreaAction",
    "TextAreaKeybindingsManager",
    "get_textarea_keybindings",
    "set_textarea_keybindings",
    # Keys
    "KeyEvent",
    "KeyModifiers",
    "is_key_release",
    "matches_key",
    "parse_key_event",
    "parse_key_id",
    "split_key_sequences",
    # Host
    "CURSOR_MARKER",
    "BottomPane",
    "BottomPaneView",
    "CancellationEvent",
    # Editor view
    "PreferencesEditorOptions",
    "PreferencesEditorView",
    "StatusKind",
    "StatusMessage",
]
