"""Text area keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.prefs.keys import KeyEvent, KeyId, matches_key

TextAreaAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteWordForward",
    "deleteToLineStart",
    "deleteToLineEnd",
    # Text input
    "newLine",
    "tab",
]

TextAreaKeybindingsConfig = dict[TextAreaAction, KeyId | list[KeyId]]

DEFAULT_TEXTAREA_KEYBINDINGS: dict[TextAreaAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorWordLeft": ["alt+left", "ctrl+left", "alt+b"],
    "cursorWordRight": ["alt+right", "ctrl+right", "alt+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": ["backspace", "shift+backspace"],
    "deleteCharForward": ["delete", "ctrl+d", "shift+delete"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace", "ctrl+backspace"],
    "deleteWordForward": ["alt+d", "alt+delete"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
    # Text input
    "newLine": ["enter", "shift+enter"],
    "tab": "tab",
}


class TextAreaKeybindingsManager:
    """Maps key events to text area actions."""

    def __init__(
        self, config: TextAreaKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[TextAreaAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: TextAreaKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        for source in (DEFAULT_TEXTAREA_KEYBINDINGS, config):
            for action, keys in source.items():
                self._action_to_keys[action] = list(keys if isinstance(keys, list) else [keys])

    def action_for(self, event: KeyEvent) -> TextAreaAction | None:
        """Return the first action bound to *event*, if any."""
        for action, keys in self._action_to_keys.items():
            if any(matches_key(event, key) for key in keys):
                return action
        return None


_global_textarea_keybindings: TextAreaKeybindingsManager | None = None


def get_textarea_keybindings() -> TextAreaKeybindingsManager:
    global _global_textarea_keybindings
    if _global_textarea_keybindings is None:
        _global_textarea_keybindings = TextAreaKeybindingsManager()
    return _global_textarea_keybindings


def set_textarea_keybindings(manager: TextAreaKeybindingsManager) -> None:
    global _global_textarea_keybindings
    _global_textarea_keybindings = manager
