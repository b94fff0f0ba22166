"""Keyboard input decoding for terminal applications.

Turns raw terminal input into ``KeyEvent`` values carrying a key code and a
modifier set.  Handles legacy control bytes, ESC-prefixed Alt combinations,
CSI/SS3 cursor and editing keys (with xterm modifier parameters), xterm
``modifyOtherKeys`` and the kitty ``CSI u`` keyboard protocol.

Key codes are single characters for text keys (``"s"``, ``" "``) and names
for everything else (``"enter"``, ``"escape"``, ``"pageUp"``).  Key
identifiers such as ``"ctrl+s"`` or ``"alt+backspace"`` name a code plus
modifiers and are used by keybinding tables.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from pi.prefs.utils import graphemes

KeyId = str


class KeyModifiers(enum.Flag):
    """Modifier bits, numbered as in the xterm / kitty encodings."""

    NONE = 0
    SHIFT = 1
    ALT = 2
    CONTROL = 4
    SUPER = 8


# Modifiers that turn a key into a shortcut rather than text input
ACCELERATORS = KeyModifiers.CONTROL | KeyModifiers.SUPER

_MODIFIER_NAMES: dict[str, KeyModifiers] = {
    "shift": KeyModifiers.SHIFT,
    "alt": KeyModifiers.ALT,
    "option": KeyModifiers.ALT,
    "ctrl": KeyModifiers.CONTROL,
    "control": KeyModifiers.CONTROL,
    "super": KeyModifiers.SUPER,
    "cmd": KeyModifiers.SUPER,
}

# Caps Lock / Num Lock bits reported by kitty
_LOCK_MASK = 64 + 128
_MODIFIER_MASK = 15


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press."""

    code: str
    modifiers: KeyModifiers = KeyModifiers.NONE
    raw: str = ""

    def has_accelerator(self) -> bool:
        """Return ``True`` when Control or Super is held."""
        return bool(self.modifiers & ACCELERATORS)

    def text(self) -> str | None:
        """Return the text this key would type, or ``None`` for non-text keys."""
        if self.modifiers & (ACCELERATORS | KeyModifiers.ALT):
            return None
        if len(graphemes(self.code)) != 1 or not self.code.isprintable():
            return None
        return self.code

    def __str__(self) -> str:
        names = [name for name, flag in (
            ("ctrl", KeyModifiers.CONTROL),
            ("super", KeyModifiers.SUPER),
            ("alt", KeyModifiers.ALT),
            ("shift", KeyModifiers.SHIFT),
        ) if self.modifiers & flag]
        code = "space" if self.code == " " else self.code
        return "+".join([*names, code])


# ---------------------------------------------------------------------------
# Key tables
# ---------------------------------------------------------------------------

_NAMED_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "space": " ",
    "pageup": "pageUp",
    "pagedown": "pageDown",
    "del": "delete",
    "ins": "insert",
}

# Final byte of CSI / SS3 sequences
_FINAL_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# ``CSI <n> ~`` sequences
_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

# Functional codepoints used by kitty and modifyOtherKeys
_CODEPOINT_KEYS: dict[int, str] = {
    9: "tab",
    13: "enter",
    27: "escape",
    127: "backspace",
}

# Legacy single-byte keys
_LEGACY_KEYS: dict[str, KeyEvent] = {
    "\x1b": KeyEvent("escape"),
    "\r": KeyEvent("enter"),
    "\n": KeyEvent("enter"),
    "\t": KeyEvent("tab"),
    "\x7f": KeyEvent("backspace"),
    "\x08": KeyEvent("backspace"),
    "\x00": KeyEvent(" ", KeyModifiers.CONTROL),
    "\x1c": KeyEvent("\\", KeyModifiers.CONTROL),
    "\x1d": KeyEvent("]", KeyModifiers.CONTROL),
    "\x1e": KeyEvent("^", KeyModifiers.CONTROL),
    "\x1f": KeyEvent("-", KeyModifiers.CONTROL),
}

_CSI_RE = re.compile(r"^\x1b\[(\d*)(?:;(\d+)(?::(\d+))?)?([ABCDHF~PQRS])$")
_SS3_RE = re.compile(r"^\x1bO([ABCDHFPQRS])$")
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::(\d*))?(?::(\d+))?(?:;(\d+))?(?::(\d+))?u$"
)
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")
_RELEASE_RE = re.compile(r"^\x1b\[[\d:;]*:3[u~ABCDHFPQRS]$")

_KITTY_EVENT_RELEASE = 3


def _modifiers_from_param(value: str | None) -> KeyModifiers:
    """Decode an xterm/kitty modifier parameter (``1 + bits``)."""
    if not value:
        return KeyModifiers.NONE
    bits = max(0, int(value) - 1) & ~_LOCK_MASK
    return KeyModifiers(bits & _MODIFIER_MASK)


def _key_for_codepoint(codepoint: int) -> str | None:
    named = _CODEPOINT_KEYS.get(codepoint)
    if named is not None:
        return named
    if codepoint < 32:
        return None
    try:
        return chr(codepoint)
    except (ValueError, OverflowError):
        return None


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def is_key_release(data: str) -> bool:
    """Return ``True`` if *data* is a kitty key-release event."""
    if "\x1b[200~" in data:
        return False
    return bool(_RELEASE_RE.match(data))


def _is_complete_sequence(seq: str) -> bool:
    """Return ``True`` once *seq* (starting with ESC) needs no more bytes."""
    if len(seq) == 1:
        return False
    intro = seq[1]
    if intro == "[":
        # CSI ends at a final byte in 0x40-0x7E
        return len(seq) >= 3 and 0x40 <= ord(seq[-1]) <= 0x7E
    if intro in "]P_":
        # OSC / DCS / APC end at ST (or BEL for OSC and APC)
        return seq.endswith("\x1b\\") or (intro != "P" and seq.endswith("\x07"))
    if intro == "O":
        return len(seq) >= 3
    if intro == "\x1b":
        # Alt-prefixed escape sequence
        return _is_complete_sequence(seq[1:])
    # ESC followed by one character: Alt held
    return True


def split_key_sequences(data: str) -> list[str]:
    """Split one read of terminal input into individual key sequences.

    Plain text is split into graphemes and escape sequences are kept whole.
    A trailing sequence that never completes is returned as it is.
    """
    sequences: list[str] = []
    pos = 0
    while pos < len(data):
        if data[pos] != "\x1b":
            end = data.find("\x1b", pos)
            if end == -1:
                end = len(data)
            sequences.extend(graphemes(data[pos:end]))
            pos = end
            continue

        end = pos + 1
        while end <= len(data) and not _is_complete_sequence(data[pos:end]):
            end += 1
        if end > len(data):
            sequences.append(data[pos:])
            break
        sequences.append(data[pos:end])
        pos = end
    return sequences


def _parse_kitty(data: str) -> KeyEvent | None:
    m = _KITTY_CSI_U_RE.match(data)
    if not m:
        return None
    if m.group(5) and int(m.group(5)) == _KITTY_EVENT_RELEASE:
        return None
    modifiers = _modifiers_from_param(m.group(4))
    codepoint = int(m.group(1))
    if modifiers & KeyModifiers.SHIFT and m.group(2):
        codepoint = int(m.group(2))
    code = _key_for_codepoint(codepoint)
    if code is None:
        return None
    if modifiers & KeyModifiers.SHIFT and not m.group(2) and code.isalpha() and len(code) == 1:
        code = code.upper()
    return KeyEvent(code, modifiers, data)


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Decode one key from raw terminal input.

    Returns ``None`` when *data* is not exactly one recognisable key (for
    example a run of typed text, a paste, or a key-release event).
    """
    if not data:
        return None

    legacy = _LEGACY_KEYS.get(data)
    if legacy is not None:
        return KeyEvent(legacy.code, legacy.modifiers, data)

    if len(data) == 1:
        cp = ord(data)
        if 1 <= cp <= 26:
            return KeyEvent(chr(cp + 96), KeyModifiers.CONTROL, data)
        if data.isprintable():
            return KeyEvent(data, KeyModifiers.NONE, data)
        return None

    if not data.startswith("\x1b"):
        if len(graphemes(data)) == 1 and data.isprintable():
            return KeyEvent(data, KeyModifiers.NONE, data)
        return None

    if data == "\x1b[Z":
        return KeyEvent("tab", KeyModifiers.SHIFT, data)

    m = _CSI_RE.match(data)
    if m:
        number, modifier, event_type, final = m.groups()
        if event_type and int(event_type) == _KITTY_EVENT_RELEASE:
            return None
        if final == "~":
            code = _TILDE_KEYS.get(int(number)) if number else None
        else:
            code = _FINAL_KEYS.get(final)
        if code is None:
            return None
        return KeyEvent(code, _modifiers_from_param(modifier), data)

    m = _SS3_RE.match(data)
    if m:
        return KeyEvent(_FINAL_KEYS[m.group(1)], KeyModifiers.NONE, data)

    kitty = _parse_kitty(data)
    if kitty is not None:
        return kitty

    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        code = _key_for_codepoint(int(m.group(2)))
        if code is None:
            return None
        return KeyEvent(code, _modifiers_from_param(m.group(1)), data)

    # ESC-prefixed key: Alt held
    inner = parse_key_event(data[1:])
    if inner is None:
        return None
    return KeyEvent(inner.code, inner.modifiers | KeyModifiers.ALT, data)


# ---------------------------------------------------------------------------
# Key identifiers
# ---------------------------------------------------------------------------


def parse_key_id(key_id: KeyId) -> tuple[str, KeyModifiers] | None:
    """Split a key identifier such as ``"ctrl+shift+s"`` into code and modifiers."""
    if not key_id:
        return None
    parts = key_id.split("+")
    # "ctrl++" names the plus key
    if key_id.endswith("++"):
        parts = [*parts[:-2], "+"]
    *modifier_names, key = parts
    modifiers = KeyModifiers.NONE
    for name in modifier_names:
        flag = _MODIFIER_NAMES.get(name.lower())
        if flag is None:
            return None
        modifiers |= flag
    if not key:
        return None
    code = _NAMED_ALIASES.get(key.lower(), key)
    if len(code) == 1:
        code = code.lower()
    return code, modifiers


def matches_key(event: KeyEvent, key_id: KeyId) -> bool:
    """Return ``True`` if *event* is the key named by *key_id*.

    Letters compare case-insensitively; modifiers must match exactly.
    """
    parsed = parse_key_id(key_id)
    if parsed is None:
        return False
    code, modifiers = parsed
    event_code = event.code.lower() if len(event.code) == 1 else event.code
    return event_code == code and event.modifiers == modifiers
