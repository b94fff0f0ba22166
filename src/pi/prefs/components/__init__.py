"""Prefs components."""

from pi.prefs.components.textarea import TextArea, TextAreaState, TextChunk, word_wrap_line

__all__ = [
    "TextArea",
    "TextAreaState",
    "TextChunk",
    "word_wrap_line",
]
