"""Transient status line messages."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pi.prefs.surface import Span
from pi.prefs.theme import PaneTheme


class StatusKind(enum.Enum):
    INFO = "info"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    kind: StatusKind

    @classmethod
    def info(cls, text: str) -> StatusMessage:
        return cls(text, StatusKind.INFO)

    @classmethod
    def error(cls, text: str) -> StatusMessage:
        return cls(text, StatusKind.ERROR)

    @classmethod
    def warning(cls, text: str) -> StatusMessage:
        return cls(text, StatusKind.WARNING)

    def as_span(self, theme: PaneTheme) -> Span:
        """Return the message styled with its kind's colour."""
        style = {
            StatusKind.INFO: theme.info,
            StatusKind.ERROR: theme.error,
            StatusKind.WARNING: theme.warning,
        }[self.kind]
        return Span(self.text, style)
