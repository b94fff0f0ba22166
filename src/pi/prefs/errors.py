"""Errors raised while persisting the edited file."""

from __future__ import annotations

from pathlib import Path


class SaveError(Exception):
    """Writing the buffer to disk failed.

    ``str(error)`` is the message of the underlying ``OSError`` so it can be
    shown to the user as-is.
    """

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(str(cause))
        self.path = path
        self.cause = cause


class DirectoryCreateFailed(SaveError):
    """The parent directory of the target file could not be created."""


class WriteFailed(SaveError):
    """The target file could not be written."""
