"""Filesystem collaborator used when saving."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from pi.prefs.errors import DirectoryCreateFailed, WriteFailed


class FileSystem(Protocol):
    """The two filesystem operations a save needs.

    Implementations raise ``DirectoryCreateFailed`` / ``WriteFailed``.
    """

    def create_dir_all(self, path: Path) -> None: ...

    def write(self, path: Path, data: bytes) -> None: ...


class LocalFileSystem:
    """``FileSystem`` backed by the local disk."""

    def create_dir_all(self, path: Path) -> None:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateFailed(path, e) from e

    def write(self, path: Path, data: bytes) -> None:
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            raise WriteFailed(path, e) from e
