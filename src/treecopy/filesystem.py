"""Filesystem abstraction for testability.

The RealFileSystem implementation wraps standard library operations.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO


class RealFileSystem:
    """Production filesystem implementation.

    Wraps os and pathlib operations.
    Satisfies the FileSystem protocol structurally.
    """

    def lstat(self, path: Path) -> os.stat_result:
        """Stat a path without following a final symlink."""
        return os.lstat(path)

    def stat(self, path: Path) -> os.stat_result:
        """Stat a path, following symlinks."""
        return os.stat(path)

    def lexists(self, path: Path) -> bool:
        """Check if a path exists without following symlinks."""
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def realpath(self, path: Path) -> Path:
        """Resolve a path to its canonical form."""
        return Path(os.path.realpath(path))

    def iterdir(self, path: Path) -> list[Path]:
        """List directory entries."""
        return list(path.iterdir())

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def unlink(self, path: Path) -> None:
        """Remove a file or symlink."""
        path.unlink()

    def readlink(self, path: Path) -> str:
        """Read a symlink's raw target."""
        return os.readlink(path)

    def symlink(self, target: str, path: Path) -> None:
        """Create a symlink."""
        os.symlink(target, path)

    def chmod(self, path: Path, mode: int) -> None:
        """Change permission bits."""
        os.chmod(path, mode)

    def open_read(self, path: Path) -> BinaryIO:
        """Open a file for reading bytes."""
        return open(path, "rb")

    def open_write(self, path: Path) -> BinaryIO:
        """Open a file for writing bytes."""
        return open(path, "wb")
