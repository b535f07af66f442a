"""Protocol definitions for core abstractions.

The engine components depend on these interfaces rather than on the
os module directly, so tests can substitute doubles (for example to
inject I/O failures that a privileged test runner would not hit).

All concrete implementations satisfy these protocols structurally.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

if TYPE_CHECKING:
    from treecopy.options import CopyOptions
    from treecopy.types import CopyOutcome


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations used by the copy engine."""

    def lstat(self, path: Path) -> os.stat_result:
        """Stat a path without following a final symlink.

        Raises:
            FileNotFoundError: If the path does not exist.
        """
        ...

    def stat(self, path: Path) -> os.stat_result:
        """Stat a path, following symlinks.

        Raises:
            FileNotFoundError: If the path or its link target does not exist.
        """
        ...

    def lexists(self, path: Path) -> bool:
        """Check if a path exists, counting dangling symlinks as existing."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory, following symlinks."""
        ...

    def realpath(self, path: Path) -> Path:
        """Return the canonical absolute path with all links resolved."""
        ...

    def iterdir(self, path: Path) -> list[Path]:
        """List the direct entries of a directory in listing order."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def unlink(self, path: Path) -> None:
        """Remove a file or symlink."""
        ...

    def readlink(self, path: Path) -> str:
        """Return the raw target text of a symlink."""
        ...

    def symlink(self, target: str, path: Path) -> None:
        """Create a symlink at path pointing at target."""
        ...

    def chmod(self, path: Path, mode: int) -> None:
        """Set permission bits on a path."""
        ...

    def open_read(self, path: Path) -> BinaryIO:
        """Open a file for binary reading."""
        ...

    def open_write(self, path: Path) -> BinaryIO:
        """Create or truncate a file for binary writing."""
        ...


@runtime_checkable
class TreeCopier(Protocol):
    """Protocol for the top-level copy operation."""

    def copy_recursive(
        self,
        source: Path | str,
        destination: Path | str,
        options: CopyOptions | None = None,
    ) -> CopyOutcome:
        """Copy a file, directory or symlink to a destination.

        Args:
            source: Path to copy.
            destination: Target path or existing directory.
            options: Copy options; defaults are used if None.

        Returns:
            CopyOutcome summarizing the copy.

        Raises:
            CopyError: On structural failures, or on the first I/O
                failure in fail-fast mode.
        """
        ...
