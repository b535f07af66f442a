"""Path classification without following links."""

from __future__ import annotations

import stat
from pathlib import Path

from treecopy.filesystem import RealFileSystem
from treecopy.protocols import FileSystem
from treecopy.types import EntryKind


def kind_from_mode(mode: int) -> EntryKind:
    """Map a stat st_mode value to an EntryKind.

    Block and character devices, FIFOs, sockets and anything else that is
    not a file, directory or link report as SPECIAL.
    """
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.SPECIAL


class PathClassifier:
    """Reports the kind of a filesystem path."""

    def __init__(self, filesystem: FileSystem | None = None) -> None:
        self.fs = filesystem or RealFileSystem()

    def classify(self, path: Path, follow: bool = False) -> EntryKind:
        """Classify a path.

        Args:
            path: Path to inspect.
            follow: Dereference a final symlink before classifying.

        Returns:
            The path's EntryKind. A missing path, or a dangling link when
            following, is MISSING.

        Raises:
            OSError: For failures other than the path not existing.
        """
        try:
            st = self.fs.stat(path) if follow else self.fs.lstat(path)
        except (FileNotFoundError, NotADirectoryError):
            return EntryKind.MISSING
        return kind_from_mode(st.st_mode)
