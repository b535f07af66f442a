"""Single-file byte transfer."""

from __future__ import annotations

import logging
from pathlib import Path

from treecopy.filesystem import RealFileSystem
from treecopy.options import CopyOptions
from treecopy.protocols import FileSystem

logger = logging.getLogger(__name__)

# rwx triplets for owner, group and other; setuid/setgid/sticky are dropped
PERMISSION_MASK = 0o777


class FileTransfer:
    """Copies one regular file's bytes and permission bits.

    Ownership, timestamps and extended attributes are not preserved.
    """

    def __init__(self, options: CopyOptions, filesystem: FileSystem | None = None) -> None:
        self.options = options
        self.fs = filesystem or RealFileSystem()

    def is_protected(self, destination: Path) -> bool:
        """Check whether an existing destination must be left untouched."""
        return not self.options.overwrite and self.fs.lexists(destination)

    def copy_file(self, source: Path, destination: Path) -> int:
        """Copy a regular file.

        An existing destination is left untouched unless overwrite is set,
        in which case it is removed before writing. The copy is not
        in-place safe: a crash mid-transfer leaves a truncated file.

        Args:
            source: File to read.
            destination: File to create.

        Returns:
            Number of bytes written; 0 if the destination was left untouched.

        Raises:
            OSError: On open, read, write or chmod failure.
        """
        if self.fs.lexists(destination):
            if not self.options.overwrite:
                logger.debug("Keeping existing %s", destination)
                return 0
            self.fs.unlink(destination)
        else:
            self.fs.mkdir(destination.parent, parents=True, exist_ok=True)

        total = 0
        with self.fs.open_read(source) as reader, self.fs.open_write(destination) as writer:
            while True:
                chunk = reader.read(self.options.buffer_size)
                if not chunk:
                    break
                writer.write(chunk)
                total += len(chunk)

        mode = self.fs.stat(source).st_mode & PERMISSION_MASK
        self.fs.chmod(destination, mode)
        logger.debug("Copied %s -> %s (%d bytes)", source, destination, total)
        return total
