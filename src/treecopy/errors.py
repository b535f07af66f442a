"""Typed exceptions raised by the copy engine.

Each error carries the offending path and an exit code the CLI maps
to the process status.
"""

from __future__ import annotations

from pathlib import Path


class CopyError(Exception):
    """Base exception for copy failures."""

    exit_code = 1
    message = "Copy failed"

    def __init__(self, path: Path | str, detail: str | None = None) -> None:
        self.path = Path(path)
        self.detail = detail
        text = f"{self.message}: {self.path}"
        if detail:
            text = f"{text} ({detail})"
        super().__init__(text)


class SourceNotFoundError(CopyError):
    """Source path does not exist."""

    exit_code = 2
    message = "Source not found"


class DestinationNotDirectoryError(CopyError):
    """Destination exists but a directory is required."""

    exit_code = 3
    message = "Destination is not a directory"


class NotSupportedError(CopyError):
    """Source is a special file type that cannot be copied."""

    exit_code = 4
    message = "Unsupported source type"


class DepthExceededError(CopyError):
    """Directory nesting exceeded the configured maximum depth."""

    exit_code = 5
    message = "Maximum depth exceeded"


class SymlinkLoopError(CopyError):
    """A followed link leads back to a directory already being walked."""

    exit_code = 6
    message = "Symlink loop detected"


class CopyIOError(CopyError):
    """Low-level I/O failure on a single path."""

    exit_code = 7
    message = "I/O error"

    def __init__(self, path: Path | str, error: OSError) -> None:
        self.error = error
        super().__init__(path, error.strerror or str(error))
