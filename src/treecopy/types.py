"""Shared data types for treecopy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    "CopyOutcome",
    "EntryError",
    "EntryKind",
    "ErrorMode",
    "SkippedEntry",
    "TraversalEntry",
]


class EntryKind(str, Enum):
    """Kind of a filesystem object, as seen without following links."""

    MISSING = "missing"
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    SPECIAL = "special"


class ErrorMode(str, Enum):
    """How per-entry I/O failures are handled during a walk."""

    FAIL_FAST = "fail_fast"
    RESILIENT = "resilient"


@dataclass(frozen=True)
class TraversalEntry:
    """One filesystem object encountered during a walk.

    Attributes:
        source: Path of the entry in the source tree.
        relative: Path relative to the walk root.
        destination: Path the entry is copied to.
        kind: Classified kind of the source entry.
    """

    source: Path
    relative: Path
    destination: Path
    kind: EntryKind


@dataclass(frozen=True)
class EntryError:
    """A per-entry failure recorded in resilient mode."""

    path: Path
    error: Exception

    def __str__(self) -> str:
        return f"{self.path}: {self.error}"


@dataclass(frozen=True)
class SkippedEntry:
    """An entry deliberately left out of the destination."""

    path: Path
    reason: str


@dataclass
class CopyOutcome:
    """Aggregate result of one copy_recursive call.

    Attributes:
        files_copied: Number of regular files written.
        bytes_copied: Total bytes written.
        symlinks_created: Number of symlinks recreated at the destination.
        directories_created: Number of destination directories created.
        skipped: Entries left out (special files, restricted or dangling
            links, existing destinations without overwrite).
        errors: Per-entry failures recorded in resilient mode.
    """

    files_copied: int = 0
    bytes_copied: int = 0
    symlinks_created: int = 0
    directories_created: int = 0
    skipped: list[SkippedEntry] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        """Number of recorded per-entry errors."""
        return len(self.errors)

    @property
    def success(self) -> bool:
        """True if no per-entry errors were recorded."""
        return not self.errors

    def record_file(self, nbytes: int) -> None:
        self.files_copied += 1
        self.bytes_copied += nbytes

    def record_skip(self, path: Path, reason: str) -> None:
        self.skipped.append(SkippedEntry(path=path, reason=reason))

    def record_error(self, path: Path, error: Exception) -> None:
        self.errors.append(EntryError(path=path, error=error))
