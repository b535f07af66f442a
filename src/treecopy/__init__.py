"""Recursive file and directory copy with symlink control."""

__version__ = "0.1.0"

from treecopy.engine import CopyEngine, copy_recursive
from treecopy.errors import (
    CopyError,
    CopyIOError,
    DepthExceededError,
    DestinationNotDirectoryError,
    NotSupportedError,
    SourceNotFoundError,
    SymlinkLoopError,
)
from treecopy.options import CopyOptions
from treecopy.protocols import FileSystem, TreeCopier
from treecopy.types import CopyOutcome, EntryKind, ErrorMode

__all__ = [
    "__version__",
    "CopyEngine",
    "CopyError",
    "CopyIOError",
    "CopyOptions",
    "CopyOutcome",
    "DepthExceededError",
    "DestinationNotDirectoryError",
    "EntryKind",
    "ErrorMode",
    "FileSystem",
    "NotSupportedError",
    "SourceNotFoundError",
    "SymlinkLoopError",
    "TreeCopier",
    "copy_recursive",
]
