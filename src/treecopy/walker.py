"""Recursive directory traversal.

The walker mirrors a source directory into a destination directory one
level per call. Each call receives an explicit depth, and the set of
canonical directories on the current root-to-node path travels in a
per-invocation WalkContext. The set is a cycle guard for the active
path only: a directory reachable through two disjoint branches is
copied twice, while a link leading back to an ancestor raises
SymlinkLoopError.
"""

from __future__ import annotations

import errno
import logging
import stat
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from treecopy.classify import PathClassifier
from treecopy.errors import CopyIOError, DepthExceededError, SymlinkLoopError
from treecopy.filesystem import RealFileSystem
from treecopy.links import LinkResolver
from treecopy.options import CopyOptions
from treecopy.protocols import FileSystem
from treecopy.transfer import PERMISSION_MASK, FileTransfer
from treecopy.types import CopyOutcome, EntryKind, TraversalEntry

logger = logging.getLogger(__name__)


@dataclass
class WalkContext:
    """State scoped to one top-level copy.

    Attributes:
        root: Source directory the walk started from; symlink containment
            is checked against it.
        visited: Canonical paths of directories currently being walked.
        outcome: Counters and recorded errors for the copy.
    """

    root: Path
    visited: set[Path] = field(default_factory=set)
    outcome: CopyOutcome = field(default_factory=CopyOutcome)


class TreeWalker:
    """Mirrors a source directory tree into a destination directory."""

    def __init__(
        self,
        options: CopyOptions,
        filesystem: FileSystem | None = None,
        classifier: PathClassifier | None = None,
        transfer: FileTransfer | None = None,
        resolver: LinkResolver | None = None,
    ) -> None:
        self.options = options
        self.fs = filesystem or RealFileSystem()
        self.classifier = classifier or PathClassifier(self.fs)
        self.transfer = transfer or FileTransfer(options, self.fs)
        self.resolver = resolver or LinkResolver(options, self.fs, self.classifier)

    def walk(
        self,
        source_dir: Path,
        dest_dir: Path,
        context: WalkContext,
        depth: int = 0,
        relative: Path = Path(),
    ) -> None:
        """Copy the contents of source_dir into dest_dir.

        Args:
            source_dir: Directory to read.
            dest_dir: Existing directory to write into.
            context: Per-invocation state.
            depth: Nesting level of source_dir below the walk root.
            relative: Path of source_dir relative to the walk root.

        Raises:
            SymlinkLoopError: If source_dir is already being walked.
            DepthExceededError: If depth is greater than max_depth.
            CopyIOError: On the first I/O failure in fail-fast mode.
        """
        real = self.fs.realpath(source_dir)
        if real in context.visited:
            raise SymlinkLoopError(source_dir)
        if depth > self.options.max_depth:
            raise DepthExceededError(source_dir, f"depth {depth} > {self.options.max_depth}")

        context.visited.add(real)
        try:
            try:
                entries = self.fs.iterdir(source_dir)
            except OSError as e:
                self._fail(context, source_dir, e)
                return

            for path in entries:
                try:
                    entry = TraversalEntry(
                        source=path,
                        relative=relative / path.name,
                        destination=dest_dir / path.name,
                        kind=self.classifier.classify(path),
                    )
                    self._visit(entry, context, depth)
                except OSError as e:
                    self._fail(context, path, e)
        finally:
            context.visited.discard(real)

    def _visit(self, entry: TraversalEntry, context: WalkContext, depth: int) -> None:
        logger.debug("Visiting %s (%s)", entry.relative, entry.kind.value)

        if entry.kind is EntryKind.DIRECTORY:
            self._descend(entry.source, entry, context, depth)
        elif entry.kind is EntryKind.FILE:
            self._copy_file(entry.source, entry.destination, context)
        elif entry.kind is EntryKind.SYMLINK:
            if self.options.follow_symlinks:
                self._follow(entry, context, depth)
            elif self.resolver.recreate(entry.source, entry.destination):
                context.outcome.symlinks_created += 1
            else:
                context.outcome.record_skip(entry.source, "destination exists")
        elif entry.kind is EntryKind.SPECIAL:
            context.outcome.record_skip(entry.source, "special file")
        else:
            # removed between listing and stat
            context.outcome.record_skip(entry.source, "vanished")

    def _follow(self, entry: TraversalEntry, context: WalkContext, depth: int) -> None:
        resolved = self.resolver.resolve(entry.source)

        if self.options.restrict_symlinks and not self.resolver.is_contained(
            resolved.target, context.root
        ):
            logger.info("Skipping symlink outside source %s -> %s", entry.source, resolved.target)
            context.outcome.record_skip(entry.source, "link target outside source tree")
            return

        if resolved.kind is EntryKind.FILE:
            self._copy_file(resolved.target, entry.destination, context)
        elif resolved.kind is EntryKind.DIRECTORY:
            self._descend(resolved.target, entry, context, depth)
        elif resolved.kind is EntryKind.MISSING:
            context.outcome.record_skip(entry.source, "dangling link")
        else:
            context.outcome.record_skip(entry.source, "link to special file")

    def mirror(
        self,
        source_dir: Path,
        dest_dir: Path,
        context: WalkContext,
        depth: int = 0,
        relative: Path = Path(),
        parents: bool = False,
        follow: bool = False,
    ) -> None:
        """Create dest_dir if needed and copy source_dir's contents into it.

        A directory created here receives source_dir's permission bits once
        it has been filled. An existing directory lacking owner write or
        search permission gets them for the duration of the walk and has its
        original mode restored afterwards.

        Args:
            source_dir: Directory to read.
            dest_dir: Directory to write into.
            context: Per-invocation state.
            depth: Nesting level of source_dir below the walk root.
            relative: Path of source_dir relative to the walk root.
            parents: Create missing parents of dest_dir.
            follow: Accept dest_dir as a symlink to a directory.

        Raises:
            FileExistsError: If dest_dir exists and is not a directory.
            OSError: If dest_dir cannot be created or its mode changed.
        """
        if self.ensure_directory(dest_dir, context.outcome, parents=parents, follow=follow):
            self.walk(source_dir, dest_dir, context, depth, relative)
            self.fs.chmod(dest_dir, self.fs.stat(source_dir).st_mode & PERMISSION_MASK)
            return

        with self._owner_writable(dest_dir):
            self.walk(source_dir, dest_dir, context, depth, relative)

    def ensure_directory(
        self, path: Path, outcome: CopyOutcome, parents: bool = False, follow: bool = False
    ) -> bool:
        """Make sure path is a directory, creating it when missing.

        A symlink in the way is never written through. With overwrite it is
        replaced by a real directory; without, it is a conflict.

        Returns:
            True if the directory was created.

        Raises:
            FileExistsError: If path exists as something other than a directory.
        """
        kind = self.classifier.classify(path, follow=follow)
        if kind is EntryKind.DIRECTORY:
            return False
        if kind is EntryKind.SYMLINK and self.options.overwrite:
            logger.debug("Replacing symlink %s with a directory", path)
            self.fs.unlink(path)
        elif kind is not EntryKind.MISSING:
            raise FileExistsError(errno.EEXIST, "Destination exists and is not a directory", str(path))

        self.fs.mkdir(path, parents=parents)
        outcome.directories_created += 1
        return True

    @contextmanager
    def _owner_writable(self, directory: Path) -> Iterator[None]:
        mode = stat.S_IMODE(self.fs.stat(directory).st_mode)
        needed = mode | stat.S_IWUSR | stat.S_IXUSR
        if needed == mode:
            yield
            return

        logger.debug("Opening %s for writing (mode %o)", directory, mode)
        self.fs.chmod(directory, needed)
        try:
            yield
        finally:
            self.fs.chmod(directory, mode)

    def _descend(
        self, source_dir: Path, entry: TraversalEntry, context: WalkContext, depth: int
    ) -> None:
        self.mirror(source_dir, entry.destination, context, depth + 1, entry.relative)

    def _copy_file(self, source: Path, destination: Path, context: WalkContext) -> None:
        if self.transfer.is_protected(destination):
            context.outcome.record_skip(source, "destination exists")
            return
        context.outcome.record_file(self.transfer.copy_file(source, destination))

    def _fail(self, context: WalkContext, path: Path, error: OSError) -> None:
        if not self.options.resilient:
            raise CopyIOError(path, error) from error
        logger.warning("Failed to copy %s: %s", path, error)
        context.outcome.record_error(path, error)
