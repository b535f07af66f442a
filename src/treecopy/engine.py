"""Top-level copy entry point."""

from __future__ import annotations

import logging
from pathlib import Path

from treecopy.classify import PathClassifier
from treecopy.errors import (
    CopyIOError,
    DestinationNotDirectoryError,
    NotSupportedError,
    SourceNotFoundError,
)
from treecopy.filesystem import RealFileSystem
from treecopy.links import LinkResolver
from treecopy.options import CopyOptions
from treecopy.protocols import FileSystem
from treecopy.transfer import FileTransfer
from treecopy.types import CopyOutcome, EntryKind
from treecopy.walker import TreeWalker, WalkContext

logger = logging.getLogger(__name__)


class CopyEngine:
    """Copies files, directory trees and symlinks.

    Follows Separate Use from Creation: the constructor takes the
    filesystem to operate on; per-call components are built from the
    options passed to copy_recursive.
    """

    def __init__(self, filesystem: FileSystem) -> None:
        """Initialize the engine.

        Args:
            filesystem: Filesystem abstraction (required).

        Note:
            Use factory method `create()` for production code.
        """
        self.fs = filesystem
        self.classifier = PathClassifier(filesystem)

    @classmethod
    def create(cls, filesystem: FileSystem | None = None) -> CopyEngine:
        """Factory method for production instantiation.

        Args:
            filesystem: Optional filesystem abstraction (created if not provided).

        Returns:
            Configured CopyEngine instance.
        """
        return cls(filesystem=filesystem or RealFileSystem())

    def copy_recursive(
        self,
        source: Path | str,
        destination: Path | str,
        options: CopyOptions | None = None,
    ) -> CopyOutcome:
        """Copy a file, directory or symlink to a destination.

        A file lands at destination, or inside it if destination is an
        existing directory. A directory is copied to destination when that
        does not exist yet; otherwise into destination itself with
        content_only, or into destination/<source name> without it.

        A top-level symlink is dereferenced and handled as its target when
        follow_symlinks is set, and recreated as a link otherwise.

        Args:
            source: Path to copy.
            destination: Target path.
            options: Copy options; defaults are used if None.

        Returns:
            CopyOutcome summarizing the copy.

        Raises:
            SourceNotFoundError: If source does not exist.
            DestinationNotDirectoryError: If source is a directory and
                destination exists as something else.
            NotSupportedError: If source is a special file.
            DepthExceededError: If the tree is nested deeper than max_depth.
            SymlinkLoopError: If a followed link leads back to an ancestor.
            CopyIOError: On I/O failures that abort the copy.
        """
        options = options or CopyOptions()
        source = Path(source)
        destination = Path(destination)

        kind = self._classify(source)
        if kind is EntryKind.SYMLINK:
            if not options.follow_symlinks:
                return self._copy_link(source, destination, options)
            kind = self._classify(source, follow=True)

        if kind is EntryKind.MISSING:
            raise SourceNotFoundError(source)
        if kind is EntryKind.FILE:
            return self._copy_file(source, destination, options)
        if kind is EntryKind.DIRECTORY:
            return self._copy_tree(source, destination, options)
        raise NotSupportedError(source)

    def _classify(self, path: Path, follow: bool = False) -> EntryKind:
        try:
            return self.classifier.classify(path, follow=follow)
        except OSError as e:
            raise CopyIOError(path, e) from e

    def _leaf_destination(self, source: Path, destination: Path) -> Path:
        if self.fs.is_dir(destination):
            return destination / source.name
        return destination

    def _copy_file(self, source: Path, destination: Path, options: CopyOptions) -> CopyOutcome:
        outcome = CopyOutcome()
        target = self._leaf_destination(source, destination)
        transfer = FileTransfer(options, self.fs)
        try:
            if transfer.is_protected(target):
                outcome.record_skip(source, "destination exists")
            else:
                outcome.record_file(transfer.copy_file(source, target))
        except OSError as e:
            raise CopyIOError(source, e) from e
        return outcome

    def _copy_link(self, source: Path, destination: Path, options: CopyOptions) -> CopyOutcome:
        outcome = CopyOutcome()
        target = self._leaf_destination(source, destination)
        resolver = LinkResolver(options, self.fs, self.classifier)
        try:
            if resolver.recreate(source, target):
                outcome.symlinks_created += 1
            else:
                outcome.record_skip(source, "destination exists")
        except OSError as e:
            raise CopyIOError(source, e) from e
        return outcome

    def _copy_tree(self, source: Path, destination: Path, options: CopyOptions) -> CopyOutcome:
        dest_kind = self._classify(destination, follow=True)
        if dest_kind not in (EntryKind.MISSING, EntryKind.DIRECTORY):
            raise DestinationNotDirectoryError(destination)

        if dest_kind is EntryKind.MISSING or options.content_only:
            copy_root = destination
        else:
            # canonical name, so "proj/inner/.." lands under "proj"
            copy_root = destination / self._tree_name(source)

        context = WalkContext(root=source)
        walker = TreeWalker(options, self.fs, self.classifier)
        logger.debug("Copying tree %s -> %s", source, copy_root)
        try:
            walker.mirror(
                source, copy_root, context, parents=True, follow=copy_root == destination
            )
        except OSError as e:
            raise CopyIOError(copy_root, e) from e
        return context.outcome

    def _tree_name(self, source: Path) -> str:
        try:
            name = self.fs.realpath(source).name
        except OSError as e:
            raise CopyIOError(source, e) from e
        return name


def copy_recursive(
    source: Path | str,
    destination: Path | str,
    options: CopyOptions | None = None,
) -> CopyOutcome:
    """Copy source to destination with the real filesystem.

    See CopyEngine.copy_recursive for the placement rules and errors.
    """
    return CopyEngine.create().copy_recursive(source, destination, options)
