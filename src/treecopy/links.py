"""Symlink resolution, containment checks and link recreation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from treecopy.classify import PathClassifier
from treecopy.filesystem import RealFileSystem
from treecopy.options import CopyOptions
from treecopy.protocols import FileSystem
from treecopy.types import EntryKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLink:
    """Absolute target of a symlink and the kind of object it points at."""

    target: Path
    kind: EntryKind


class LinkResolver:
    """Resolves, checks and recreates symbolic links."""

    def __init__(
        self,
        options: CopyOptions,
        filesystem: FileSystem | None = None,
        classifier: PathClassifier | None = None,
    ) -> None:
        self.options = options
        self.fs = filesystem or RealFileSystem()
        self.classifier = classifier or PathClassifier(self.fs)

    def resolve(self, link: Path) -> ResolvedLink:
        """Resolve a symlink to its absolute target.

        Relative link text is joined to the link's parent directory. The
        target is classified after following any further links, so a chain
        ending at a file reports FILE and a dangling chain reports MISSING.

        Args:
            link: Path of the symlink.

        Returns:
            ResolvedLink with the absolute target path and its kind.
        """
        raw = Path(self.fs.readlink(link))
        target = raw if raw.is_absolute() else link.parent / raw
        target = target.absolute()
        return ResolvedLink(target=target, kind=self.classifier.classify(target, follow=True))

    def is_contained(self, target: Path, root: Path) -> bool:
        """Check that a target lies inside root once both are canonicalized.

        The comparison is per path component: /data/src-other is not
        inside /data/src.
        """
        real_target = self.fs.realpath(target)
        real_root = self.fs.realpath(root)
        return real_target.is_relative_to(real_root)

    def recreate(self, link: Path, destination: Path) -> bool:
        """Create a symlink at destination with the same raw target as link.

        Args:
            link: Existing symlink to reproduce.
            destination: Where to create the new link.

        Returns:
            True if a link was created, False if an existing destination
            was left untouched because overwrite is off.

        Raises:
            OSError: If reading, removing or creating the link fails.
        """
        raw = self.fs.readlink(link)
        if self.fs.lexists(destination):
            if not self.options.overwrite:
                logger.debug("Keeping existing %s", destination)
                return False
            self.fs.unlink(destination)
        else:
            self.fs.mkdir(destination.parent, parents=True, exist_ok=True)

        self.fs.symlink(raw, destination)
        logger.debug("Linked %s -> %s", destination, raw)
        return True
