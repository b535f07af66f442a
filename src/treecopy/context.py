"""Application context for dependency injection.

Separates object creation from object use so CLI commands can be
tested with doubles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from treecopy.config import ConfigManager
from treecopy.protocols import FileSystem, TreeCopier


def _default_filesystem() -> FileSystem:
    """Create the default filesystem implementation."""
    from treecopy.filesystem import RealFileSystem
    return RealFileSystem()


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for the services used by CLI commands.
    """

    config: ConfigManager
    engine: TreeCopier
    filesystem: FileSystem = field(default_factory=_default_filesystem)


def create_context(config_dir: Path | None = None) -> AppContext:
    """Factory for application dependencies.

    Args:
        config_dir: Override config directory (for testing).

    Returns:
        Configured AppContext with all dependencies.
    """
    from treecopy.engine import CopyEngine
    from treecopy.filesystem import RealFileSystem

    config = ConfigManager.create(config_dir) if config_dir else ConfigManager.create_default()
    filesystem = RealFileSystem()
    engine = CopyEngine.create(filesystem)

    return AppContext(config=config, engine=engine, filesystem=filesystem)
