"""Shared test fixtures."""

from __future__ import annotations

import errno
import os
import stat
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from treecopy.filesystem import RealFileSystem


def write_file(path: Path, content: str = "x", mode: int | None = None) -> Path:
    """Create a file with its parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mode is not None:
        path.chmod(mode)
    return path


def snapshot_tree(root: Path) -> dict[str, tuple[str, str | None, int]]:
    """Map each relative path under root to (kind, content or link text, mode bits)."""
    result: dict[str, tuple[str, str | None, int]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in sorted(dirnames + filenames):
            path = Path(dirpath) / name
            rel = str(path.relative_to(root))
            st = path.lstat()
            mode = stat.S_IMODE(st.st_mode)
            if path.is_symlink():
                result[rel] = ("symlink", os.readlink(path), 0)
            elif path.is_dir():
                result[rel] = ("dir", None, mode)
            else:
                result[rel] = ("file", path.read_text(), mode)
    return result


@pytest.fixture
def src_tree(tmp_path: Path) -> Path:
    """Create src/{a.txt, sub/b.txt}."""
    src = tmp_path / "src"
    write_file(src / "a.txt", "alpha")
    write_file(src / "sub" / "b.txt", "beta")
    return src


@pytest.fixture
def nested_tree(tmp_path: Path) -> Callable[[int], Path]:
    """Factory creating a tree whose deepest directory sits at the given depth."""

    def _make(depth: int) -> Path:
        root = tmp_path / "deep"
        current = root
        for level in range(depth):
            current = current / f"d{level + 1}"
        write_file(current / "leaf.txt", "leaf")
        return root

    return _make


@pytest.fixture
def failing_filesystem() -> Callable[..., RealFileSystem]:
    """Factory for a real filesystem whose chosen method fails for one path name."""

    def _make(method: str, name: str, error: OSError | None = None) -> RealFileSystem:
        fs = RealFileSystem()
        original = getattr(fs, method)
        exc = error or PermissionError(13, "Permission denied")

        def _wrapped(path: Path, *args, **kwargs):
            if Path(path).name == name:
                raise exc
            return original(path, *args, **kwargs)

        setattr(fs, method, _wrapped)
        return fs

    return _make


class OwnerPermissionFileSystem(RealFileSystem):
    """Real filesystem that enforces directory write permission even for root."""

    def unlink(self, path: Path) -> None:
        if not os.stat(path.parent).st_mode & stat.S_IWUSR:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        super().unlink(path)


@pytest.fixture
def owner_permission_filesystem() -> OwnerPermissionFileSystem:
    """Filesystem that refuses to unlink inside directories without owner write."""
    return OwnerPermissionFileSystem()


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    """
    fs = MagicMock()
    fs.lexists.return_value = False
    fs.is_dir.return_value = False
    return fs


@pytest.fixture
def mock_app_context() -> MagicMock:
    """Create a complete mock AppContext for CLI testing."""
    from treecopy.context import AppContext

    ctx = MagicMock(spec=AppContext)
    ctx.config = MagicMock()
    ctx.engine = MagicMock()
    ctx.filesystem = MagicMock()
    return ctx


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Expose write_file as a fixture."""
    return write_file


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, tuple[str, str | None, int]]]:
    """Expose snapshot_tree as a fixture."""
    return snapshot_tree
