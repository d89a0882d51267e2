"""
File system helpers for crosskit.

Existence checks are the only source of truth for SDK state, so they are
kept side-effect free. Deletion goes through safe_rmtree(), which refuses to
touch anything outside the directory it is told to stay in.
"""

import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Optional, Union

from crosskit.core.exceptions import CrossKitError

IS_WINDOWS = os.name == "nt"


class FilesystemError(CrossKitError):
    """Base exception for filesystem operations."""

    pass


def dir_exists(path: Union[str, Path]) -> bool:
    """Return True if path exists and is a directory."""
    return Path(path).is_dir()


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Safe to call from several processes at once: an existing directory is
    never an error.

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_relative_to(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be strictly under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If path is not a directory or deletion fails

    Example:
        >>> safe_rmtree('/tmp/sdks/wasisdk', require_prefix='/tmp/sdks')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if path == require_prefix or not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, p, exc):
        # Git object files are read-only on Windows
        if IS_WINDOWS and not os.access(p, os.W_OK):
            os.chmod(p, stat.S_IWRITE)
            func(p)
        else:
            raise exc

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(
                path,
                onerror=lambda func, p, info: handle_remove_readonly(func, p, info[1]),
            )
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


__all__ = [
    "FilesystemError",
    "dir_exists",
    "ensure_directory",
    "is_relative_to",
    "safe_rmtree",
]
