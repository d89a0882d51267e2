"""
Cross-process locking for SDK directories.

Each SDK lifecycle manager owns exactly one directory under the SDK root, so
managers of different SDKs never contend. The lock only keeps two crosskit
processes from installing, updating or deleting the same SDK at once.

Usage:
    from crosskit.core.locking import sdk_lock

    with sdk_lock(sdk_root, "wasisdk"):
        ...  # install / update / uninstall
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from crosskit.core.exceptions import CrossKitError
from crosskit.core.filesystem import ensure_directory

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class SdkBusyError(CrossKitError):
    """Raised when another process holds the lock of an SDK directory."""

    def __init__(self, sdk_name: str, timeout: float):
        self.sdk_name = sdk_name
        self.timeout = timeout
        super().__init__(
            f"could not lock {sdk_name} after {timeout}s, "
            "another crosskit process may be using it"
        )


def lock_path(sdk_root: Path, sdk_name: str) -> Path:
    """Get the lock file path of an SDK directory."""
    return Path(sdk_root) / f".{sdk_name}.lock"


@contextmanager
def sdk_lock(sdk_root: Path, sdk_name: str, timeout: float = DEFAULT_TIMEOUT):
    """
    Hold the lock of an SDK directory for the duration of the block.

    The SDK root is created if absent.

    Args:
        sdk_root: Shared SDK root directory
        sdk_name: Normalized directory name of the SDK
        timeout: Maximum seconds to wait for the lock

    Raises:
        SdkBusyError: If the lock cannot be acquired within timeout
    """
    ensure_directory(sdk_root)
    path = lock_path(sdk_root, sdk_name)
    lock = FileLock(str(path), timeout=timeout)
    try:
        with lock:
            logger.debug(f"Acquired SDK lock: {path}")
            yield
    except Timeout as e:
        raise SdkBusyError(sdk_name, timeout) from e
    logger.debug(f"Released SDK lock: {path}")


__all__ = ["SdkBusyError", "lock_path", "sdk_lock", "DEFAULT_TIMEOUT"]
