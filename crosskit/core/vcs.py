"""
Git operations for repository-based SDKs.

Both operations shell out to the host's git, the same way SDK repositories
such as emsdk document their own setup.
"""

import logging
from pathlib import Path
from typing import Optional

from crosskit.core.process import run_process

logger = logging.getLogger(__name__)


def git_clone(url: str, parent_dir: Path, name: Optional[str] = None, depth: int = 1) -> Path:
    """
    Clone a repository into parent_dir.

    Args:
        url: Repository URL
        parent_dir: Directory the clone is created in
        name: Directory name of the clone (default: derived from the URL)
        depth: Clone depth, 0 for full history

    Returns:
        Path to the cloned repository

    Raises:
        SubprocessExitError: If git fails
    """
    if name is None:
        name = url.rstrip("/").rsplit("/", 1)[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]

    args = ["clone"]
    if depth > 0:
        args += ["--depth", str(depth)]
    args += ["--recursive", url, name]
    run_process("git", args, cwd=parent_dir)
    return parent_dir / name


def git_update(repo_dir: Path, url: str, force: bool = True) -> None:
    """
    Sync a local clone with the remote default branch.

    With force, local modifications to tracked files are discarded and the
    working tree is reset to exactly what the remote has. Untracked files
    (e.g. tools an SDK installed into its own tree) are left alone.

    Args:
        repo_dir: Path to the local clone
        url: Repository URL to fetch from
        force: Discard local modifications

    Raises:
        SubprocessExitError: If git fails
    """
    run_process("git", ["fetch", "--depth", "1", url], cwd=repo_dir)
    if force:
        run_process("git", ["reset", "--hard", "FETCH_HEAD"], cwd=repo_dir)
    else:
        run_process("git", ["merge", "--ff-only", "FETCH_HEAD"], cwd=repo_dir)


__all__ = ["git_clone", "git_update"]
