"""
Child process execution for crosskit.

All external tools (tar, git, emsdk, wasmtime, emrun) are started through
run_process() so that failures surface uniformly as SubprocessExitError.
Output is not captured: child processes inherit the terminal, the same way
the SDK installers expect to report their own progress.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from crosskit.core.exceptions import SubprocessExitError

logger = logging.getLogger(__name__)

# Exit code reported when the executable itself cannot be started
EXIT_NOT_STARTED = 127


def run_process(
    cmd: Union[str, Path],
    args: Sequence[str] = (),
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    check: bool = True,
    use_shell_on_windows: bool = False,
) -> int:
    """
    Run a command to completion.

    Args:
        cmd: Executable name or path
        args: Arguments passed after the executable
        cwd: Working directory (default: current directory)
        env: Environment overrides merged on top of os.environ
        check: If True, raise on nonzero exit
        use_shell_on_windows: Run through cmd.exe on Windows (needed for .bat launchers)

    Returns:
        Exit code of the process

    Raises:
        SubprocessExitError: If the process cannot be started, or exits
            nonzero and check is True
    """
    command = [str(cmd), *args]
    logger.debug(f"Running: {' '.join(command)}" + (f" (in {cwd})" if cwd else ""))

    process_env = None
    if env:
        process_env = dict(os.environ)
        process_env.update(env)

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            env=process_env,
            shell=use_shell_on_windows and os.name == "nt",
        )
    except OSError as e:
        logger.debug(f"Failed to start {cmd}: {e}")
        raise SubprocessExitError(str(cmd), EXIT_NOT_STARTED) from e

    if check and result.returncode != 0:
        raise SubprocessExitError(" ".join(command), result.returncode)
    return result.returncode


def probe_process(cmd: str, args: Sequence[str] = ("--version",), timeout: int = 10) -> bool:
    """
    Check whether a command can be started and exits successfully.

    Never raises: any failure to run the command counts as unavailable.

    Args:
        cmd: Executable name, looked up on PATH
        args: Probe arguments (default: --version)
        timeout: Maximum seconds to wait for the probe

    Returns:
        True if the command ran and returned exit code 0
    """
    try:
        result = subprocess.run(
            [cmd, *args], capture_output=True, text=True, timeout=timeout
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Probe '{cmd}' failed: {e}")
        return False
    return result.returncode == 0


__all__ = ["run_process", "probe_process", "EXIT_NOT_STARTED"]
