"""
Tools command implementation.

Probes the external tools registered by plugins (tar, git, wasmtime, ...)
on the current host.
"""

import logging

from crosskit.cli.utils import FAIL_MARK, OK_MARK, WARN_MARK, safe_print
from crosskit.plugins import Host

logger = logging.getLogger(__name__)


def run(args, host: Host) -> int:
    """
    Run the tools command.

    Args:
        args: Parsed command-line arguments
        host: Configured plugin host

    Returns:
        0 if every required tool was found, 1 otherwise
    """
    results = host.tools.probe_all(host.host_platform)
    if not results:
        print("No tools registered")
        return 0

    missing_required = 0
    for result in results:
        probe = host.tools.get(result.name)
        if result.available:
            safe_print(f"{OK_MARK} {result.name}: found")
            continue
        mark = WARN_MARK if probe.optional else FAIL_MARK
        message = f" ({probe.not_found_message})" if probe.not_found_message else ""
        safe_print(f"{mark} {result.name}: NOT FOUND{message}")
        if not probe.optional:
            missing_required += 1

    return 1 if missing_required else 0
